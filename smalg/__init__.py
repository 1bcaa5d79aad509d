from .crypto.keys import KeyPair, KeyPairGenerator, ScalarSampling, generate_key_pair
from .crypto.padding import BLOCK_SIZE, SM4Padding
from .crypto.sm2 import (
    AffinePointEngine,
    CurveDomain,
    GmsslPointEngine,
    PointEngine,
    build_domain_parameters,
    get_global_curve,
    get_global_g,
    get_global_n,
)
from .crypto.utils import SMCodec
from .errors import (
    DomainConstructionError,
    MalformedHexError,
    MalformedTextError,
    PaddingError,
    SMAlgError,
)
