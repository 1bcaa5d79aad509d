import dataclasses
import enum
import logging
import secrets
from typing import Optional, Tuple, Union

from .sm2 import CurveDomain, get_global_curve
from .utils import SMCodec

logger = logging.getLogger(__name__)

_rng = secrets.SystemRandom()


class ScalarSampling(enum.Enum):
    # r mod (n - 1) + 1: slightly biased, matches existing key material
    MODULO = "modulo"
    # 1 + randrange(n - 1): uniform over [1, n - 1]
    REJECTION = "rejection"


@dataclasses.dataclass(frozen=True)
class KeyPair:
    """SM2 key pair as hex: 64-char private scalar, 130-char 04||X||Y point."""

    private_key: str
    public_key: str

    @property
    def d(self) -> int:
        return int(self.private_key, 16)

    @property
    def point(self) -> Tuple[int, int]:
        width = (len(self.public_key) - 2) // 2
        return (
            int(self.public_key[2 : 2 + width], 16),
            int(self.public_key[2 + width :], 16),
        )


class KeyPairGenerator:
    """
    Draws private scalars and derives public points on a curve.

    The curve defaults to the process-wide SM2 curve; pass one explicitly to
    work with a different parameter set or engine.
    """

    def __init__(
        self,
        curve: Optional[CurveDomain] = None,
        sampling: ScalarSampling = ScalarSampling.MODULO,
        rng=None,
    ):
        self.curve = curve or get_global_curve()
        self.sampling = sampling
        self.rng = rng or _rng

    def _draw_scalar(self) -> int:
        n = self.curve.n
        if self.sampling is ScalarSampling.REJECTION:
            return 1 + self.rng.randrange(n - 1)
        r = self.rng.getrandbits(n.bit_length())
        return r % (n - 1) + 1

    def from_private_key(self, private_key: Union[int, str]) -> KeyPair:
        """
        Derive the key pair for an existing private scalar.

        Args:
            private_key: Scalar as int or hex string.

        Raises:
            ValueError: If the scalar is outside [1, n - 1].
            MalformedHexError: If the hex string has non-hex characters.
        """
        if isinstance(private_key, str):
            d = int.from_bytes(SMCodec.hex_to_bytes(private_key), "big")
        else:
            d = private_key
        if not 1 <= d <= self.curve.n - 1:
            raise ValueError("Private key is out of valid SM2 range")

        width = self.curve.byte_length * 2
        P = self.curve.multiply(d)
        return KeyPair(
            private_key=SMCodec.left_pad("%x" % d, width),
            public_key=self.curve.encode_point_hex(P),
        )

    def generate(self) -> KeyPair:
        d = self._draw_scalar()
        logger.debug("Generating SM2 key pair (sampling=%s)", self.sampling.value)
        return self.from_private_key(d)


def generate_key_pair(
    curve: Optional[CurveDomain] = None,
    sampling: ScalarSampling = ScalarSampling.MODULO,
    rng=None,
) -> KeyPair:
    """Generate a fresh SM2 key pair."""
    return KeyPairGenerator(curve, sampling, rng).generate()
