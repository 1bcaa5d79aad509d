"""
SM2 curve domain parameters, point arithmetic engines and the process-wide
curve registry.

Points are affine ``(x, y)`` tuples of ints; the point at infinity is ``None``.
"""
import dataclasses
import logging
import os
import threading
from typing import Optional, Protocol, Tuple

from gmssl import sm2 as gmssl_sm2

from ..errors import DomainConstructionError
from .utils import SMCodec

logger = logging.getLogger(__name__)

# SM2 Curve Parameters (GB/T 32918.5)
SM2_P_HEX = "FFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF00000000FFFFFFFFFFFFFFFF"
SM2_A_HEX = "FFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF00000000FFFFFFFFFFFFFFFC"
SM2_B_HEX = "28E9FA9E9D9F5E344D5A9E4BCF6509A7F39789F515AB8F92DDBCBD414D940E93"
SM2_Gx_HEX = "32C4AE2C1F1981195F9904466A39C9948FE30BBFF2660BE1715A4589334C74C7"
SM2_Gy_HEX = "BC3736A2F4F6779C59BDCEE36B692153D0A9877CC62A474002DF32E52139F0A0"
SM2_N_HEX = "FFFFFFFEFFFFFFFFFFFFFFFFFFFFFFFF7203DF6B21C6052B53BBF40939D54123"

UNCOMPRESSED_TAG = "04"
ENGINE_ENV_VAR = "SMALG_POINT_ENGINE"
DEFAULT_ENGINE = "affine"

Point = Optional[Tuple[int, int]]


class PointEngine(Protocol):
    """Point arithmetic the curve core relies on."""

    def add(self, P: Point, Q: Point) -> Point: ...

    def multiply(self, k: int, P: Point) -> Point: ...


class AffinePointEngine:
    """
    Pure Python affine arithmetic over y^2 = x^3 + a*x + b (mod p).
    """

    def __init__(self, p: int, a: int):
        self.p = p
        self.a = a

    def inverse(self, v):
        return pow(v, self.p - 2, self.p)

    def add(self, P, Q):
        if P is None:
            return Q
        if Q is None:
            return P

        x1, y1 = P
        x2, y2 = Q

        if x1 == x2 and (y1 + y2) % self.p == 0:
            return None

        if x1 == x2:
            m = (3 * x1 * x1 + self.a) * self.inverse(2 * y1)
        else:
            m = (y2 - y1) * self.inverse(x2 - x1)

        m = m % self.p
        x3 = (m * m - x1 - x2) % self.p
        y3 = (m * (x1 - x3) - y1) % self.p
        return (x3, y3)

    def multiply(self, k, P):
        """Double-and-add k * P over this engine's p and a; None is infinity."""
        R = None
        for i in range(k.bit_length() - 1, -1, -1):
            R = self.add(R, R)
            if (k >> i) & 1:
                R = self.add(R, P)
        return R


class GmsslPointEngine(AffinePointEngine):
    """
    Delegates scalar multiplication to gmssl's Jacobian implementation.
    This goes through CryptSM2._kg, which is private gmssl API; the
    dependency is pinned below gmssl 4 for that reason.

    gmssl's doubling formula assumes a = -3 (mod p), which holds for SM2.
    Scalars are reduced modulo n before being handed over.
    """

    def __init__(self, p: int, a: int, b: int, g: Tuple[int, int], n: int):
        super().__init__(p, a)
        self.n = n
        self._width = len("%x" % n)
        self._form = "%%0%dx" % self._width
        ecc_table = {
            "n": self._form % n,
            "p": self._form % p,
            "g": self._encode(g),
            "a": self._form % a,
            "b": self._form % b,
        }
        self._crypt = gmssl_sm2.CryptSM2(
            private_key="", public_key="", ecc_table=ecc_table
        )

    def _encode(self, P):
        return (self._form % P[0]) + (self._form % P[1])

    def multiply(self, k, P):
        if P is None:
            return None
        k = k % self.n
        if k == 0:
            return None
        result = self._crypt._kg(k, self._encode(P))
        if result is None:
            return None
        return (int(result[: self._width], 16), int(result[self._width :], 16))


@dataclasses.dataclass(frozen=True)
class CurveDomain:
    """Immutable SM2 domain parameters bound to a point engine."""

    p: int
    a: int
    b: int
    gx: int
    gy: int
    n: int
    engine: PointEngine = dataclasses.field(compare=False, repr=False)

    @property
    def g(self) -> Tuple[int, int]:
        return (self.gx, self.gy)

    @property
    def byte_length(self) -> int:
        return (self.p.bit_length() + 7) // 8

    def contains_point(self, P: Point) -> bool:
        """Check the curve equation for P; infinity counts as on the curve."""
        if P is None:
            return True
        x, y = P
        if not (0 <= x < self.p and 0 <= y < self.p):
            return False
        return (y * y - (x * x * x + self.a * x + self.b)) % self.p == 0

    def decode_point_hex(self, point_hex: str) -> Tuple[int, int]:
        """
        Decode an uncompressed point ``04 || X || Y``.

        Raises:
            MalformedHexError: If the string is not hex.
            ValueError: If the tag, length or coordinates are invalid.
        """
        width = self.byte_length * 2
        if len(point_hex) != 2 + 2 * width:
            raise ValueError(
                f"Uncompressed point must be {2 + 2 * width} hex chars, got {len(point_hex)}"
            )
        if point_hex[:2] != UNCOMPRESSED_TAG:
            raise ValueError(f"Unsupported point format: {point_hex[:2]}")
        coords = SMCodec.hex_to_bytes(point_hex[2:])
        x = int.from_bytes(coords[: self.byte_length], "big")
        y = int.from_bytes(coords[self.byte_length :], "big")

        if not self.contains_point((x, y)):
            raise ValueError("Point is not on the SM2 curve")
        return (x, y)

    def encode_point_hex(self, P: Tuple[int, int]) -> str:
        width = self.byte_length * 2
        return (
            UNCOMPRESSED_TAG
            + SMCodec.left_pad("%x" % P[0], width)
            + SMCodec.left_pad("%x" % P[1], width)
        )

    def add(self, P: Point, Q: Point) -> Point:
        return self.engine.add(P, Q)

    def multiply(self, k: int, P: Point = None) -> Point:
        """k * P, with P defaulting to the base point G."""
        if P is None:
            P = self.g
        return self.engine.multiply(k, P)


def make_engine(name: str, p: int, a: int, b: int, g: Tuple[int, int], n: int) -> PointEngine:
    if name == "affine":
        return AffinePointEngine(p, a)
    if name == "gmssl":
        return GmsslPointEngine(p, a, b, g, n)
    raise ValueError(f"Unknown point engine: {name!r}")


def build_domain_parameters(engine: Optional[str] = None) -> CurveDomain:
    """
    Build the SM2 curve from the fixed literals.

    Args:
        engine: Point engine name ("affine" or "gmssl"); defaults to affine.

    Returns:
        CurveDomain with G verified on the curve and of order n.

    Raises:
        DomainConstructionError: If the literals are inconsistent.
    """
    p = int(SM2_P_HEX, 16)
    a = int(SM2_A_HEX, 16)
    b = int(SM2_B_HEX, 16)
    n = int(SM2_N_HEX, 16)
    engine_name = engine or DEFAULT_ENGINE

    # Decode G through the affine engine first; the requested engine needs G.
    bootstrap = CurveDomain(p, a, b, 0, 0, n, AffinePointEngine(p, a))
    try:
        g = bootstrap.decode_point_hex(UNCOMPRESSED_TAG + SM2_Gx_HEX + SM2_Gy_HEX)
    except ValueError as exc:
        raise DomainConstructionError("Base point G is not on the curve") from exc

    curve = CurveDomain(p, a, b, g[0], g[1], n, make_engine(engine_name, p, a, b, g, n))

    if AffinePointEngine(p, a).multiply(n, g) is not None:
        raise DomainConstructionError("n * G is not the point at infinity")

    logger.debug("Built SM2 domain parameters (engine=%s)", engine_name)
    return curve


_global_curve: Optional[CurveDomain] = None
_global_lock = threading.Lock()


def get_global_curve() -> CurveDomain:
    """Return the shared SM2 curve, building it on first access."""
    global _global_curve
    if _global_curve is None:
        with _global_lock:
            if _global_curve is None:
                engine = os.environ.get(ENGINE_ENV_VAR, DEFAULT_ENGINE)
                _global_curve = build_domain_parameters(engine)
    return _global_curve


def get_global_g() -> Tuple[int, int]:
    return get_global_curve().g


def get_global_n() -> int:
    return get_global_curve().n
