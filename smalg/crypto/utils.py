from typing import Iterable, List, Union

from gmssl import func

from ..errors import MalformedHexError, MalformedTextError

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

ByteLike = Union[bytes, bytearray, memoryview, Iterable[int]]


class SMCodec:
    """
    Conversions between raw bytes, hex strings and UTF-8 text.

    Bytes are unsigned internally. The signed [-128, 127] form only appears
    in the *_signed_byte_array* functions, for callers that exchange byte
    arrays in that representation.
    """

    @staticmethod
    def left_pad(value: str, width: int) -> str:
        if len(value) >= width:
            return value
        return "0" * (width - len(value)) + value

    @staticmethod
    def to_unsigned(values: Iterable[int]) -> bytes:
        """Normalize signed or unsigned byte values to bytes."""
        normalized = []
        for v in values:
            if not -128 <= v <= 255:
                raise ValueError(f"Byte value out of range: {v}")
            normalized.append(v + 256 if v < 0 else v)
        return func.list_to_bytes(normalized)

    @staticmethod
    def to_signed(data: bytes) -> List[int]:
        return [v - 256 if v > 127 else v for v in func.bytes_to_list(data)]

    @staticmethod
    def hex_to_bytes(hex_str: str) -> bytes:
        if len(hex_str) % 2 != 0:
            hex_str = SMCodec.left_pad(hex_str, len(hex_str) + 1)
        if any(c not in _HEX_DIGITS for c in hex_str):
            raise MalformedHexError(f"Invalid hex string: {hex_str!r}")
        return bytes.fromhex(hex_str)

    @staticmethod
    def utf8_encode(text: str) -> bytes:
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise MalformedTextError(f"Text is not encodable as UTF-8: {exc}") from exc

    @staticmethod
    def utf8_text_to_hex(text: str) -> str:
        return SMCodec.utf8_encode(text).hex()

    @staticmethod
    def byte_buffer_to_hex(data: ByteLike) -> str:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            data = func.list_to_bytes(list(data))
        return bytes(data).hex()

    @staticmethod
    def hex_to_signed_byte_array(hex_str: str) -> List[int]:
        """Parse hex into signed bytes; an odd-length string gets a leading '0'."""
        return SMCodec.to_signed(SMCodec.hex_to_bytes(hex_str))

    @staticmethod
    def signed_byte_array_to_hex(values: Iterable[int]) -> str:
        return SMCodec.to_unsigned(values).hex()

    @staticmethod
    def signed_byte_array_to_utf8_text(values: Iterable[int]) -> str:
        data = SMCodec.to_unsigned(values)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedTextError("Malformed UTF-8 data") from exc

    @staticmethod
    def utf8_text_to_signed_byte_array(text: str) -> List[int]:
        return SMCodec.to_signed(SMCodec.utf8_encode(text))
