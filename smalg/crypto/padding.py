"""
Block padding applied to SM4 plaintext: a 0x80 marker byte followed by 0x00
bytes up to the 16-byte block boundary. Block-aligned input gains a whole
extra block.
"""
from ..errors import PaddingError
from .utils import SMCodec

BLOCK_SIZE = 16
PADDING_MARKER = "80"
FULL_PADDING_BLOCK = PADDING_MARKER + "00" * (BLOCK_SIZE - 1)


class SM4Padding:
    @staticmethod
    def pad_to_block(text: str) -> str:
        """
        Pad text for SM4 encryption.

        Args:
            text: Plaintext to pad.

        Returns:
            Uppercase hex whose length is a multiple of 32.
        """
        data_hex = SMCodec.signed_byte_array_to_hex(
            SMCodec.utf8_text_to_signed_byte_array(text)
        )
        remainder = len(data_hex) % (BLOCK_SIZE * 2)
        if remainder != 0:
            data_hex += FULL_PADDING_BLOCK[: BLOCK_SIZE * 2 - remainder]
        else:
            data_hex += FULL_PADDING_BLOCK
        return data_hex.upper()

    @staticmethod
    def strip_block_padding(padded_hex: str) -> str:
        """
        Remove padding added by pad_to_block and decode the plaintext.

        The marker is the last "80" in the string. Every two-character window
        after it must read "00", except a window starting on the final
        character, which is never checked.

        Raises:
            PaddingError: If no marker is present or a non-zero follows it.
            MalformedTextError: If the remaining bytes are not valid UTF-8.
        """
        index = padded_hex.rfind(PADDING_MARKER)
        if index < 0:
            raise PaddingError("Padding marker not found")

        tail = padded_hex[index + len(PADDING_MARKER) :]
        for i in range(len(tail) - 1):
            if tail[i : i + 2] != "00":
                raise PaddingError("Non-zero byte after padding marker")

        return SMCodec.signed_byte_array_to_utf8_text(
            SMCodec.hex_to_signed_byte_array(padded_hex[:index])
        )
