class SMAlgError(Exception):
    """Base class for every error raised by smalg."""


class MalformedTextError(SMAlgError, ValueError):
    """Bytes are not valid UTF-8, or text cannot be encoded as UTF-8."""


class MalformedHexError(SMAlgError, ValueError):
    """A hex string contains characters outside 0-9, a-f, A-F."""


class PaddingError(SMAlgError, ValueError):
    """SM4 block padding failed validation; the input must be rejected."""


class DomainConstructionError(SMAlgError, RuntimeError):
    """The fixed curve literals are inconsistent. Not recoverable."""
