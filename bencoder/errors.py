class BencodeError(Exception):
    """Base class for every error raised by bencoder."""


class FormatError(BencodeError, ValueError):
    """Malformed bencoded input."""


class CircularReferenceError(BencodeError, ValueError):
    """A composite value contains itself somewhere below it."""


class InvalidArgument(BencodeError, ValueError):
    """A value, key, element or index that the caller should not have passed."""
