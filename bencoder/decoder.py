import logging
from typing import BinaryIO, Iterator

from .errors import FormatError
from .reader import StreamReader
from .values import (
    INT64_MAX,
    INT64_MIN,
    SUFFIX,
    ByteString,
    Dictionary,
    Integer,
    List,
    Value,
)

logger = logging.getLogger(__name__)

DIGITS = b"0123456789"


class Decoder:
    """Iterates over the values stored one after another in a byte stream.

    A top-level decoder runs until the stream is exhausted. The nested
    decoders opened for the body of a list or a dictionary stop at the
    closing 'e' of that container instead.
    """

    def __init__(
        self,
        source: bytes | bytearray | BinaryIO | StreamReader,
        *,
        max_depth: int | None = None,
    ):
        if isinstance(source, StreamReader):
            self.reader = source
        else:
            self.reader = StreamReader(source)

        self.max_depth = max_depth
        self.depth = 0
        self.is_nested = False

    @classmethod
    def nested(cls, parent: "Decoder") -> "Decoder":
        decoder = cls(parent.reader, max_depth=parent.max_depth)
        decoder.depth = parent.depth + 1
        decoder.is_nested = True
        return decoder

    def has_next(self) -> bool:
        b = self.reader.peek_byte()
        if self.is_nested:
            # End of stream counts as "more to come" so next() reports the truncation
            return b != SUFFIX[0]
        return b is not None

    def next(self) -> Value:
        if not self.has_next():
            raise StopIteration("No more elements")

        return self.decode_one()

    def __iter__(self) -> Iterator[Value]:
        return self

    def __next__(self) -> Value:
        return self.next()

    def decode(self) -> Value:
        """Decode the next value in the stream"""
        value = self.decode_one()
        logger.debug(f"Decoded {type(value).__name__} at depth {self.depth}")
        return value

    def decode_all(self) -> list[Value]:
        return list(self)

    def decode_one(self) -> Value:
        c = self.reader.peek_byte()
        match c:
            case None:
                raise FormatError("Unexpected end of stream")

            case _ if c in DIGITS:
                return self.read_string()

            case 0x69:  # i
                return self.read_integer()

            case 0x6C:  # l
                return self.read_list()

            case 0x64:  # d
                return self.read_dict()

            case _:
                raise FormatError(f"Unexpected character in the stream: {chr(c)}")

    def read_string(self) -> ByteString:
        token = self.reader.read_until(ByteString.DELIMITER)
        if not token:
            raise FormatError("ByteString length part is not present in the stream")

        try:
            if not (token.isascii() and token.isdigit()):
                raise ValueError(token)
            length = int(token)
        except ValueError:
            raise FormatError(
                "ByteString length cannot be converted to a numeric value"
            ) from None

        data = self.reader.read_exact(length)
        if len(data) != length:
            raise FormatError("Unexpected end of the byte sequence stream")

        return ByteString(data)

    def read_integer(self) -> Integer:
        self.expect(Integer.PREFIX)

        token = self.reader.read_until(Integer.SUFFIX)

        # Canonical form only: no leading zeros, no '+', no "-0"
        try:
            n = int(token)
        except ValueError:
            raise FormatError("Incorrect character sequence for the value") from None

        if str(n) != token or not INT64_MIN <= n <= INT64_MAX:
            raise FormatError("Incorrect character sequence for the value")

        return Integer(n)

    def read_list(self) -> List:
        self.expect(List.PREFIX)
        self.check_depth()

        lst = List()
        items = Decoder.nested(self)
        while items.has_next():
            lst.add(items.next())

        self.expect(List.SUFFIX)

        return lst

    def read_dict(self) -> Dictionary:
        self.expect(Dictionary.PREFIX)
        self.check_depth()

        d = Dictionary()
        items = Decoder.nested(self)
        while items.has_next():
            k = items.next()
            if not isinstance(k, ByteString):
                raise FormatError(
                    "Incorrect object used as dictionary key. "
                    f"Expected: 'ByteString' but got: '{type(k).__name__}'"
                )

            if not items.has_next():
                raise FormatError(
                    "Unexpected end of the stream for dictionary. "
                    "'Key' object is present, but 'value' object is not."
                )

            # Keys are accepted in any order, a repeated key overwrites
            d.put(k, items.next())

        self.expect(Dictionary.SUFFIX)

        return d

    def check_depth(self) -> None:
        if self.max_depth is not None and self.depth >= self.max_depth:
            raise FormatError(f"Maximum nesting depth {self.max_depth} exceeded")

    def expect(self, char: bytes) -> None:
        b = self.reader.read_byte()
        if b is None:
            raise FormatError(f"Unexpected end of stream, expected {char!r}")
        if b != char[0]:
            raise FormatError(f"Expected {char!r}, got {bytes([b])!r} instead")
