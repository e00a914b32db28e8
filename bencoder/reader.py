import io
from typing import BinaryIO

from .errors import FormatError, InvalidArgument

CHUNK_SIZE = 64 * 1024


class StreamReader:
    def __init__(self, source: bytes | bytearray | BinaryIO):
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        self.source = source
        self.pushed: int | None = None

    def read_byte(self) -> int | None:
        """Consume one byte, None once the source is exhausted"""
        if self.pushed is not None:
            b, self.pushed = self.pushed, None
            return b

        c = self.source.read(1)
        if not c:
            return None
        return c[0]

    def unread_byte(self, b: int | None) -> None:
        # Pushing back the end of the stream keeps us at the end of the stream
        if b is None:
            return

        if self.pushed is not None:
            raise InvalidArgument("Only one byte can be pushed back")

        self.pushed = b

    def peek_byte(self) -> int | None:
        b = self.read_byte()
        self.unread_byte(b)
        return b

    def read_exact(self, n: int) -> bytes:
        """Read up to n bytes, fewer only if the stream ends first"""
        if n <= 0:
            return b""

        data = bytearray()
        if self.pushed is not None:
            data.append(self.pushed)
            self.pushed = None

        # Bounded chunks: n comes straight from the input
        while len(data) < n:
            chunk = self.source.read(min(n - len(data), CHUNK_SIZE))
            if not chunk:
                break
            data += chunk

        return bytes(data)

    def read_until(self, stop: bytes) -> str:
        """Read characters up to (not including) the stop symbol"""
        stop_byte = stop[0]
        chars = []

        while (b := self.read_byte()) is not None:
            if b == stop_byte:
                return "".join(chars)
            chars.append(chr(b))

        if chars:
            raise FormatError(f"Stop symbol '{stop.decode()}' was not reached")

        raise FormatError("Unexpected end of stream")
