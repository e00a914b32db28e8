from typing import Any, BinaryIO

from .convert import from_python, to_python
from .cycles import find_cycle, has_cycle
from .decoder import Decoder
from .encoder import Encoder
from .errors import BencodeError, CircularReferenceError, FormatError, InvalidArgument
from .reader import StreamReader
from .values import ByteString, Dictionary, Integer, List, Value

__all__ = [
    "BencodeError",
    "ByteString",
    "CircularReferenceError",
    "Decoder",
    "Dictionary",
    "Encoder",
    "FormatError",
    "Integer",
    "InvalidArgument",
    "List",
    "StreamReader",
    "Value",
    "decode",
    "decode_all",
    "encode",
    "find_cycle",
    "from_python",
    "has_cycle",
    "to_python",
]


def decode(
    source: bytes | bytearray | BinaryIO, *, max_depth: int | None = None
) -> Value:
    return Decoder(source, max_depth=max_depth).decode()


def decode_all(
    source: bytes | bytearray | BinaryIO, *, max_depth: int | None = None
) -> list[Value]:
    return Decoder(source, max_depth=max_depth).decode_all()


def encode(obj: Any) -> bytes:
    return Encoder().encode_bytes(obj)
