from typing import Any

from .cycles import check_cycles
from .errors import CircularReferenceError, InvalidArgument
from .values import VALUE_TYPES, ByteString, Dictionary, Integer, List, Value

Native = bytes | int | list | dict


def from_python(obj: Any) -> Value:
    """Build a value tree out of bytes, str, int, list, tuple and dict"""
    return _from_python(obj, set())


def _from_python(obj: Any, ancestors: set[int]) -> Value:
    match obj:
        case ByteString() | Integer() | List() | Dictionary():
            return obj

        case bool():
            raise InvalidArgument("bool cannot be bencoded, use an int instead")

        case bytes() | bytearray() | memoryview() | str():
            return ByteString(obj)

        case int():
            return Integer(obj)

        case list() | tuple() | dict():
            if id(obj) in ancestors:
                raise CircularReferenceError(
                    f"Circular reference found in {type(obj).__name__}"
                )

            ancestors.add(id(obj))
            try:
                if isinstance(obj, dict):
                    return _dict_from_python(obj, ancestors)
                return List(_from_python(x, ancestors) for x in obj)
            finally:
                ancestors.discard(id(obj))

        case _:
            raise InvalidArgument(f"{type(obj).__name__} cannot be bencoded")


def _dict_from_python(obj: dict, ancestors: set[int]) -> Dictionary:
    d = Dictionary()
    for k, v in obj.items():
        match k:
            case ByteString() | str():
                key = k
            case bytes() | bytearray():
                key = ByteString(k)
            case _:
                raise InvalidArgument(
                    f"Dictionary keys must be bytes or str, got {type(k).__name__}"
                )

        d.put(key, _from_python(v, ancestors))
    return d


def to_python(value: Value) -> Native:
    """Turn a value tree back into plain bytes, int, list and dict"""
    if not isinstance(value, VALUE_TYPES):
        raise InvalidArgument(f"Expected a bencoded value, got {type(value).__name__}")

    check_cycles(value)
    return _to_python(value)


def _to_python(value: Value) -> Native:
    match value:
        case ByteString():
            return value.data

        case Integer():
            return value.value

        case List():
            return [_to_python(x) for x in value]

        case Dictionary():
            return {k.data: _to_python(v) for k, v in value.items()}
