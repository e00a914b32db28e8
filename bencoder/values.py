import functools
import reprlib
from typing import Any, Iterable, Iterator, Mapping, Protocol

from .cycles import check_cycles
from .errors import InvalidArgument

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Shared closing marker of integers, lists and dictionaries
SUFFIX = b"e"


class Sink(Protocol):
    def write(self, data: bytes, /) -> Any: ...


@functools.total_ordering
class ByteString:
    """Length-prefixed run of raw bytes, not necessarily valid text.

    Keys of a Dictionary are ordered by their UTF-8 decoded text, with the raw
    bytes as a tie-break so that two distinct sequences never compare equal.
    """

    DELIMITER = b":"

    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | memoryview | str | None = b""):
        match data:
            case None:
                self._data = b""
            case str():
                self._data = data.encode("utf-8")
            case bytes() | bytearray() | memoryview():
                self._data = bytes(data)
            case _:
                raise InvalidArgument(
                    f"Cannot build a ByteString from {type(data).__name__}"
                )

    @property
    def data(self) -> bytes:
        return self._data

    def to_utf8(self) -> str:
        return self._data.decode("utf-8", errors="replace")

    def is_composite(self) -> bool:
        return False

    def children(self) -> list["Value"]:
        return []

    def encode(self, sink: Sink) -> None:
        sink.write(str(len(self._data)).encode())
        sink.write(self.DELIMITER)
        sink.write(self._data)

    def _sort_key(self) -> tuple[str, bytes]:
        return (self.to_utf8(), self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return self._data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ByteString):
            return NotImplemented
        return self._data == other._data

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ByteString):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash(self._data)

    def __repr__(self) -> str:
        return f"ByteString({self._data!r})"


@functools.total_ordering
class Integer:
    PREFIX = b"i"
    SUFFIX = SUFFIX

    __slots__ = ("_value",)

    def __init__(self, value: int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidArgument(
                f"Integer value must be an int, got {type(value).__name__}"
            )
        if not INT64_MIN <= value <= INT64_MAX:
            raise InvalidArgument(f"Integer value {value} is out of the 64-bit range")

        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def is_composite(self) -> bool:
        return False

    def children(self) -> list["Value"]:
        return []

    def encode(self, sink: Sink) -> None:
        sink.write(self.PREFIX)
        sink.write(str(self._value).encode())
        sink.write(self.SUFFIX)

    def __int__(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Integer):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Integer):
            return NotImplemented
        return self._value < other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Integer({self._value})"


class List:
    """Ordered sequence of values.

    Not synchronized: concurrent structural changes from several threads need
    external locking.
    """

    PREFIX = b"l"
    SUFFIX = SUFFIX

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, items: Iterable["Value"] = ()):
        if items is None:
            raise InvalidArgument("Null argument is not allowed for List constructor")

        self._elements: list[Value] = []
        for item in items:
            self.add(item)

    def is_composite(self) -> bool:
        return True

    def children(self) -> list["Value"]:
        return list(self._elements)

    def encode(self, sink: Sink) -> None:
        check_cycles(self)
        self._write(sink)

    def _write(self, sink: Sink) -> None:
        sink.write(self.PREFIX)
        for element in self._elements:
            _write(element, sink)
        sink.write(self.SUFFIX)

    def add(self, value: "Value") -> None:
        _check_value(value, "List")
        self._elements.append(value)

    def insert(self, index: int, value: "Value") -> None:
        _check_value(value, "List")
        _check_index_type(index)
        if not 0 <= index <= len(self._elements):
            raise InvalidArgument(
                f"Incorrect index value: {index} "
                f"for collection with size: {len(self._elements)}"
            )
        self._elements.insert(index, value)

    def get(self, index: int) -> "Value":
        self._check_index(index)
        return self._elements[index]

    def remove_at(self, index: int) -> "Value":
        self._check_index(index)
        return self._elements.pop(index)

    def remove(self, value: "Value") -> bool:
        """Remove the first element equal to value"""
        for i, element in enumerate(self._elements):
            if element == value:
                del self._elements[i]
                return True
        return False

    def clear(self) -> None:
        self._elements.clear()

    def contains(self, value: "Value") -> bool:
        return value in self._elements

    def index_of(self, value: "Value") -> int:
        if value is None:
            raise InvalidArgument("Null argument is not allowed for List.index_of()")

        for i, element in enumerate(self._elements):
            if element == value:
                return i
        return -1

    def last_index_of(self, value: "Value") -> int:
        if value is None:
            raise InvalidArgument(
                "Null argument is not allowed for List.last_index_of()"
            )

        for i in range(len(self._elements) - 1, -1, -1):
            if self._elements[i] == value:
                return i
        return -1

    def size(self) -> int:
        return len(self._elements)

    def _check_index(self, index: int) -> None:
        _check_index_type(index)
        if not 0 <= index < len(self._elements):
            raise InvalidArgument(
                f"Incorrect index value: {index} "
                f"for collection with size: {len(self._elements)}"
            )

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator["Value"]:
        return iter(self._elements)

    def __getitem__(self, index: int) -> "Value":
        return self.get(index)

    def __contains__(self, value: object) -> bool:
        return value in self._elements

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, List):
            return NotImplemented
        return self._elements == other._elements

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        return f"List({self._elements!r})"


class Dictionary:
    """Mapping of ByteString keys to values, always iterated in key order.

    Plain str keys are accepted everywhere a key is expected and are encoded
    as UTF-8. Not synchronized, same as List.
    """

    PREFIX = b"d"
    SUFFIX = SUFFIX

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, initial: Mapping[ByteString | str, "Value"] | None = None):
        self._entries: dict[ByteString, Value] = {}

        if initial is None:
            return

        for key, value in initial.items():
            self.put(key, value)

    def is_composite(self) -> bool:
        return True

    def children(self) -> list["Value"]:
        # Unordered: cycle detection only needs the edges
        return list(self._entries.values())

    def encode(self, sink: Sink) -> None:
        check_cycles(self)
        self._write(sink)

    def _write(self, sink: Sink) -> None:
        sink.write(self.PREFIX)
        for key, value in self.items():
            key.encode(sink)
            _write(value, sink)
        sink.write(self.SUFFIX)

    def get(
        self, key: ByteString | str, default: "Value | None" = None
    ) -> "Value | None":
        return self._entries.get(_to_key(key), default)

    def put(self, key: ByteString | str, value: "Value") -> None:
        if key is None:
            raise InvalidArgument("'key' for Dictionary cannot be None")
        _check_value(value, "Dictionary")

        self._entries[_to_key(key)] = value

    def remove(self, key: ByteString | str) -> "Value | None":
        """Remove the entry for key, returning its value if there was one"""
        return self._entries.pop(_to_key(key), None)

    def contains_key(self, key: ByteString | str) -> bool:
        return _to_key(key) in self._entries

    def contains_value(self, value: "Value") -> bool:
        if value is None:
            raise InvalidArgument("None values are not allowed for Dictionary")

        return any(v == value for v in self._entries.values())

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def keys(self) -> list[ByteString]:
        return sorted(self._entries, key=ByteString._sort_key)

    def values(self) -> list["Value"]:
        return [self._entries[k] for k in self.keys()]

    def items(self) -> list[tuple[ByteString, "Value"]]:
        return [(k, self._entries[k]) for k in self.keys()]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ByteString]:
        return iter(self.keys())

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (ByteString, str)):
            return False
        return self.contains_key(key)

    def __getitem__(self, key: ByteString | str) -> "Value":
        k = _to_key(key)
        if k not in self._entries:
            raise KeyError(key)
        return self._entries[k]

    def __setitem__(self, key: ByteString | str, value: "Value") -> None:
        self.put(key, value)

    def __delitem__(self, key: ByteString | str) -> None:
        k = _to_key(key)
        if k not in self._entries:
            raise KeyError(key)
        del self._entries[k]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dictionary):
            return NotImplemented
        return self._entries == other._entries

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"Dictionary({{{body}}})"


Value = ByteString | Integer | List | Dictionary

VALUE_TYPES = (ByteString, Integer, List, Dictionary)


def _write(value: Value, sink: Sink) -> None:
    # Cycles were ruled out once for the whole tree by the outermost encode()
    match value:
        case List() | Dictionary():
            value._write(sink)
        case _:
            value.encode(sink)


def _to_key(key: ByteString | str) -> ByteString:
    match key:
        case None:
            raise InvalidArgument("None keys are not allowed for Dictionary")
        case ByteString():
            return key
        case str():
            return ByteString(key)
        case _:
            raise InvalidArgument(
                f"Dictionary keys must be ByteString or str, got {type(key).__name__}"
            )


def _check_value(value: Value, container: str) -> None:
    if value is None:
        raise InvalidArgument(f"None elements are not allowed for {container}")
    if not isinstance(value, VALUE_TYPES):
        raise InvalidArgument(
            f"{container} can only hold bencoded values, got {type(value).__name__}"
        )


def _check_index_type(index: int) -> None:
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidArgument(f"List index must be an int, got {type(index).__name__}")
