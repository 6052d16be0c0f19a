"""
Structured values: the recursive model of entities, ids, and query parameters.

The values travel as JSON in the request bodies and as the URI-encoding grammar
in the URLs. Both forms are produced from the same tagged variant, so that
every encodable shape is known in advance and is dispatched explicitly:

* `Null`,
* `Boolean`,
* `Number` (ints, floats, decimals),
* `String`,
* `ListValue` (ordered),
* `MapValue` (string keys, entries kept sorted by key).

The users rarely build the variants by hand. Usually, they pass native Python
data (dicts, lists, scalars), which is converted with `from_native`.
The conversion is where the unsupported shapes are rejected: functions, sets,
bytes, arbitrary objects, non-string keys, NaN/Infinity, and cyclic containers.

Unlike in native Python, ``Boolean(True)`` is not equal to ``Number(1)``:
the protocol distinguishes them, and so do the diffs.
"""
import collections.abc
import dataclasses
import decimal
import math
from typing import Any, Iterator, List, Set, Tuple, Union

from restli._cogs.structs import errors

NumberType = Union[int, float, decimal.Decimal]


class StructuredValue:
    """ The base class of all variants. It is never instantiated directly. """
    __slots__ = ()


@dataclasses.dataclass(frozen=True)
class Null(StructuredValue):
    pass


@dataclasses.dataclass(frozen=True)
class Boolean(StructuredValue):
    value: bool


@dataclasses.dataclass(frozen=True)
class Number(StructuredValue):
    value: NumberType

    def __post_init__(self) -> None:
        if isinstance(self.value, decimal.Decimal) and not self.value.is_finite():
            raise errors.EncodingError(f"Non-finite numbers are not supported: {self.value!r}")
        if isinstance(self.value, float) and not math.isfinite(self.value):
            raise errors.EncodingError(f"Non-finite numbers are not supported: {self.value!r}")


@dataclasses.dataclass(frozen=True)
class String(StructuredValue):
    value: str


@dataclasses.dataclass(frozen=True)
class ListValue(StructuredValue):
    items: Tuple[StructuredValue, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[StructuredValue]:
        return iter(self.items)


@dataclasses.dataclass(frozen=True)
class MapValue(StructuredValue):
    entries: Tuple[Tuple[str, StructuredValue], ...] = ()

    def __post_init__(self) -> None:
        entries = tuple(sorted(self.entries, key=lambda entry: entry[0]))
        for (key1, _), (key2, _) in zip(entries, entries[1:]):
            if key1 == key2:
                raise errors.EncodingError(f"Duplicate map key: {key1!r}")
        object.__setattr__(self, 'entries', entries)  # frozen, but still in construction

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.entries)

    def __getitem__(self, key: str) -> StructuredValue:
        for k, v in self.entries:
            if k == key:
                return v
        raise KeyError(key)

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    def keys(self) -> List[str]:
        return [key for key, _ in self.entries]


NULL = Null()


def from_native(obj: Any) -> StructuredValue:
    """
    Convert native Python data into a structured value.

    Already converted values (and containers with some of them) are accepted
    as is. Cycles are detected and rejected with `EncodingError`,
    as are the too deeply nested structures (beyond the recursion limit).
    """
    try:
        return _from_native(obj, seen=set())
    except RecursionError as e:
        raise errors.EncodingError("The value is nested too deeply to be encoded.") from e


def _from_native(obj: Any, *, seen: Set[int]) -> StructuredValue:
    if isinstance(obj, StructuredValue):
        return obj
    elif obj is None:
        return NULL
    elif isinstance(obj, bool):  # NB: before numbers, since bools are ints.
        return Boolean(obj)
    elif isinstance(obj, (int, float, decimal.Decimal)):
        return Number(obj)  # NB: the non-finite ones fail here.
    elif isinstance(obj, str):
        return String(obj)
    elif isinstance(obj, collections.abc.Mapping):
        marker = id(obj)
        if marker in seen:
            raise errors.EncodingError("Cyclic structures cannot be encoded.")
        seen.add(marker)
        try:
            entries: List[Tuple[str, StructuredValue]] = []
            for key, val in obj.items():
                if not isinstance(key, str):
                    raise errors.EncodingError(f"Map keys must be strings, got {key!r}.")
                entries.append((key, _from_native(val, seen=seen)))
        finally:
            seen.discard(marker)
        return MapValue(tuple(entries))
    elif isinstance(obj, (list, tuple)):
        marker = id(obj)
        if marker in seen:
            raise errors.EncodingError("Cyclic structures cannot be encoded.")
        seen.add(marker)
        try:
            items = tuple(_from_native(item, seen=seen) for item in obj)
        finally:
            seen.discard(marker)
        return ListValue(items)
    else:
        raise errors.EncodingError(f"Unsupported value kind: {type(obj).__name__}")


def to_native(value: StructuredValue) -> Any:
    """
    Convert a structured value back to plain dicts, lists, and scalars.
    """
    if isinstance(value, Null):
        return None
    elif isinstance(value, (Boolean, Number, String)):
        return value.value
    elif isinstance(value, ListValue):
        return [to_native(item) for item in value.items]
    elif isinstance(value, MapValue):
        return {key: to_native(val) for key, val in value.entries}
    else:
        raise errors.EncodingError(f"Unsupported value kind: {type(value).__name__}")
