"""
The field-level differences between two structured values.

The diffs are the basis of the partial updates: every item says which field
was added, changed, or removed, with the old & new values of that field.
Only the maps are compared field by field; everything else, lists included,
is compared as a whole.
"""
import enum
from typing import Any, Iterable, Iterator, NamedTuple, Tuple, Union

from restli._cogs.structs import values

FieldPath = Tuple[str, ...]


class _ABSENT(enum.Enum):
    token = enum.auto()


ABSENT = _ABSENT.token
""" A marker of a missing key, distinct from a present key with a null value. """


class DiffOperation(str, enum.Enum):
    ADD = 'add'
    CHANGE = 'change'
    REMOVE = 'remove'

    def __str__(self) -> str:
        return str(self.value)


class DiffItem(NamedTuple):
    operation: DiffOperation
    field: FieldPath
    old: Union[values.StructuredValue, _ABSENT]
    new: Union[values.StructuredValue, _ABSENT]

    @property
    def op(self) -> DiffOperation:
        return self.operation


class Diff(Tuple[DiffItem, ...]):
    """
    An immutable sequence of the diff items, comparable to plain tuples.
    """

    def __new__(cls, items: Iterable[Tuple[Any, ...]] = ()) -> "Diff":
        return super().__new__(cls, (DiffItem(*item) for item in items))

    def __repr__(self) -> str:
        return f'Diff({tuple(self)!r})'


def diff_iter(
        a: Union[values.StructuredValue, _ABSENT],
        b: Union[values.StructuredValue, _ABSENT],
        path: FieldPath = (),
) -> Iterator[DiffItem]:
    """
    Yield the differences between two structured values, field by field.

    The whole value is added or removed if one of the sides is `ABSENT`.
    The maps are walked key by key in the sorted order, so that the same
    inputs always give the same sequence of items. A null value is a value,
    so a key with null on one side and no key on the other is an addition
    or a removal, not a change.
    """
    if a == b:  # incl. both absent
        return
    if a is ABSENT:
        yield DiffItem(DiffOperation.ADD, path, a, b)
    elif b is ABSENT:
        yield DiffItem(DiffOperation.REMOVE, path, a, b)
    elif isinstance(a, values.MapValue) and isinstance(b, values.MapValue):
        for key in sorted(set(a.keys()) | set(b.keys())):
            yield from diff_iter(a.get(key, ABSENT), b.get(key, ABSENT), path=path + (key,))
    else:
        yield DiffItem(DiffOperation.CHANGE, path, a, b)


def diff(
        a: Any,
        b: Any,
        path: FieldPath = (),
) -> Diff:
    """ Same as `diff_iter`, but for the native data, and with all items at once. """
    old = a if a is ABSENT else values.from_native(a)
    new = b if b is ABSENT else values.from_native(b)
    return Diff(diff_iter(old, new, path=path))
