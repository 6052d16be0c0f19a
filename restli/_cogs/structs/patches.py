"""
All the structures needed for partial updates of the entities.

A partial update sends only the changed fields of an entity rather than
its full replacement value. The patch is a recursive document with
the fields to overwrite (``$set``), the fields to remove (``$delete``),
and nested documents for the fields whose map values changed internally::

    {
        "patch": {
            "$set": {"status": "ACTIVE"},
            "$delete": ["notes"],
            "runSchedule": {"$set": {"end": 1679029270721}}
        }
    }

There are two ways to build a patch, hence two factories:

* `generate_patch` diffs two snapshots of the same entity (original & modified).
* `set_patch` wraps a map of fields to overwrite as is, with no diffing.

When an entity has nested fields, the diffing may produce a complex patch,
which is a technically correct format for the protocol, but may be not supported
by the APIs that allow partial updates of the top-level fields only.
In these cases, `set_patch` with the top-level fields is the better choice.
"""
import collections.abc
import copy
import dataclasses
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional, Tuple

from restli._cogs.structs import diffs, errors, values

SET_DIRECTIVE = '$set'
DELETE_DIRECTIVE = '$delete'
DIRECTIVES = frozenset({SET_DIRECTIVE, DELETE_DIRECTIVE})
BODY_KEY = 'patch'


@dataclasses.dataclass(frozen=True)
class PatchDocument:
    set_fields: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    delete_fields: Tuple[str, ...] = ()
    nested: Mapping[str, "PatchDocument"] = dataclasses.field(default_factory=dict)

    def __bool__(self) -> bool:
        return not self.is_empty

    @property
    def is_empty(self) -> bool:
        return not self.set_fields and not self.delete_fields and not self.nested

    def as_json(self) -> Dict[str, Any]:
        """ The patch as it is sent to the server, but without the wrapper. """
        result: Dict[str, Any] = {}
        if self.set_fields:
            result[SET_DIRECTIVE] = copy.deepcopy(dict(self.set_fields))
        if self.delete_fields:
            result[DELETE_DIRECTIVE] = list(self.delete_fields)
        for key, patch in self.nested.items():
            result[key] = patch.as_json()
        return result

    def as_body(self) -> Dict[str, Any]:
        """ The patch as it is sent to the server, i.e. ``{"patch": ...}``. """
        return {BODY_KEY: self.as_json()}


def generate_patch(
        original: Mapping[str, Any],
        modified: Mapping[str, Any],
) -> PatchDocument:
    """
    Calculate the patch that turns the original entity into the modified one.

    The maps are compared recursively; all other values (incl. lists) are
    compared as a whole. The fields equal in both snapshots are omitted.
    If there is no difference at all, `EmptyPatchError` is raised:
    updating nothing is treated as a caller's mistake, not as a no-op.
    """
    a = _as_map(original, 'original entity')
    b = _as_map(modified, 'modified entity')
    patch = _from_diff(diffs.diff_iter(a, b))
    if patch.is_empty:
        raise errors.EmptyPatchError("There must be a difference between the original and modified entities.")
    return patch


def set_patch(
        fields: Mapping[str, Any],
) -> PatchDocument:
    """
    Build a patch that overwrites the specified top-level fields, with no diffing.
    """
    structured = _as_map(fields, 'patch set object')
    if not len(structured):
        raise errors.InvalidPatchInputError("The patch set object must have at least one field.")
    return PatchDocument(set_fields=values.to_native(structured))


def parse_patch(
        raw: Mapping[str, Any],
        *,
        wrapped: Optional[bool] = None,
) -> PatchDocument:
    """
    Parse the patch from its JSON form (e.g. as received in a request body).

    The ``{"patch": ...}`` wrapper is required (``wrapped=True``),
    prohibited (``wrapped=False``), or guessed (``None``, the default):
    a map with the only key ``"patch"`` is considered a wrapper.
    """
    if not isinstance(raw, collections.abc.Mapping):
        raise errors.InvalidPatchInputError(f"The patch must be a map, got {raw!r}.")
    if wrapped is None:
        wrapped = list(raw.keys()) == [BODY_KEY]
    if wrapped:
        try:
            raw = raw[BODY_KEY]
        except KeyError:
            raise errors.InvalidPatchInputError(f"The patch has no {BODY_KEY!r} key: {raw!r}")
    return _parse(raw, path=())


def apply_patch(
        entity: Mapping[str, Any],
        patch: PatchDocument,
) -> Dict[str, Any]:
    """
    Apply the patch to a copy of the entity, and return the patched copy.

    The fields are removed first, then set, then the nested patches applied.
    A nested patch over an absent or non-map field is applied to an empty map.
    """
    result = copy.deepcopy(dict(entity))
    _apply(result, patch)
    return result


class _Draft:
    """ A mutable accumulator of a patch document while it is being built. """

    def __init__(self) -> None:
        self.set_fields: Dict[str, Any] = {}
        self.delete_fields: List[str] = []
        self.nested: Dict[str, "_Draft"] = {}

    def freeze(self) -> PatchDocument:
        return PatchDocument(
            set_fields=self.set_fields,
            delete_fields=tuple(self.delete_fields),
            nested={key: draft.freeze() for key, draft in self.nested.items()},
        )


def _from_diff(items: Iterable[diffs.DiffItem]) -> PatchDocument:
    root = _Draft()
    for op, field, old, new in items:
        if not field:  # both sides are maps, so the root itself never changes.
            raise errors.InvalidPatchInputError("Cannot patch the entity as a whole.")

        draft = root
        for key in field[:-1]:
            if key in DIRECTIVES:
                raise errors.InvalidPatchInputError(f"The field {key!r} clashes with the patch syntax.")
            draft = draft.nested.setdefault(key, _Draft())

        if op == diffs.DiffOperation.REMOVE:
            draft.delete_fields.append(field[-1])
        else:
            draft.set_fields[field[-1]] = values.to_native(new)
    return root.freeze()


def _as_map(obj: Any, name: str) -> values.MapValue:
    try:
        structured = values.from_native(obj)
    except errors.EncodingError as e:
        raise errors.InvalidPatchInputError(f"The {name} has unsupported values: {e}") from e
    if not isinstance(structured, values.MapValue):
        raise errors.InvalidPatchInputError(f"The {name} must be a map, got {obj!r}.")
    return structured


def _parse(raw: Any, *, path: diffs.FieldPath) -> PatchDocument:
    where = '.'.join(path) or 'the root'
    if not isinstance(raw, collections.abc.Mapping):
        raise errors.InvalidPatchInputError(f"The patch at {where} must be a map, got {raw!r}.")

    set_fields = raw.get(SET_DIRECTIVE, {})
    if not isinstance(set_fields, collections.abc.Mapping):
        raise errors.InvalidPatchInputError(f"The {SET_DIRECTIVE} at {where} must be a map.")

    delete_fields = raw.get(DELETE_DIRECTIVE, [])
    if (not isinstance(delete_fields, collections.abc.Sequence) or
            isinstance(delete_fields, str) or
            not all(isinstance(field, str) for field in delete_fields)):
        raise errors.InvalidPatchInputError(f"The {DELETE_DIRECTIVE} at {where} must be a list of names.")

    nested = {
        key: _parse(val, path=path + (key,))
        for key, val in raw.items() if key not in DIRECTIVES
    }
    return PatchDocument(
        set_fields=copy.deepcopy(dict(set_fields)),
        delete_fields=tuple(dict.fromkeys(delete_fields)),  # dedup, but keep the order
        nested=nested,
    )


def _apply(target: MutableMapping[str, Any], patch: PatchDocument) -> None:
    for key in patch.delete_fields:
        target.pop(key, None)
    for key, value in patch.set_fields.items():
        target[key] = copy.deepcopy(value)
    for key, subpatch in patch.nested.items():
        current = target.get(key)
        if not isinstance(current, collections.abc.MutableMapping):
            current = target[key] = {}
        _apply(current, subpatch)
