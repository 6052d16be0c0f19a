"""
Encoding of structured values, entity ids, and query parameters into URLs.

The grammar is the Rest.li 2.0 URI encoding, which represents the nested
structures in a compact and URL-friendly form::

    encode_value({'b': 2, 'a': [1, 2], 'c': 'x y'})
    # -> "(a:List(1,2),b:2,c:x%20y)"

* Lists are ``List(item1,item2)``, the empty list is ``List()``.
* Maps are ``(key1:value1,key2:value2)`` with the keys sorted,
  the empty map is ``()``.
* The empty string is ``''``; the top-level null is an empty token.
* The string scalars are percent-escaped, so that the grammar delimiters
  ``( ) , : '`` never appear in them literally.

The encoding is done in two layers. The first one is the grammar itself:
it escapes the strings so that they cannot be confused with the structure.
The second one makes the whole token safe for its place in the URL
(a path segment or a query value) while keeping the structural delimiters
and the already escaped ``%XX`` sequences as they are. With the default
settings, the 2nd layer changes nothing; it matters only if the first layer
is configured to let more characters through (`EncodingSettings.safe_chars`).
"""
import decimal
import enum
import urllib.parse
from typing import Any, List, Mapping, Optional

from restli._cogs.configs import configuration
from restli._cogs.structs import errors, values

GRAMMAR_DELIMITERS = "(),:'"
ESCAPE_CHAR = '%'
ALWAYS_ESCAPED = GRAMMAR_DELIMITERS + ESCAPE_CHAR

# What may stay unescaped on top of the grammar tokens, per placement (RFC 3986).
PATH_SAFE = ALWAYS_ESCAPED + "!$&*+;=@"  # pchar, except "/"
QUERY_SAFE = ALWAYS_ESCAPED + "!$*/?@"  # query chars, except the "&=+;" separators

EMPTY_STRING_TOKEN = "''"
LIST_PREFIX = 'List('
MAP_PREFIX = '('
SUFFIX = ')'


class Placement(str, enum.Enum):
    """ Where an encoded entity id goes: into a path segment or a query value. """
    PATH = 'path'
    QUERY = 'query'

    def __str__(self) -> str:
        return str(self.value)


def encode_value(
        value: Any,
        *,
        settings: Optional[configuration.RestliSettings] = None,
) -> str:
    """
    Encode any structured value (or native data) into a grammar token.

    Fails with `EncodingError` for unsupported kinds of values, cycles,
    nulls inside lists or maps, and structures nested too deeply.
    """
    settings = settings if settings is not None else configuration.RestliSettings()
    structured = values.from_native(value)
    try:
        return _encode(structured, nested=False, settings=settings)
    except RecursionError as e:
        raise errors.EncodingError("The value is nested too deeply to be encoded.") from e


def encode_entity_id(
        entity_id: Any,
        placement: Placement = Placement.PATH,
        *,
        settings: Optional[configuration.RestliSettings] = None,
) -> str:
    """
    Encode an entity id (a scalar or a compound key) for a path or a query.

    ``None`` means no id at all (e.g. for simple/singleton resources),
    and is encoded as an empty string -- so that no empty segment appears.
    """
    settings = settings if settings is not None else configuration.RestliSettings()
    placement = Placement(placement)
    structured = values.from_native(entity_id)
    if isinstance(structured, values.Null):
        return ''
    elif isinstance(structured, values.ListValue):
        raise errors.EncodingError(f"Lists cannot be used as entity ids: {entity_id!r}")
    token = encode_value(structured, settings=settings)
    safe = PATH_SAFE if placement is Placement.PATH else QUERY_SAFE
    return urllib.parse.quote(token, safe=safe)


def encode_params(
        params: Optional[Mapping[str, Any]],
        *,
        settings: Optional[configuration.RestliSettings] = None,
) -> str:
    """
    Build a query string (without the leading ``?``) from the parameters.

    The keys are sorted, so the same parameters always give the same string
    regardless of their insertion order. Parameters set to ``None`` are omitted.
    """
    settings = settings if settings is not None else configuration.RestliSettings()
    if not params:
        return ''

    for key in params:
        if not isinstance(key, str):
            raise errors.EncodingError(f"Parameter names must be strings, got {key!r}.")

    pairs: List[str] = []
    for key in sorted(params):
        value = params[key]
        if value is None:
            continue
        encoded_key = urllib.parse.quote(_escape(key, settings=settings), safe=QUERY_SAFE)
        encoded_val = urllib.parse.quote(encode_value(value, settings=settings), safe=QUERY_SAFE)
        pairs.append(f'{encoded_key}={encoded_val}')
    return '&'.join(pairs)


def build_entity_path(
        url: str,
        entity_id: Any = None,
        *,
        settings: Optional[configuration.RestliSettings] = None,
) -> str:
    """
    Append the encoded entity id to the resource's URL, if there is an id.
    """
    token = encode_entity_id(entity_id, Placement.PATH, settings=settings)
    return f"{url}/{token}" if token else url


def _encode(
        value: values.StructuredValue,
        *,
        nested: bool,
        settings: configuration.RestliSettings,
) -> str:
    if isinstance(value, values.Null):
        if nested:
            raise errors.EncodingError("Nulls cannot be encoded inside lists or maps.")
        return ''
    elif isinstance(value, values.Boolean):
        return 'true' if value.value else 'false'
    elif isinstance(value, values.Number):
        return _format_number(value.value)
    elif isinstance(value, values.String):
        return _escape(value.value, settings=settings)
    elif isinstance(value, values.ListValue):
        items = (_encode(item, nested=True, settings=settings) for item in value.items)
        return LIST_PREFIX + ','.join(items) + SUFFIX
    elif isinstance(value, values.MapValue):
        pairs = (
            f'{_escape(key, settings=settings)}:{_encode(val, nested=True, settings=settings)}'
            for key, val in value.entries
        )
        return MAP_PREFIX + ','.join(pairs) + SUFFIX
    else:
        raise errors.EncodingError(f"Unsupported value kind: {type(value).__name__}")


def _escape(text: str, *, settings: configuration.RestliSettings) -> str:
    if not text:
        return EMPTY_STRING_TOKEN
    safe = ''.join(c for c in settings.encoding.safe_chars if c not in ALWAYS_ESCAPED)
    return urllib.parse.quote(text, safe=safe)


def _format_number(number: values.NumberType) -> str:
    if isinstance(number, int):
        return str(int(number))  # int() strips the int-based enums' names.

    # Floats go via their shortest repr, so that 0.1 stays 0.1, not 0.1000000000000000055...
    exact = number if isinstance(number, decimal.Decimal) else decimal.Decimal(repr(number))
    if exact == exact.to_integral_value():
        return str(int(exact))
    return format(exact.normalize(), 'f')
