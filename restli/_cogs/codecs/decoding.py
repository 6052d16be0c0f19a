"""
Decoding of the grammar tokens back into native Python data.

This is the inverse of `restli._cogs.codecs.encoding`. The grammar is untyped,
so all scalars are decoded as strings: ``List(1,true)`` becomes ``['1', 'true']``.
Re-encoding the decoded data gives the same token as the original one.

There are two flavours of escaping:

* The regular one (`decode`), where the string scalars are fully
  percent-encoded, as they are in the URLs.
* The reduced one (`reduced_decode`), where only the grammar delimiters
  and the escape char itself are escaped, and everything else is literal.
  This is how the servers return the created entities' ids in the headers
  (e.g. ``x-restli-id: (account:urn%3Ali%3AsponsoredAccount%3A123,user:...)``).
"""
import re
import urllib.parse
from typing import Any, Callable, Dict, List, Tuple

from restli._cogs.codecs import encoding
from restli._cogs.structs import errors

_REDUCED_ESCAPES = re.compile(r'%(25|2C|28|29|3A|27)', re.IGNORECASE)
_SCALAR_TERMINATORS = frozenset(encoding.GRAMMAR_DELIMITERS) - {"'"}


def decode(token: str) -> Any:
    """
    Decode a fully escaped token (as found in URLs) into native data.
    """
    return _decode(token, unescape=urllib.parse.unquote)


def reduced_decode(token: str) -> Any:
    """
    Decode a token in the reduced escaping (as found in the response headers).

    A top-level scalar is taken as a whole, with no grammar checks:
    the simple ids, such as URNs, come with their colons unescaped.
    """
    if isinstance(token, str) and not token.startswith((encoding.LIST_PREFIX, encoding.MAP_PREFIX)):
        if token == '':
            return None
        elif token == encoding.EMPTY_STRING_TOKEN:
            return ''
        return _unescape_reduced(token)
    return _decode(token, unescape=_unescape_reduced)


def _unescape_reduced(text: str) -> str:
    return _REDUCED_ESCAPES.sub(lambda m: chr(int(m.group(1), 16)), text)


def _decode(token: str, *, unescape: Callable[[str], str]) -> Any:
    if not isinstance(token, str):
        raise errors.DecodingError(f"Only strings can be decoded, got {token!r}.")
    if token == '':
        return None
    try:
        value, pos = _parse_value(token, 0, unescape=unescape)
    except RecursionError as e:
        raise errors.DecodingError("The token is nested too deeply to be decoded.") from e
    if pos != len(token):
        raise errors.DecodingError(f"Unexpected trailing data at position {pos}: {token!r}")
    return value


def _parse_value(text: str, pos: int, *, unescape: Callable[[str], str]) -> Tuple[Any, int]:
    if text.startswith(encoding.LIST_PREFIX, pos):
        return _parse_list(text, pos + len(encoding.LIST_PREFIX), unescape=unescape)
    elif text.startswith(encoding.MAP_PREFIX, pos):
        return _parse_map(text, pos + len(encoding.MAP_PREFIX), unescape=unescape)
    else:
        return _parse_scalar(text, pos, unescape=unescape)


def _parse_list(text: str, pos: int, *, unescape: Callable[[str], str]) -> Tuple[List[Any], int]:
    items: List[Any] = []
    if text.startswith(encoding.SUFFIX, pos):
        return items, pos + 1
    while True:
        item, pos = _parse_value(text, pos, unescape=unescape)
        items.append(item)
        pos, closed = _parse_separator(text, pos)
        if closed:
            return items, pos


def _parse_map(text: str, pos: int, *, unescape: Callable[[str], str]) -> Tuple[Dict[str, Any], int]:
    result: Dict[str, Any] = {}
    if text.startswith(encoding.SUFFIX, pos):
        return result, pos + 1
    while True:
        key, pos = _parse_scalar(text, pos, unescape=unescape)
        if not text.startswith(':', pos):
            raise errors.DecodingError(f"Expected ':' at position {pos}: {text!r}")
        if key in result:
            raise errors.DecodingError(f"Duplicate key {key!r} at position {pos}: {text!r}")
        value, pos = _parse_value(text, pos + 1, unescape=unescape)
        result[key] = value
        pos, closed = _parse_separator(text, pos)
        if closed:
            return result, pos


def _parse_separator(text: str, pos: int) -> Tuple[int, bool]:
    if text.startswith(',', pos):
        return pos + 1, False
    elif text.startswith(encoding.SUFFIX, pos):
        return pos + 1, True
    elif pos >= len(text):
        raise errors.DecodingError(f"Unbalanced parentheses: {text!r}")
    else:
        raise errors.DecodingError(f"Expected ',' or ')' at position {pos}: {text!r}")


def _parse_scalar(text: str, pos: int, *, unescape: Callable[[str], str]) -> Tuple[str, int]:
    end = pos
    while end < len(text) and text[end] not in _SCALAR_TERMINATORS:
        end += 1
    raw = text[pos:end]
    if raw == encoding.EMPTY_STRING_TOKEN:
        return '', end
    elif not raw:
        raise errors.DecodingError(f"Empty element at position {pos}: {text!r}")
    elif "'" in raw:
        raise errors.DecodingError(f"Unescaped quote at position {pos}: {text!r}")
    return unescape(raw), end
