"""
Query tunneling: moving the over-long query strings into the request bodies.

The servers and proxies limit the length of the URLs, while the encoded query
parameters can be long (e.g. a batch of hundreds of compound ids). When the
request is longer than the limit, it is rewritten as a ``POST`` with the
original HTTP method in the ``X-HTTP-Method-Override`` header, so that
the server can recover the intended semantics:

* For the requests without a body, the query string becomes the body,
  as a ``application/x-www-form-urlencoded`` form.
* For the requests with a (JSON) body, both the query string and the body
  are packed as two parts of a ``multipart/mixed`` body: the form first,
  the JSON second, each with its own content type.

The decision is a pure function with no I/O and no randomness
(the multipart boundary is derived from the payload itself).
Within the limit, the request is passed through unchanged.
"""
import dataclasses
import hashlib
import logging
from typing import Mapping, Optional, Union

from restli._cogs.configs import configuration
from restli._cogs.structs import methods

DEFAULT_MAX_LENGTH = configuration.DEFAULT_MAX_LENGTH

METHOD_OVERRIDE_HEADER = 'X-HTTP-Method-Override'
CONTENT_TYPE_HEADER = 'Content-Type'
FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'
JSON_CONTENT_TYPE = 'application/json'
MULTIPART_CONTENT_TYPE = 'multipart/mixed'

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class TunnelDecision:
    method: methods.HTTPMethod
    url: str
    body: Optional[bytes] = None
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)
    """ The extra headers, to be added on top of the protocol's headers. """

    @property
    def tunneled(self) -> bool:
        return METHOD_OVERRIDE_HEADER in self.headers


def maybe_tunnel(
        method: Union[str, methods.RestliMethod],
        url: str,
        query: str,
        body: Union[None, str, bytes] = None,
        *,
        max_length: int = DEFAULT_MAX_LENGTH,
) -> TunnelDecision:
    """
    Decide whether the request should be tunneled, and rewrite it if so.

    The length of the untunneled request is the URL with the query string,
    plus the body if there is one (in bytes). Only the lengths strictly above
    ``max_length`` are tunneled. A request with an empty query string is never
    tunneled, since there is nothing to move to the body.

    The body is only for the methods that carry one (see `RestliMethod.has_body`);
    for other methods, it is ignored, so they are tunneled as forms only.
    """
    restli_method = methods.RestliMethod.parse(method)
    http_method = restli_method.http_method
    payload = body.encode('utf-8') if isinstance(body, str) else body
    if not restli_method.has_body:
        payload = None
    full_url = f"{url}?{query}" if query else url
    length = len(full_url.encode('utf-8')) + (len(payload) if payload is not None else 0)

    if not query or length <= max_length:
        return TunnelDecision(method=http_method, url=full_url, body=payload)

    logger.debug(f"Tunneling {restli_method.name} {url}: {length} > {max_length} bytes.")
    form = query.encode('utf-8')
    if payload is None:
        return TunnelDecision(
            method=methods.HTTPMethod.POST,
            url=url,
            body=form,
            headers={
                CONTENT_TYPE_HEADER: FORM_CONTENT_TYPE,
                METHOD_OVERRIDE_HEADER: http_method.value,
            },
        )
    else:
        boundary = make_boundary(form, payload)
        return TunnelDecision(
            method=methods.HTTPMethod.POST,
            url=url,
            body=_pack_multipart(boundary, form, payload),
            headers={
                CONTENT_TYPE_HEADER: f'{MULTIPART_CONTENT_TYPE}; boundary={boundary}',
                METHOD_OVERRIDE_HEADER: http_method.value,
            },
        )


def make_boundary(*parts: bytes) -> str:
    """
    Derive a multipart boundary from the parts, so that it never occurs in them.
    """
    salt = 0
    while True:
        digest = hashlib.sha1(str(salt).encode('ascii'))
        for part in parts:
            digest.update(b'\0')
            digest.update(part)
        boundary = f'restli-{digest.hexdigest()}'
        if not any(boundary.encode('ascii') in part for part in parts):
            return boundary
        salt += 1


def _pack_multipart(boundary: str, form: bytes, payload: bytes) -> bytes:
    delimiter = f'--{boundary}'.encode('ascii')
    return b'\r\n'.join([
        delimiter,
        f'{CONTENT_TYPE_HEADER}: {FORM_CONTENT_TYPE}'.encode('ascii'),
        b'',
        form,
        delimiter,
        f'{CONTENT_TYPE_HEADER}: {JSON_CONTENT_TYPE}'.encode('ascii'),
        b'',
        payload,
        delimiter + b'--',
    ])
