"""
All configuration flags, options, settings to fine-tune the encoding & requests.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

The settings are never global: they are passed explicitly to the functions
and classes that need them. When nothing is passed, the defaults are used,
which are the protocol's conventional values.

The groups can be adjusted before the use::

    settings = restli.RestliSettings()
    settings.tunneling.max_length = 2000
    settings.encoding.safe_chars = '!*'
    client = restli.RestliClient(settings=settings)
"""
import dataclasses
from typing import Optional

DEFAULT_MAX_LENGTH = 4000
"""
The default length limit of a request (URL with the query string, plus the body)
before it is tunneled. Not a protocol constant, but a conventional one.
"""


@dataclasses.dataclass
class EncodingSettings:

    safe_chars: str = ''
    """
    Extra characters that may pass unescaped in the encoded string scalars.

    By default, only the URI-unreserved characters (``A-Z a-z 0-9 - . _ ~``)
    pass as is; everything else is percent-escaped.
    The grammar delimiters ``( ) , : '`` and the escape char ``%`` are always
    escaped regardless of this setting, since they would break the structure.

    Whatever is unsafe for the URL path or query is escaped anyway
    by the second (path- or query-level) encoding layer.
    """


@dataclasses.dataclass
class TunnelingSettings:

    enabled: bool = True
    """
    Should the over-long requests be tunneled at all.
    If disabled, the requests are sent as is, whatever the length.
    """

    max_length: int = DEFAULT_MAX_LENGTH
    """
    The length limit of the untunneled request: the URL with the query string,
    plus the body (if any), measured in bytes. Above this, the request
    is rewritten into a ``POST`` with the query string moved into the body.
    """


@dataclasses.dataclass
class APISettings:

    base_url: str = 'https://api.linkedin.com/v2'
    """ The base URL of the non-versioned APIs. """

    versioned_base_url: str = 'https://api.linkedin.com/rest'
    """ The base URL of the versioned APIs, used when a version is requested. """

    version_header: str = 'LinkedIn-Version'
    """ The header carrying the requested API version (``YYYYMM`` or ``YYYYMM.RR``). """

    protocol_version: str = '2.0.0'
    """ The Rest.li protocol version, as sent in ``X-RestLi-Protocol-Version``. """


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # sec
    """
    A timeout for the whole request, including the response's body reading.
    ``None`` means no timeout.
    """

    connect_timeout: Optional[float] = None  # sec
    """
    A timeout for establishing a connection to the server.
    ``None`` means no specific timeout (only the request's one).
    """


@dataclasses.dataclass
class RestliSettings:
    encoding: EncodingSettings = dataclasses.field(default_factory=EncodingSettings)
    tunneling: TunnelingSettings = dataclasses.field(default_factory=TunnelingSettings)
    api: APISettings = dataclasses.field(default_factory=APISettings)
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
