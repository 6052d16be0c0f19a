"""
Logging setup and the request-scoped loggers.

Everything is logged via the standard ``logging`` module to the ``restli.*``
loggers, and it is up to the application how to handle these messages.
`configure` is a shortcut for the CLI and simple scripts: it adds a handler
with one of the package's formatters to the root logger.

The per-request messages are logged via `RequestLogger`, which carries
the reference to the request (the Rest.li method and the URL) in the records.
The prefixing formatters show it as ``[GET https://...] message``;
the JSON formatters put it into a separate field instead (``"request"``).
"""
import copy
import enum
import logging
from typing import Any, Dict, MutableMapping, Optional, Tuple, Type, Union

from pythonjsonlogger.core import RESERVED_ATTRS
from pythonjsonlogger.json import JsonFormatter

from restli._cogs.helpers import typedefs

logger = logging.getLogger('restli.requests')

REF_ATTR = 'restli_ref'
DEFAULT_JSON_REFKEY = 'request'
""" The field of the request reference in the JSON logs, unless overridden. """

# The upper level of every severity, as understood by the log collectors.
SEVERITIES = [
    (logging.DEBUG, 'debug'),
    (logging.INFO, 'info'),
    (logging.WARNING, 'warn'),
    (logging.ERROR, 'error'),
]


class LogFormat(enum.Enum):
    """ Log formats, as specified on CLI. """
    PLAIN = '%(message)s'
    FULL = '[%(asctime)s] %(name)-20.20s [%(levelname)-8.8s] %(message)s'
    JSON = '-json-'  # never used as a format string


def get_severity(levelno: int) -> str:
    for upper, severity in SEVERITIES:
        if levelno <= upper:
            return severity
    return 'fatal'


def get_ref(record: logging.LogRecord) -> Optional[Dict[str, str]]:
    ref: Optional[Dict[str, str]] = getattr(record, REF_ATTR, None)
    return ref


class RequestFormatter(logging.Formatter):
    """ A common base of all formatters installed by `configure`. """


class RequestTextFormatter(RequestFormatter):
    pass


class RequestJsonFormatter(RequestFormatter, JsonFormatter):

    def __init__(
            self,
            *args: Any,
            refkey: Optional[str] = None,
            **kwargs: Any,
    ) -> None:
        # The reference goes under its own key, never as is.
        kwargs['reserved_attrs'] = set(kwargs.get('reserved_attrs', RESERVED_ATTRS)) | {REF_ATTR}
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, **kwargs)
        self.refkey: str = refkey or DEFAULT_JSON_REFKEY

    def add_fields(
            self,
            log_record: Dict[str, Any],
            record: logging.LogRecord,
            message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        ref = get_ref(record)
        if ref is not None:
            log_record[self.refkey] = ref
        log_record.setdefault('severity', get_severity(record.levelno))


class RequestPrefixingMixin(RequestFormatter):

    def format(self, record: logging.LogRecord) -> str:
        ref = get_ref(record)
        if ref is not None:
            prefix = ' '.join(filter(None, [ref.get('method'), ref.get('url')]))
            record = copy.copy(record)  # other handlers see the original message
            record.msg = f"[{prefix}] {record.msg}"
        return super().format(record)


class RequestPrefixingTextFormatter(RequestPrefixingMixin, RequestTextFormatter):
    pass


class RequestPrefixingJsonFormatter(RequestPrefixingMixin, RequestJsonFormatter):
    pass


class RequestLogger(typedefs.LoggerAdapter):
    """
    A logger/adapter to carry the request's identifiers for formatting.

    Constructed for each individual request sent. Only the Rest.li method
    and the URL are carried: the headers & bodies can contain the secrets.
    """

    def __init__(
            self,
            *,
            method: str,
            url: str,
            base: Optional[typedefs.Logger] = None,
    ) -> None:
        extra = {REF_ATTR: {'method': method, 'url': url}}
        super().__init__(base if base is not None else logger, extra)

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        # The per-message extras are kept, not replaced by the adapter's ones.
        kwargs['extra'] = {**(self.extra or {}), **kwargs.get('extra', {})}
        return msg, kwargs


def configure(
        debug: Optional[bool] = None,
        verbose: Optional[bool] = None,
        quiet: Optional[bool] = None,
        log_format: Union[str, LogFormat] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(make_formatter(log_format=log_format,
                                        log_prefix=log_prefix,
                                        log_refkey=log_refkey))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug or verbose else logging.WARNING if quiet else logging.INFO)

    # The networking internals are too noisy for anything but debugging.
    for name in ['asyncio', 'aiohttp']:
        noisy = logging.getLogger(name)
        noisy.propagate = bool(debug)
        if not debug:
            noisy.handlers[:] = [logging.NullHandler()]


def make_formatter(
        log_format: Union[str, LogFormat] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> RequestFormatter:
    """
    Pick a formatter for the format. Unless stated explicitly, only the text
    formats are prefixed: the JSON ones carry the request reference in a field.
    """
    if log_prefix is None:
        log_prefix = log_format is not LogFormat.JSON

    cls: Type[RequestFormatter]
    if log_format is LogFormat.JSON:
        cls = RequestPrefixingJsonFormatter if log_prefix else RequestJsonFormatter
        return cls(refkey=log_refkey)  # type: ignore[call-arg]
    elif isinstance(log_format, (LogFormat, str)):
        fmt = log_format.value if isinstance(log_format, LogFormat) else log_format
        cls = RequestPrefixingTextFormatter if log_prefix else RequestTextFormatter
        return cls(fmt)
    else:
        raise ValueError(f"Unsupported log format: {log_format!r}")
