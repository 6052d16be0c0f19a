"""
Type aliases for the loggers, usable both at runtime and by mypy.

The typeshed declares ``logging.LoggerAdapter`` as a generic, but the runtime
class is not subscriptable on all supported Pythons.
"""
import logging
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# Whatever the users pass to the client to log the requests to.
Logger = Union[logging.Logger, LoggerAdapter]
