"""
The protocol-level methods (verbs) and how they travel over HTTP.

Several Rest.li methods share the same HTTP method (e.g. ``GET``, ``BATCH_GET``,
``FINDER`` are all HTTP ``GET``), so the Rest.li method is sent additionally
in the ``X-RestLi-Method`` header. Whether a method carries a request body
decides how an over-long request is tunneled.
"""
import enum
from typing import Mapping, Tuple, Union


class HTTPMethod(str, enum.Enum):
    GET = 'GET'
    POST = 'POST'
    PUT = 'PUT'
    DELETE = 'DELETE'

    def __str__(self) -> str:
        return str(self.value)


class RestliMethod(str, enum.Enum):
    """
    Rest.li methods; the values are as sent in the ``X-RestLi-Method`` header.
    """
    GET = 'get'
    BATCH_GET = 'batch_get'
    GET_ALL = 'get_all'
    FINDER = 'finder'
    BATCH_FINDER = 'batch_finder'
    CREATE = 'create'
    BATCH_CREATE = 'batch_create'
    UPDATE = 'update'
    BATCH_UPDATE = 'batch_update'
    PARTIAL_UPDATE = 'partial_update'
    BATCH_PARTIAL_UPDATE = 'batch_partial_update'
    DELETE = 'delete'
    BATCH_DELETE = 'batch_delete'
    ACTION = 'action'

    def __str__(self) -> str:
        return str(self.value)

    @property
    def http_method(self) -> HTTPMethod:
        return METHODS_TABLE[self][0]

    @property
    def has_body(self) -> bool:
        """ Does this method normally carry a request body. """
        return METHODS_TABLE[self][1]

    @classmethod
    def parse(cls, value: Union[str, "RestliMethod"]) -> "RestliMethod":
        """ Accept the methods as members, or by names in any case (``BATCH_GET``, ``batch-get``). """
        if isinstance(value, RestliMethod):
            return value
        try:
            return cls(str(value).lower().replace('-', '_'))
        except ValueError:
            raise ValueError(f"Unknown Rest.li method: {value!r}") from None


METHODS_TABLE: Mapping[RestliMethod, Tuple[HTTPMethod, bool]] = {
    RestliMethod.GET: (HTTPMethod.GET, False),
    RestliMethod.BATCH_GET: (HTTPMethod.GET, False),
    RestliMethod.GET_ALL: (HTTPMethod.GET, False),
    RestliMethod.FINDER: (HTTPMethod.GET, False),
    RestliMethod.BATCH_FINDER: (HTTPMethod.GET, False),
    RestliMethod.CREATE: (HTTPMethod.POST, True),
    RestliMethod.BATCH_CREATE: (HTTPMethod.POST, True),
    RestliMethod.UPDATE: (HTTPMethod.PUT, True),
    RestliMethod.BATCH_UPDATE: (HTTPMethod.PUT, True),
    RestliMethod.PARTIAL_UPDATE: (HTTPMethod.POST, True),
    RestliMethod.BATCH_PARTIAL_UPDATE: (HTTPMethod.POST, True),
    RestliMethod.DELETE: (HTTPMethod.DELETE, False),
    RestliMethod.BATCH_DELETE: (HTTPMethod.DELETE, False),
    RestliMethod.ACTION: (HTTPMethod.POST, True),
}
""" The verb-to-HTTP-method and verb-to-body-requirement table. """
