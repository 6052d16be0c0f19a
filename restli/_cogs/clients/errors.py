"""
Rest.li API errors, as reported by the servers in the error responses.

The HTTP statuses are mapped to a small hierarchy of our own exceptions,
so that the callers do not depend on ``aiohttp`` to catch them. The original
``aiohttp.ClientResponseError`` is chained as the cause.

The networking errors (connection, DNS, SSL, timeouts) are not API errors:
they are escalated from ``aiohttp`` as is.

The Rest.li error payload (``status``, ``code``, ``message``,
``serviceErrorCode``, ``errorDetails``) is exposed via the properties
when the server provides it as a JSON object.
"""
import collections.abc
import json
from typing import Any, Mapping, Optional

import aiohttp
from typing_extensions import TypedDict

from restli._cogs.structs import errors


class RawErrorDetails(TypedDict, total=False):
    status: int
    code: str
    message: str
    serviceErrorCode: int
    errorDetails: Mapping[str, Any]


class APIError(errors.RestliError):

    def __init__(
            self,
            payload: Optional[RawErrorDetails],
            *,
            status: int,
    ) -> None:
        message = payload.get('message') if payload else None
        super().__init__(message, payload)
        self._status = status
        self._payload = payload

    @property
    def status(self) -> int:
        return self._status

    @property
    def payload(self) -> Optional[RawErrorDetails]:
        return self._payload

    @property
    def code(self) -> Optional[str]:
        return self._payload.get('code') if self._payload else None

    @property
    def message(self) -> Optional[str]:
        return self._payload.get('message') if self._payload else None

    @property
    def service_error_code(self) -> Optional[int]:
        return self._payload.get('serviceErrorCode') if self._payload else None

    @property
    def details(self) -> Optional[Mapping[str, Any]]:
        return self._payload.get('errorDetails') if self._payload else None


class APIUnauthorizedError(APIError):
    pass


class APIForbiddenError(APIError):
    pass


class APINotFoundError(APIError):
    pass


class APIConflictError(APIError):
    pass


class APIServerError(APIError):
    pass


async def check_response(
        response: aiohttp.ClientResponse,
) -> None:
    """
    Check for the API errors, and raise with extended information.
    """
    if response.status >= 400:

        # Read the response's body before it is closed by raise_for_status().
        payload: Optional[RawErrorDetails]
        try:
            payload = await response.json(content_type=None)
        except (json.JSONDecodeError, UnicodeDecodeError,
                aiohttp.ContentTypeError, aiohttp.ClientConnectionError):
            payload = None

        # Only the error-shaped payloads; who knows what else can be dumped there.
        if not isinstance(payload, collections.abc.Mapping):
            payload = None

        cls = (
            APIUnauthorizedError if response.status == 401 else
            APIForbiddenError if response.status == 403 else
            APINotFoundError if response.status == 404 else
            APIConflictError if response.status == 409 else
            APIServerError if response.status >= 500 else
            APIError
        )

        # Raise the package-specific error while keeping the original error in scope.
        # This call also closes the response's body, so it cannot be read afterwards.
        try:
            response.raise_for_status()
        except aiohttp.ClientResponseError as e:
            raise cls(payload, status=response.status) from e
