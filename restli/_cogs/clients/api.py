"""
The dispatcher: sending the assembled requests and interpreting the responses.

The requests are built by the pure builders in `requests`; this module only
adds the I/O on top: one HTTP exchange per request, no retries. The errors
are escalated as the `APIError` family (for the HTTP statuses >= 400),
or as the client library's own errors for the networking issues.
"""
import asyncio
import dataclasses
from typing import Any, Mapping, Optional

import aiohttp
import yarl

from restli._cogs.clients import errors, requests
from restli._cogs.codecs import decoding
from restli._cogs.configs import configuration
from restli._cogs.helpers import loggers, typedefs, versions

CREATED_ID_HEADERS = ['x-restli-id', 'x-linkedin-id']


@dataclasses.dataclass(frozen=True)
class RestliResponse:
    status: int
    headers: Mapping[str, str]
    data: Any = None
    created_entity_id: Any = None
    """ The decoded id of the created entity; only for the ``create`` method. """


def get_created_entity_id(headers: Mapping[str, str]) -> Any:
    """
    Extract & decode the created entity's id from the response headers.

    The id is in the reduced-encoded form, as used in the headers;
    e.g. ``(name:foo,value:1)`` for the compound keys. ``None`` if absent.
    """
    lowered = {str(key).lower(): val for key, val in headers.items()}
    for name in CREATED_ID_HEADERS:
        if name in lowered:
            return decoding.reduced_decode(lowered[name])
    return None


class RestliClient:
    """
    An asynchronous client for the Rest.li APIs.

    The session can be passed from outside, in which case it is neither
    created nor closed by the client. Otherwise, the client creates its own
    session on the first request, and closes it in `close` or on exit::

        async with restli.RestliClient() as client:
            response = await client.get('/adAccounts', id=123, access_token=token)
    """

    def __init__(
            self,
            session: Optional[aiohttp.ClientSession] = None,
            *,
            settings: Optional[configuration.RestliSettings] = None,
            logger: Optional[typedefs.Logger] = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._own_session = session is None
        self._settings = settings if settings is not None else configuration.RestliSettings()
        self._logger = logger

    async def __aenter__(self) -> "RestliClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    @property
    def settings(self) -> configuration.RestliSettings:
        return self._settings

    async def close(self) -> None:
        if self._own_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                headers={'User-Agent': f'restli-codec/{versions.version or "devel"}'},
            )
        return self._session

    async def send(self, spec: requests.RequestSpec) -> RestliResponse:
        """
        Send one request as built, and return the interpreted response.
        """
        logger = loggers.RequestLogger(
            method=spec.restli_method.name,
            url=spec.url,
            base=self._logger,
        )
        timeout = aiohttp.ClientTimeout(
            total=self._settings.networking.request_timeout,
            sock_connect=self._settings.networking.connect_timeout,
        )

        suffix = " (tunneled)" if spec.tunneled else ""
        logger.debug(f"Sending as {spec.method.value}{suffix}.")
        try:
            response = await self._get_session().request(
                method=spec.method.value,
                url=yarl.URL(spec.url, encoded=True),  # already encoded, keep as is.
                data=spec.body,
                headers=dict(spec.headers),
                timeout=timeout,
            )
            await errors.check_response(response)  # but do not parse it!
        except errors.APIError as e:
            logger.error(f"Request failed with status {e.status}: {e.message or 'no details'}")
            raise
        except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
            logger.error(f"Request failed: {e!r}")
            raise

        async with response:
            data = await response.json(content_type=None)
        logger.debug(f"Succeeded with status {response.status}.")
        return RestliResponse(status=response.status, headers=response.headers, data=data)

    async def get(self, resource: str, **kwargs: Any) -> RestliResponse:
        """ See `restli.build_get` for the arguments. """
        return await self.send(requests.build_get(resource, settings=self._settings, **kwargs))

    async def batch_get(self, resource: str, **kwargs: Any) -> RestliResponse:
        return await self.send(requests.build_batch_get(resource, settings=self._settings, **kwargs))

    async def get_all(self, resource: str, **kwargs: Any) -> RestliResponse:
        return await self.send(requests.build_get_all(resource, settings=self._settings, **kwargs))

    async def finder(self, resource: str, **kwargs: Any) -> RestliResponse:
        return await self.send(requests.build_finder(resource, settings=self._settings, **kwargs))

    async def batch_finder(self, resource: str, **kwargs: Any) -> RestliResponse:
        return await self.send(requests.build_batch_finder(resource, settings=self._settings, **kwargs))

    async def create(self, resource: str, **kwargs: Any) -> RestliResponse:
        """
        Create an entity, and decode its new id from the response headers.
        """
        response = await self.send(requests.build_create(resource, settings=self._settings, **kwargs))
        created_entity_id = get_created_entity_id(response.headers)
        return dataclasses.replace(response, created_entity_id=created_entity_id)

    async def batch_create(self, resource: str, **kwargs: Any) -> RestliResponse:
        return await self.send(requests.build_batch_create(resource, settings=self._settings, **kwargs))

    async def update(self, resource: str, **kwargs: Any) -> RestliResponse:
        return await self.send(requests.build_update(resource, settings=self._settings, **kwargs))

    async def batch_update(self, resource: str, **kwargs: Any) -> RestliResponse:
        return await self.send(requests.build_batch_update(resource, settings=self._settings, **kwargs))

    async def partial_update(self, resource: str, **kwargs: Any) -> RestliResponse:
        return await self.send(requests.build_partial_update(resource, settings=self._settings, **kwargs))

    async def batch_partial_update(self, resource: str, **kwargs: Any) -> RestliResponse:
        spec = requests.build_batch_partial_update(resource, settings=self._settings, **kwargs)
        return await self.send(spec)

    async def delete(self, resource: str, **kwargs: Any) -> RestliResponse:
        return await self.send(requests.build_delete(resource, settings=self._settings, **kwargs))

    async def batch_delete(self, resource: str, **kwargs: Any) -> RestliResponse:
        return await self.send(requests.build_batch_delete(resource, settings=self._settings, **kwargs))

    async def action(self, resource: str, **kwargs: Any) -> RestliResponse:
        return await self.send(requests.build_action(resource, settings=self._settings, **kwargs))
