"""
Request builders: one per Rest.li method.

The builders only assemble the requests (method, URL, headers, body);
they do not send anything. The results are sent by `RestliClient`,
or by any other HTTP client of the users' choice.

All the encoding is done here: the entity ids go to the URL paths,
the query parameters go to the query strings, the entities go to the JSON
bodies, the patches are generated from the entities' snapshots.
The read, delete, update, and partial-update requests are tunneled if they
are too long; the create & action requests are sent as is.

The entity ids, query parameters, and entities are passed as native data
and must not be pre-encoded by the callers.
"""
import dataclasses
import decimal
import json
from typing import Any, Dict, Mapping, Optional, Sequence

from restli._cogs.codecs import encoding, tunneling
from restli._cogs.configs import configuration
from restli._cogs.structs import errors, methods, patches, values

RESTLI_METHOD_HEADER = 'X-RestLi-Method'
PROTOCOL_VERSION_HEADER = 'X-RestLi-Protocol-Version'
AUTHORIZATION_HEADER = 'Authorization'


@dataclasses.dataclass(frozen=True)
class RequestSpec:
    restli_method: methods.RestliMethod
    method: methods.HTTPMethod
    url: str
    headers: Mapping[str, str]
    body: Optional[bytes] = None

    @property
    def tunneled(self) -> bool:
        return tunneling.METHOD_OVERRIDE_HEADER in self.headers


def get_base_url(
        version: Optional[str] = None,
        *,
        settings: Optional[configuration.RestliSettings] = None,
) -> str:
    settings = settings if settings is not None else configuration.RestliSettings()
    return settings.api.versioned_base_url if version else settings.api.base_url


def build_headers(
        restli_method: methods.RestliMethod,
        *,
        access_token: str,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> Dict[str, str]:
    settings = settings if settings is not None else configuration.RestliSettings()
    headers = {
        'Connection': 'Keep-Alive',
        PROTOCOL_VERSION_HEADER: settings.api.protocol_version,
        RESTLI_METHOD_HEADER: restli_method.value,
        AUTHORIZATION_HEADER: f'Bearer {access_token}',
        tunneling.CONTENT_TYPE_HEADER: tunneling.JSON_CONTENT_TYPE,
    }
    if version:
        headers[settings.api.version_header] = version
    return headers


class BodyEncoder(json.JSONEncoder):
    """ Write the decimals as the JSON numbers, integral ones without a fraction. """

    def default(self, o: Any) -> Any:
        if isinstance(o, decimal.Decimal):
            return int(o) if o == o.to_integral_value() else float(o)
        return super().default(o)


def serialize_body(data: Any) -> bytes:
    """
    Serialize the body as compact JSON.

    The data goes through the structured values first, so that the unsupported
    shapes fail with `EncodingError` the same way as in the URLs.
    """
    native = values.to_native(values.from_native(data))
    return json.dumps(native, cls=BodyEncoder, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def build_get(
        resource: str,
        *,
        access_token: str,
        id: Any = None,
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    """ Fetch an entity by its id; no id for simple (singleton) resources. """
    settings = settings if settings is not None else configuration.RestliSettings()
    return _assemble(
        methods.RestliMethod.GET,
        url=_entity_url(resource, id, version=version, settings=settings),
        params=query_params,
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_batch_get(
        resource: str,
        *,
        access_token: str,
        ids: Sequence[Any],
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    settings = settings if settings is not None else configuration.RestliSettings()
    return _assemble(
        methods.RestliMethod.BATCH_GET,
        url=_resource_url(resource, version=version, settings=settings),
        params={'ids': list(ids), **(query_params or {})},
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_get_all(
        resource: str,
        *,
        access_token: str,
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    settings = settings if settings is not None else configuration.RestliSettings()
    return _assemble(
        methods.RestliMethod.GET_ALL,
        url=_resource_url(resource, version=version, settings=settings),
        params=query_params,
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_finder(
        resource: str,
        *,
        access_token: str,
        finder_name: str,
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    """ Find the entities by the criteria in the query parameters. """
    settings = settings if settings is not None else configuration.RestliSettings()
    return _assemble(
        methods.RestliMethod.FINDER,
        url=_resource_url(resource, version=version, settings=settings),
        params={'q': finder_name, **(query_params or {})},
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_batch_finder(
        resource: str,
        *,
        access_token: str,
        batch_finder_name: str,
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    settings = settings if settings is not None else configuration.RestliSettings()
    return _assemble(
        methods.RestliMethod.BATCH_FINDER,
        url=_resource_url(resource, version=version, settings=settings),
        params={'bq': batch_finder_name, **(query_params or {})},
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_create(
        resource: str,
        *,
        access_token: str,
        entity: Mapping[str, Any],
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    settings = settings if settings is not None else configuration.RestliSettings()
    return _assemble(
        methods.RestliMethod.CREATE,
        url=_resource_url(resource, version=version, settings=settings),
        params=query_params,
        data=entity,
        tunnel=False,
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_batch_create(
        resource: str,
        *,
        access_token: str,
        entities: Sequence[Mapping[str, Any]],
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    settings = settings if settings is not None else configuration.RestliSettings()
    return _assemble(
        methods.RestliMethod.BATCH_CREATE,
        url=_resource_url(resource, version=version, settings=settings),
        params=query_params,
        data={'elements': list(entities)},
        tunnel=False,
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_update(
        resource: str,
        *,
        access_token: str,
        entity: Mapping[str, Any],
        id: Any = None,
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    """ Overwrite the whole entity. """
    settings = settings if settings is not None else configuration.RestliSettings()
    return _assemble(
        methods.RestliMethod.UPDATE,
        url=_entity_url(resource, id, version=version, settings=settings),
        params=query_params,
        data=entity,
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_batch_update(
        resource: str,
        *,
        access_token: str,
        ids: Sequence[Any],
        entities: Sequence[Mapping[str, Any]],
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    settings = settings if settings is not None else configuration.RestliSettings()
    if len(ids) != len(entities):
        raise errors.RequestError("The ids and entities must be of the same length.")
    return _assemble(
        methods.RestliMethod.BATCH_UPDATE,
        url=_resource_url(resource, version=version, settings=settings),
        params={'ids': list(ids), **(query_params or {})},
        data={'entities': _keyed_by_ids(ids, entities, settings=settings)},
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_partial_update(
        resource: str,
        *,
        access_token: str,
        id: Any = None,
        patch_set_object: Optional[Mapping[str, Any]] = None,
        original_entity: Optional[Mapping[str, Any]] = None,
        modified_entity: Optional[Mapping[str, Any]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    """
    Update some fields of an entity.

    Either the fields to set are passed directly (``patch_set_object``),
    or the original & modified entities are passed, and the patch is calculated.
    """
    settings = settings if settings is not None else configuration.RestliSettings()
    patch = _make_patch(patch_set_object, original_entity, modified_entity)
    return _assemble(
        methods.RestliMethod.PARTIAL_UPDATE,
        url=_entity_url(resource, id, version=version, settings=settings),
        params=query_params,
        data=patch.as_body(),
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_batch_partial_update(
        resource: str,
        *,
        access_token: str,
        ids: Sequence[Any],
        patch_set_objects: Optional[Sequence[Mapping[str, Any]]] = None,
        original_entities: Optional[Sequence[Mapping[str, Any]]] = None,
        modified_entities: Optional[Sequence[Mapping[str, Any]]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    settings = settings if settings is not None else configuration.RestliSettings()
    if patch_set_objects is not None:
        if original_entities is not None or modified_entities is not None:
            raise errors.RequestError("Either the patch set objects or the original & modified "
                                      "entities can be passed, not both.")
        if len(ids) != len(patch_set_objects):
            raise errors.RequestError("The ids and patch set objects must be of the same length.")
        patch_list = [patches.set_patch(fields) for fields in patch_set_objects]
    elif original_entities is not None and modified_entities is not None:
        if not len(ids) == len(original_entities) == len(modified_entities):
            raise errors.RequestError("The ids, original & modified entities must be of the same length.")
        patch_list = [patches.generate_patch(original, modified)
                      for original, modified in zip(original_entities, modified_entities)]
    else:
        raise errors.RequestError("Either the patch set objects or the original & modified "
                                  "entities must be passed.")

    return _assemble(
        methods.RestliMethod.BATCH_PARTIAL_UPDATE,
        url=_resource_url(resource, version=version, settings=settings),
        params={'ids': list(ids), **(query_params or {})},
        data={'entities': _keyed_by_ids(ids, [patch.as_body() for patch in patch_list],
                                        settings=settings)},
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_delete(
        resource: str,
        *,
        access_token: str,
        id: Any = None,
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    settings = settings if settings is not None else configuration.RestliSettings()
    return _assemble(
        methods.RestliMethod.DELETE,
        url=_entity_url(resource, id, version=version, settings=settings),
        params=query_params,
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_batch_delete(
        resource: str,
        *,
        access_token: str,
        ids: Sequence[Any],
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    settings = settings if settings is not None else configuration.RestliSettings()
    return _assemble(
        methods.RestliMethod.BATCH_DELETE,
        url=_resource_url(resource, version=version, settings=settings),
        params={'ids': list(ids), **(query_params or {})},
        access_token=access_token,
        version=version,
        settings=settings,
    )


def build_action(
        resource: str,
        *,
        access_token: str,
        action_name: str,
        data: Optional[Mapping[str, Any]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
        version: Optional[str] = None,
        settings: Optional[configuration.RestliSettings] = None,
) -> RequestSpec:
    settings = settings if settings is not None else configuration.RestliSettings()
    return _assemble(
        methods.RestliMethod.ACTION,
        url=_resource_url(resource, version=version, settings=settings),
        params={'action': action_name, **(query_params or {})},
        data=data,
        tunnel=False,
        access_token=access_token,
        version=version,
        settings=settings,
    )


def _assemble(
        restli_method: methods.RestliMethod,
        *,
        url: str,
        params: Optional[Mapping[str, Any]],
        data: Any = None,
        tunnel: bool = True,
        access_token: str,
        version: Optional[str],
        settings: configuration.RestliSettings,
) -> RequestSpec:
    query = encoding.encode_params(params, settings=settings)
    body = serialize_body(data) if data is not None and restli_method.has_body else None
    if tunnel and settings.tunneling.enabled:
        decision = tunneling.maybe_tunnel(restli_method, url, query, body,
                                          max_length=settings.tunneling.max_length)
    else:
        decision = tunneling.TunnelDecision(
            method=restli_method.http_method,
            url=f"{url}?{query}" if query else url,
            body=body,
        )

    headers = build_headers(restli_method, access_token=access_token, version=version, settings=settings)
    headers.update(decision.headers)
    return RequestSpec(
        restli_method=restli_method,
        method=decision.method,
        url=decision.url,
        headers=headers,
        body=decision.body,
    )


def _resource_url(
        resource: str,
        *,
        version: Optional[str],
        settings: configuration.RestliSettings,
) -> str:
    base_url = get_base_url(version, settings=settings)
    return base_url.rstrip('/') + '/' + resource.lstrip('/')


def _entity_url(
        resource: str,
        id: Any,
        *,
        version: Optional[str],
        settings: configuration.RestliSettings,
) -> str:
    url = _resource_url(resource, version=version, settings=settings)
    return encoding.build_entity_path(url, id, settings=settings)


def _keyed_by_ids(
        ids: Sequence[Any],
        items: Sequence[Any],
        *,
        settings: configuration.RestliSettings,
) -> Dict[str, Any]:
    return {encoding.encode_value(id, settings=settings): item for id, item in zip(ids, items)}


def _make_patch(
        patch_set_object: Optional[Mapping[str, Any]],
        original_entity: Optional[Mapping[str, Any]],
        modified_entity: Optional[Mapping[str, Any]],
) -> patches.PatchDocument:
    if patch_set_object is not None:
        if original_entity is not None or modified_entity is not None:
            raise errors.RequestError("Either the patch set object or the original & modified "
                                      "entities can be passed, not both.")
        return patches.set_patch(patch_set_object)
    elif original_entity is not None and modified_entity is not None:
        return patches.generate_patch(original_entity, modified_entity)
    else:
        raise errors.RequestError("Either the patch set object or the original & modified "
                                  "entities must be passed.")
