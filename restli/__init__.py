"""
The main module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the package's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from restli._cogs.configs.configuration import (
    RestliSettings,
    EncodingSettings,
    TunnelingSettings,
    APISettings,
    NetworkingSettings,
)
from restli._cogs.helpers.typedefs import (
    Logger,
)
from restli._cogs.helpers.versions import (
    version as __version__,
)
from restli._cogs.helpers.loggers import (
    LogFormat,
    RequestLogger,
    configure as configure_logging,
)
from restli._cogs.structs.errors import (
    RestliError,
    EncodingError,
    DecodingError,
    PatchError,
    EmptyPatchError,
    InvalidPatchInputError,
    RequestError,
)
from restli._cogs.structs.values import (
    StructuredValue,
    Null,
    Boolean,
    Number,
    String,
    ListValue,
    MapValue,
    NULL,
    from_native,
    to_native,
)
from restli._cogs.structs.diffs import (
    ABSENT,
    Diff,
    DiffItem,
    DiffOperation,
    diff,
)
from restli._cogs.structs.patches import (
    PatchDocument,
    generate_patch,
    set_patch,
    parse_patch,
    apply_patch,
)
from restli._cogs.structs.methods import (
    HTTPMethod,
    RestliMethod,
)
from restli._cogs.codecs.encoding import (
    Placement,
    encode_value,
    encode_entity_id,
    encode_params,
    build_entity_path,
)
from restli._cogs.codecs.decoding import (
    decode,
    reduced_decode,
)
from restli._cogs.codecs.tunneling import (
    DEFAULT_MAX_LENGTH,
    TunnelDecision,
    maybe_tunnel,
)
from restli._cogs.clients.errors import (
    APIError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
    APIServerError,
)
from restli._cogs.clients.requests import (
    RequestSpec,
    build_headers,
    build_get,
    build_batch_get,
    build_get_all,
    build_finder,
    build_batch_finder,
    build_create,
    build_batch_create,
    build_update,
    build_batch_update,
    build_partial_update,
    build_batch_partial_update,
    build_delete,
    build_batch_delete,
    build_action,
)
from restli._cogs.clients.api import (
    RestliClient,
    RestliResponse,
    get_created_entity_id,
)

__all__ = [
    'RestliSettings', 'EncodingSettings', 'TunnelingSettings',
    'APISettings', 'NetworkingSettings',
    'Logger', 'LogFormat', 'RequestLogger', 'configure_logging',
    'RestliError', 'EncodingError', 'DecodingError',
    'PatchError', 'EmptyPatchError', 'InvalidPatchInputError', 'RequestError',
    'StructuredValue', 'Null', 'Boolean', 'Number', 'String', 'ListValue', 'MapValue',
    'NULL', 'from_native', 'to_native',
    'ABSENT', 'Diff', 'DiffItem', 'DiffOperation', 'diff',
    'PatchDocument', 'generate_patch', 'set_patch', 'parse_patch', 'apply_patch',
    'HTTPMethod', 'RestliMethod',
    'Placement', 'encode_value', 'encode_entity_id', 'encode_params', 'build_entity_path',
    'decode', 'reduced_decode',
    'DEFAULT_MAX_LENGTH', 'TunnelDecision', 'maybe_tunnel',
    'APIError', 'APIUnauthorizedError', 'APIForbiddenError',
    'APINotFoundError', 'APIConflictError', 'APIServerError',
    'RequestSpec', 'build_headers',
    'build_get', 'build_batch_get', 'build_get_all', 'build_finder', 'build_batch_finder',
    'build_create', 'build_batch_create', 'build_update', 'build_batch_update',
    'build_partial_update', 'build_batch_partial_update',
    'build_delete', 'build_batch_delete', 'build_action',
    'RestliClient', 'RestliResponse', 'get_created_entity_id',
]
