"""
The main module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the package's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from fingard._cogs.clients.auth import (
    APIContext,
)
from fingard._cogs.clients.errors import (
    APIError,
    APIClientError,
    APIServerError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
    APIUnprocessableEntityError,
)
from fingard._cogs.clients.stores import (
    ObjectStore,
    APIObjectStore,
)
from fingard._cogs.configs.configuration import (
    Settings,
    NetworkingSettings,
    LoggingSettings,
)
from fingard._cogs.helpers.typedefs import (
    Logger,
)
from fingard._cogs.helpers.versions import (
    version as __version__,
)
from fingard._cogs.structs.bodies import (
    RawBody,
    RawMeta,
    Snapshot,
)
from fingard._cogs.structs.credentials import (
    ConnectionInfo,
    LoginError,
)
from fingard._cogs.structs.references import (
    Resource,
)
from fingard._core.actions.finalizing import (
    FinalizerMutator,
    MutationResult,
    Outcome,
)
from fingard._core.engines.loggers import (
    LogFormat,
    ObjectLogger,
    configure,
)
from fingard._core.intents.piggybacking import (
    login,
    login_with_kubeconfig,
    login_with_service_account,
)

__all__ = [
    'APIContext',
    'APIError',
    'APIClientError',
    'APIServerError',
    'APIUnauthorizedError',
    'APIForbiddenError',
    'APINotFoundError',
    'APIConflictError',
    'APIUnprocessableEntityError',
    'ObjectStore',
    'APIObjectStore',
    'Settings',
    'NetworkingSettings',
    'LoggingSettings',
    'Logger',
    'RawBody',
    'RawMeta',
    'Snapshot',
    'ConnectionInfo',
    'LoginError',
    'Resource',
    'FinalizerMutator',
    'MutationResult',
    'Outcome',
    'LogFormat',
    'ObjectLogger',
    'configure',
    'login',
    'login_with_kubeconfig',
    'login_with_service_account',
]
