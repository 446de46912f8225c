"""
The object stores: where the objects are read from and written to.

The finalizing routines do not talk to the API directly. Instead, they use
a store -- any object that can read one object and replace it as a whole.
Normally, it is the Kubernetes API (:class:`APIObjectStore`). In tests,
it can be an in-memory store (see :mod:`fingard.testing`).

The stores signal their failures with :class:`errors.APIError` and its
descendants (with the code, the reason, the message of the failure),
or with the low-level transport errors (see :data:`errors.TRANSPORT_ERRORS`).
"""
from typing_extensions import Protocol

from fingard._cogs.clients import auth, fetching, replacing
from fingard._cogs.configs import configuration
from fingard._cogs.helpers import typedefs
from fingard._cogs.structs import bodies, references


class ObjectStore(Protocol):

    async def get(
            self,
            resource: references.Resource,
            namespace: references.Namespace,
            name: str,
    ) -> bodies.RawBody: ...

    async def replace(
            self,
            resource: references.Resource,
            namespace: references.Namespace,
            name: str,
            body: bodies.RawBody,
    ) -> bodies.RawBody: ...


class APIObjectStore:
    """
    A store backed by the Kubernetes API: ``GET`` and ``PUT`` of an object.
    """

    def __init__(
            self,
            context: auth.APIContext,
            *,
            settings: configuration.Settings,
            logger: typedefs.Logger,
    ) -> None:
        super().__init__()
        self.context = context
        self.settings = settings
        self.logger = logger

    async def get(
            self,
            resource: references.Resource,
            namespace: references.Namespace,
            name: str,
    ) -> bodies.RawBody:
        return await fetching.read_obj(
            context=self.context,
            settings=self.settings,
            resource=resource,
            namespace=namespace,
            name=name,
            logger=self.logger,
        )

    async def replace(
            self,
            resource: references.Resource,
            namespace: references.Namespace,
            name: str,
            body: bodies.RawBody,
    ) -> bodies.RawBody:
        return await replacing.replace_obj(
            context=self.context,
            settings=self.settings,
            resource=resource,
            namespace=namespace,
            name=name,
            body=body,
            logger=self.logger,
        )
