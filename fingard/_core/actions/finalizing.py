"""
Adding and removing the finalizers of individual objects.

Every call is a read-modify-write cycle of two API requests: the object is read,
its finalizers are modified locally, and the whole object is written back.
The write is conditioned on the resource version as it was read, so if another
writer has changed the object in between, the write fails with a conflict
instead of silently overwriting the other writer's changes.

Nothing is retried here. The failures are logged and reported to the caller
in the results; the caller (usually a reconciliation loop) decides whether
and when to repeat the whole cycle with a fresh read.

The mutators hold no state between the calls and no locks: they can be used
concurrently for different objects and finalizers.
"""
import dataclasses
import enum
import logging
from typing import Optional, Sequence

import iso8601

from fingard._cogs.clients import errors, stores
from fingard._cogs.configs import configuration
from fingard._cogs.helpers import typedefs
from fingard._cogs.structs import bodies, finalizers, references
from fingard._core.engines import loggers

# All the failures of the stores, both API-level and transport-level.
STORE_ERRORS = (errors.APIError, *errors.TRANSPORT_ERRORS)


class Outcome(enum.Enum):
    APPLIED = 'applied'
    UNCHANGED = 'unchanged'
    FAILED = 'failed'


@dataclasses.dataclass(frozen=True)
class MutationResult:
    """
    The result of adding or removing a finalizer.

    ``UNCHANGED`` is not a failure: the object was already in the desired state,
    or the change is not applicable (e.g. adding to an object being deleted).
    """
    outcome: Outcome
    error: Optional[BaseException] = None
    body: Optional[bodies.RawBody] = None  # as stored after the successful write

    @property
    def ok(self) -> bool:
        return self.outcome is not Outcome.FAILED


class FinalizerMutator:
    """
    Add & remove finalizers on the objects of one resource type in one namespace.

    The namespace, group, version, plural are fixed for the mutator;
    every call then specifies only the object's name and the finalizer.
    If the namespace is ``None``, the resource is treated as cluster-scoped.
    """

    def __init__(
            self,
            namespace: Optional[str],
            group: str,
            version: str,
            plural: str,
            *,
            store: stores.ObjectStore,
            logger: Optional[typedefs.Logger] = None,
            settings: Optional[configuration.Settings] = None,
    ) -> None:
        super().__init__()
        if namespace is not None and not namespace:
            raise ValueError("The namespace must be non-empty; use None for cluster-scoped objects.")
        settings = settings if settings is not None else configuration.Settings()
        self.resource = references.Resource(group, version, plural, namespaced=namespace is not None)
        self.namespace = references.NamespaceName(namespace) if namespace is not None else None
        self.store = store
        self.logger = logger if logger is not None else logging.getLogger(settings.logging.logger_name)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.resource!r} in {self.namespace or "cluster"}>'

    async def add_finalizer(self, name: str, finalizer: str) -> MutationResult:
        _check_finalizer(finalizer)
        logger = self._make_logger(name)
        what = f"{self.resource.plural}:{name}"

        try:
            snapshot = await self._read(name)
        except STORE_ERRORS as e:
            logger.error(f"Adding finalizer {finalizer} to {what} failed on reading: {_explain(e)}")
            return MutationResult(Outcome.FAILED, error=e)

        # Adding to a deleted object would block the deletion for no reason (or be rejected).
        if finalizers.is_deletion_ongoing(snapshot):
            logger.warning(f"Finalizer {finalizer} is not added to {what}: "
                           f"the object is being deleted since {_since(snapshot)}.")
            return MutationResult(Outcome.UNCHANGED)

        if finalizers.is_deletion_blocked(snapshot, finalizer):
            logger.warning(f"Finalizer {finalizer} is not added to {what}: it is already present.")
            return MutationResult(Outcome.UNCHANGED)

        desired = finalizers.block_deletion(snapshot.finalizers, finalizer)
        try:
            stored = await self._replace(name, snapshot, desired)
        except STORE_ERRORS as e:
            logger.error(f"Adding finalizer {finalizer} to {what} failed on writing: {_explain(e)}")
            return MutationResult(Outcome.FAILED, error=e)

        logger.info(f"Added finalizer {finalizer} to {what}.")
        return MutationResult(Outcome.APPLIED, body=stored)

    async def remove_finalizer(self, name: str, finalizer: str) -> MutationResult:
        _check_finalizer(finalizer)
        logger = self._make_logger(name)
        what = f"{self.resource.plural}:{name}"

        try:
            snapshot = await self._read(name)
        except STORE_ERRORS as e:
            logger.error(f"Removing finalizer {finalizer} from {what} failed on reading: {_explain(e)}")
            return MutationResult(Outcome.FAILED, error=e)

        # NB: the deletion timestamp is not checked: the cleanups end by removing the finalizers.
        if not snapshot.finalizers:
            logger.warning(f"Finalizer {finalizer} is not removed from {what}: there are no finalizers.")
            return MutationResult(Outcome.UNCHANGED)

        if not finalizers.is_deletion_blocked(snapshot, finalizer):
            logger.warning(f"Finalizer {finalizer} is not removed from {what}: it is not found.")
            return MutationResult(Outcome.UNCHANGED)

        desired = finalizers.allow_deletion(snapshot.finalizers, finalizer)
        try:
            stored = await self._replace(name, snapshot, desired)
        except STORE_ERRORS as e:
            logger.error(f"Removing finalizer {finalizer} from {what} failed on writing: {_explain(e)}")
            return MutationResult(Outcome.FAILED, error=e)

        logger.info(f"Removed finalizer {finalizer} from {what}.")
        return MutationResult(Outcome.APPLIED, body=stored)

    def _make_logger(self, name: str) -> loggers.ObjectLogger:
        return loggers.ObjectLogger(self.logger, resource=self.resource,
                                    namespace=self.namespace, name=name)

    async def _read(self, name: str) -> bodies.Snapshot:
        raw = await self.store.get(self.resource, self.namespace, name)
        return bodies.Snapshot.parse(raw)

    async def _replace(
            self,
            name: str,
            snapshot: bodies.Snapshot,
            desired: Sequence[str],
    ) -> bodies.RawBody:
        body = snapshot.render(finalizers=list(desired))
        return await self.store.replace(self.resource, self.namespace, name, body)


def _check_finalizer(finalizer: str) -> None:
    if not isinstance(finalizer, str) or not finalizer:
        raise ValueError(f"A finalizer must be a non-empty string; got {finalizer!r}.")


def _since(snapshot: bodies.Snapshot) -> str:
    try:
        deleted_at = snapshot.deleted_at
    except iso8601.ParseError:
        return str(snapshot.deletion_timestamp)  # as is, if not RFC 3339
    return deleted_at.isoformat() if deleted_at is not None else str(snapshot.deletion_timestamp)


def _explain(exc: BaseException) -> str:
    """ Render the store's failure as its code, reason, and message. """
    if isinstance(exc, errors.APIError):
        code = exc.code if exc.code is not None else exc.status
        reason = exc.reason
        message = exc.message or str(exc.__cause__ or '') or None
    else:
        code = None
        reason = type(exc).__name__
        message = str(exc) or None
    return f"code={code}, reason={reason}, {message}"
