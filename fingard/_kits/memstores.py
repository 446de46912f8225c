import asyncio
import copy
import datetime
import itertools
from typing import Optional

from fingard._cogs.clients import errors
from fingard._cogs.structs import bodies, references

_Key = tuple[references.Resource, references.Namespace, str]


class MemoryStore:
    """
    An object store in memory, which behaves like the API server in the essentials.

    Usage::

        from fingard.testing import MemoryStore

        store = MemoryStore()
        store.put(resource, 'ns', 'pool-1', {'spec': {}})
        mutator = fingard.FinalizerMutator('ns', *resource, store=store)
        await mutator.add_finalizer('pool-1', 'example.com/cleanup')
        assert store.peek(resource, 'ns', 'pool-1')['metadata']['finalizers'] == [...]

    Specifically:

    * Every stored object gets a new ``metadata.resourceVersion``.
    * Replacing with a stale resource version fails with HTTP 409 (conflict).
    * Reading or replacing an absent object fails with HTTP 404 (not found).
    * Deleting an object with finalizers only marks it with a deletion timestamp;
      it is actually removed once its finalizers are all gone.
    * Every call yields control to the event loop, so that the races between
      concurrent callers happen the same way as with the real network calls.

    The failures can be injected for the next calls with :meth:`inject`.
    All calls are recorded in :attr:`gets` & :attr:`replaces` for assertions.
    """

    def __init__(self) -> None:
        super().__init__()
        self._objects: dict[_Key, bodies.RawBody] = {}
        self._versions = itertools.count(start=1)
        self._failures: dict[str, list[BaseException]] = {'get': [], 'replace': []}
        self.gets: list[_Key] = []
        self.replaces: list[bodies.RawBody] = []

    def put(
            self,
            resource: references.Resource,
            namespace: references.Namespace,
            name: str,
            body: bodies.RawBody,
    ) -> bodies.RawBody:
        """ Store the object unconditionally, as if created or updated by someone else. """
        stored = self._store((resource, namespace, name), body)
        return copy.deepcopy(stored)

    def peek(
            self,
            resource: references.Resource,
            namespace: references.Namespace,
            name: str,
    ) -> Optional[bodies.RawBody]:
        """ Look into the stored object without recording the call. """
        stored = self._objects.get((resource, namespace, name))
        return copy.deepcopy(stored) if stored is not None else None

    def delete(
            self,
            resource: references.Resource,
            namespace: references.Namespace,
            name: str,
    ) -> None:
        key = (resource, namespace, name)
        stored = self._objects.get(key)
        if stored is None:
            raise self._not_found(key)
        elif (stored.get('metadata') or {}).get('finalizers'):
            if not stored['metadata'].get('deletionTimestamp'):
                now = datetime.datetime.now(datetime.timezone.utc)
                stored['metadata']['deletionTimestamp'] = now.strftime('%Y-%m-%dT%H:%M:%SZ')
                stored['metadata']['resourceVersion'] = str(next(self._versions))
        else:
            del self._objects[key]

    def inject(self, operation: str, exc: BaseException) -> None:
        """ Fail the next call of an operation (``"get"`` or ``"replace"``). """
        self._failures[operation].append(exc)

    async def get(
            self,
            resource: references.Resource,
            namespace: references.Namespace,
            name: str,
    ) -> bodies.RawBody:
        key = (resource, namespace, name)
        self.gets.append(key)
        await asyncio.sleep(0)
        if self._failures['get']:
            raise self._failures['get'].pop(0)

        stored = self._objects.get(key)
        if stored is None:
            raise self._not_found(key)
        return copy.deepcopy(stored)

    async def replace(
            self,
            resource: references.Resource,
            namespace: references.Namespace,
            name: str,
            body: bodies.RawBody,
    ) -> bodies.RawBody:
        key = (resource, namespace, name)
        self.replaces.append(copy.deepcopy(body))
        await asyncio.sleep(0)
        if self._failures['replace']:
            raise self._failures['replace'].pop(0)

        stored = self._objects.get(key)
        if stored is None:
            raise self._not_found(key)

        expected = (body.get('metadata') or {}).get('resourceVersion')
        actual = (stored.get('metadata') or {}).get('resourceVersion')
        if expected is not None and expected != actual:
            raise self._conflict(key)

        # The deletion marker is owned by the server, not by the writers.
        body = copy.deepcopy(body)
        deletion_timestamp = (stored.get('metadata') or {}).get('deletionTimestamp')
        if deletion_timestamp:
            body['metadata'] = dict(body.get('metadata') or {}, deletionTimestamp=deletion_timestamp)

        stored = self._store(key, body)
        if deletion_timestamp and not (stored.get('metadata') or {}).get('finalizers'):
            del self._objects[key]
        return copy.deepcopy(stored)

    def _store(self, key: _Key, body: bodies.RawBody) -> bodies.RawBody:
        resource, namespace, name = key
        stored = copy.deepcopy(body)
        stored.setdefault('apiVersion', resource.api_version)
        meta = stored['metadata'] = dict(stored.get('metadata') or {})
        meta['name'] = name
        if namespace is not None:
            meta['namespace'] = namespace
        meta['resourceVersion'] = str(next(self._versions))
        self._objects[key] = stored
        return stored

    @staticmethod
    def _not_found(key: _Key) -> errors.APINotFoundError:
        resource, _, name = key
        message = f'{resource.plural}.{resource.group} "{name}" not found'
        return errors.APINotFoundError(_make_status(key, 404, 'NotFound', message), status=404)

    @staticmethod
    def _conflict(key: _Key) -> errors.APIConflictError:
        resource, _, name = key
        message = (f'Operation cannot be fulfilled on {resource.plural}.{resource.group} "{name}": '
                   f'the object has been modified; '
                   f'please apply your changes to the latest version and try again')
        return errors.APIConflictError(_make_status(key, 409, 'Conflict', message), status=409)


def _make_status(key: _Key, code: int, reason: str, message: str) -> errors.RawStatus:
    resource, _, name = key
    return {
        'apiVersion': 'v1',
        'kind': 'Status',
        'status': 'Failure',
        'code': code,
        'reason': reason,
        'message': message,
        'details': {'name': name, 'group': resource.group, 'kind': resource.plural},
    }
