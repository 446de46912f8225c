import pytest

from fingard._core.actions.finalizing import FinalizerMutator

FINALIZER = 'cleanup.vendor/storage'


@pytest.fixture()
def finalizer():
    return FINALIZER


@pytest.fixture()
def mutator(resource, namespace, store, logger):
    return FinalizerMutator(namespace, resource.group, resource.version, resource.plural,
                            store=store, logger=logger)


@pytest.fixture()
def put(store, resource, namespace):
    """ Store an object with the specific metadata, as if created by someone else. """
    def fn(name, *, finalizers=None, deletion_timestamp=None, **fields):
        meta = {}
        if finalizers is not None:
            meta['finalizers'] = list(finalizers)
        if deletion_timestamp is not None:
            meta['deletionTimestamp'] = deletion_timestamp
        return store.put(resource, namespace, name, dict(fields, metadata=meta))
    return fn


@pytest.fixture()
def peek(store, resource, namespace):
    def fn(name):
        return store.peek(resource, namespace, name)
    return fn
