import logging.handlers

import pytest

from fingard._cogs.structs.references import Resource
from fingard._core.engines.loggers import ObjectLogger


@pytest.fixture()
def record_of():
    """ Log one message about one object and return the resulting log record. """
    def fn(*, namespace, name='name1', msg='hello', **kwargs):
        handler = logging.handlers.BufferingHandler(capacity=100)
        base = logging.getLogger(f'fingard.tests.records.{namespace}.{name}')
        base.addHandler(handler)
        try:
            resource = Resource('openebs.io', 'v1alpha1', 'mayastorpools', namespaced=namespace is not None)
            logger = ObjectLogger(base, resource=resource, namespace=namespace, name=name)
            logger.info(msg, **kwargs)
        finally:
            base.removeHandler(handler)
        return handler.buffer[0]
    return fn


@pytest.fixture()
def ns_record(record_of):
    return record_of(namespace='namespace1')


@pytest.fixture()
def cluster_record(record_of):
    return record_of(namespace=None)
