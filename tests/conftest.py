import json
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from fingard._cogs.clients.auth import APIContext
from fingard._cogs.configs.configuration import Settings
from fingard._cogs.structs.credentials import ConnectionInfo
from fingard._cogs.structs.references import Resource
from fingard._kits.memstores import MemoryStore


@pytest.fixture(autouse=True)
def _caplog_all_levels(caplog):
    caplog.set_level(0)


@pytest.fixture()
def namespaced_resource():
    """ The resource used in the tests. Usually mocked, so it does not matter. """
    return Resource('openebs.io', 'v1alpha1', 'mayastorpools', namespaced=True)


@pytest.fixture()
def cluster_resource():
    """ The resource used in the tests. Usually mocked, so it does not matter. """
    return Resource('openebs.io', 'v1alpha1', 'mayastorpools', namespaced=False)


@pytest.fixture(params=[True, False], ids=['namespaced', 'cluster'])
def resource(request):
    """ The resource used in the tests. Usually mocked, so it does not matter. """
    return Resource('openebs.io', 'v1alpha1', 'mayastorpools', namespaced=request.param)


@pytest.fixture()
def namespace(resource):
    return 'ns' if resource.namespaced else None


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def logger():
    return logging.getLogger('fingard.tests')


@pytest.fixture()
def store():
    return MemoryStore()


#
# Mocks for Kubernetes API. Reasons:
# 1. We do not test aiohttp, we test the layers on top of it,
#    so everything low-level should be mocked and assumed to be functional.
# 2. No external calls must be made under any circumstances.
#    The unit-tests must be fully isolated from the environment.
#

@pytest.fixture()
def hostname():
    """ A fake hostname to be used in all aiohttp/aresponses tests. """
    return 'fake-host'


@pytest.fixture()
async def context(hostname, aresponses):
    """ A real API context (and its session), which is served by `aresponses`. """
    info = ConnectionInfo(server=f'https://{hostname}')
    async with APIContext(info) as context:
        yield context


@pytest.fixture()
def resp_mocker(aresponses):
    """
    A factory of server-side callbacks for `aresponses` with mocking/spying.

    The value of the fixture is a function, which return a coroutine mock.
    That coroutine mock should be passed to `aresponses.add` as a response
    callback function. When called, it calls the mock defined by the function's
    arguments (specifically, return_value or side_effects).

    The difference from passing the responses directly to `aresponses.add`
    is that it is possible to assert on whether the response was handled
    by that callback at all (i.e. HTTP URL & method matched), especially
    if there are multiple responses registered. The requests' payloads
    are preserved in the mock's ``payloads`` list for later assertions.

    Sample usage::

        def test_me(resp_mocker):
            response = aiohttp.web.json_response({'a': 'b'})
            callback = resp_mocker(return_value=response)
            aresponses.add(hostname, '/path/', 'get', callback)
            do_something()
            assert callback.called
            assert callback.call_count == 1
            assert callback.payloads == [...]
    """
    def resp_maker(*args, **kwargs):
        actual_response = MagicMock(*args, **kwargs)
        payloads = []

        async def resp_mock_effect(request):
            # The request's content can be read inside of the handler only. We preserve
            # the data into a conventional list, so that they could be asserted later.
            text = await request.text()
            try:
                payloads.append(json.loads(text))
            except json.JSONDecodeError:
                payloads.append(text)

            # Get a response/error as it was intended (via return_value/side_effect).
            return actual_response()

        mock = AsyncMock(side_effect=resp_mock_effect)
        mock.payloads = payloads
        return mock
    return resp_maker
