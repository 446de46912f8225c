import functools
import logging

import click.testing
import pytest

from fingard._cogs.structs.credentials import ConnectionInfo
from fingard._core.actions.finalizing import MutationResult, Outcome
from fingard.cli import main


@pytest.fixture(autouse=True)
def _restore_loggers():
    # The commands configure the root logger; keep it intact for other tests.
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    libs = {name: (logging.getLogger(name).propagate, logging.getLogger(name).handlers[:])
            for name in ['asyncio', 'aiohttp']}
    yield
    root.handlers[:] = original_handlers
    root.setLevel(original_level)
    for name, (propagate, handlers) in libs.items():
        logging.getLogger(name).propagate = propagate
        logging.getLogger(name).handlers[:] = handlers


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def invoke(runner):
    return functools.partial(runner.invoke, main)


@pytest.fixture()
def info():
    return ConnectionInfo(server='https://localhost:6443', default_namespace='ctx-ns')


@pytest.fixture()
def login(mocker, info):
    return mocker.patch('fingard._core.intents.piggybacking.login', return_value=info)


@pytest.fixture()
def mutate(mocker):
    return mocker.patch('fingard.cli.mutate', return_value=MutationResult(Outcome.APPLIED))
