import asyncio
import functools
import logging
from typing import Any, Callable, Optional

import click

from fingard._cogs.clients import auth, stores
from fingard._cogs.configs import configuration
from fingard._cogs.structs import credentials
from fingard._core.actions import finalizing
from fingard._core.engines import loggers
from fingard._core.intents import piggybacking

logger = logging.getLogger(__name__)


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        if isinstance(value, loggers.LogFormat):
            return value
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = None,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def resource_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to identify the objects' resource in all commands the same way."""
    @click.option('-n', '--namespace', type=str, default=None)
    @click.option('-C', '--cluster-scoped', 'clusterwide', is_flag=True)
    @click.option('-g', '--group', type=str, required=True)
    @click.option('--api-version', type=str, required=True)
    @click.option('-p', '--plural', type=str, required=True)
    @click.option('--request-timeout', type=float, default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if kwargs['namespace'] and kwargs['clusterwide']:
            raise click.UsageError("Either --namespace or --cluster-scoped can be used, not both.")
        return fn(*args, **kwargs)

    return wrapper


@click.version_option(prog_name='fingard')
@click.group(name='fingard', context_settings=dict(
    auto_envvar_prefix='FINGARD',
))
def main() -> None:
    pass


@main.command()
@logging_options
@resource_options
@click.argument('name')
@click.argument('finalizer')
def add(
        namespace: Optional[str],
        clusterwide: bool,
        group: str,
        api_version: str,
        plural: str,
        request_timeout: Optional[float],
        name: str,
        finalizer: str,
) -> None:
    """ Add a finalizer to an object unless it is there or the object is being deleted. """
    result = run_mutation(
        'add',
        namespace=namespace, clusterwide=clusterwide,
        group=group, version=api_version, plural=plural,
        request_timeout=request_timeout, name=name, finalizer=finalizer,
    )
    if not result.ok:
        raise click.exceptions.Exit(1)


@main.command()
@logging_options
@resource_options
@click.argument('name')
@click.argument('finalizer')
def remove(
        namespace: Optional[str],
        clusterwide: bool,
        group: str,
        api_version: str,
        plural: str,
        request_timeout: Optional[float],
        name: str,
        finalizer: str,
) -> None:
    """ Remove a finalizer from an object if it is there, even if being deleted. """
    result = run_mutation(
        'remove',
        namespace=namespace, clusterwide=clusterwide,
        group=group, version=api_version, plural=plural,
        request_timeout=request_timeout, name=name, finalizer=finalizer,
    )
    if not result.ok:
        raise click.exceptions.Exit(1)


def run_mutation(
        action: str,
        *,
        namespace: Optional[str],
        clusterwide: bool,
        group: str,
        version: str,
        plural: str,
        request_timeout: Optional[float],
        name: str,
        finalizer: str,
) -> finalizing.MutationResult:
    settings = configuration.Settings()
    if request_timeout is not None:
        settings.networking.request_timeout = request_timeout

    try:
        info = piggybacking.login(logger=logger)
    except credentials.LoginError as e:
        raise click.ClickException(str(e))

    if clusterwide:
        namespace = None
    elif not namespace:  # unset or empty
        namespace = info.default_namespace or 'default'

    return asyncio.run(mutate(
        action,
        info=info, settings=settings,
        namespace=namespace, group=group, version=version, plural=plural,
        name=name, finalizer=finalizer,
    ))


async def mutate(
        action: str,
        *,
        info: credentials.ConnectionInfo,
        settings: configuration.Settings,
        namespace: Optional[str],
        group: str,
        version: str,
        plural: str,
        name: str,
        finalizer: str,
) -> finalizing.MutationResult:
    async with auth.APIContext(info) as context:
        store = stores.APIObjectStore(context, settings=settings, logger=logger)
        mutator = finalizing.FinalizerMutator(namespace, group, version, plural,
                                              store=store, settings=settings)
        if action == 'add':
            return await mutator.add_finalizer(name, finalizer)
        elif action == 'remove':
            return await mutator.remove_finalizer(name, finalizer)
        else:
            raise ValueError(f"Unsupported action: {action!r}")
