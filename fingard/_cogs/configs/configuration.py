"""
All configuration flags, options, settings to fine-tune the finalizer guards.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Some of the settings are flags, some are scalars, some are optional,
some are not (but all of them have reasonable defaults).
"""
import dataclasses
from typing import Optional


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for each individual API request: reading or replacing an object.

    Measured in seconds. Set to `None` to wait for as long as the server lets.
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for establishing a TCP connection to the API server.

    If not set, only the overall request timeout is used.
    """

    # NB: there is no retry/backoff setting on purpose. A failed request is reported
    # to the caller, who decides when to re-run the whole read-modify-write cycle.


@dataclasses.dataclass
class LoggingSettings:

    logger_name: str = 'fingard.finalizers'
    """
    The name of the logger used by the finalizer mutators
    when no explicit logger is passed to them.
    """


@dataclasses.dataclass
class Settings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    logging: LoggingSettings = dataclasses.field(default_factory=LoggingSettings)
