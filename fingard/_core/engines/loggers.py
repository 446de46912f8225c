"""
Logging of the finalizer changes: per-object adapters and the output formats.

The mutators log via :class:`ObjectLogger`, which attaches a ``k8s_ref``
(apiVersion, plural, namespace, name) to every record. For humans, the text
formatter can put ``[namespace/name]`` before the messages; for log parsers,
the JSON formatter puts the whole reference into a separate field.
"""
import copy
import enum
import logging
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, Optional, TextIO

from pythonjsonlogger.core import RESERVED_ATTRS
from pythonjsonlogger.json import JsonFormatter

from fingard._cogs.helpers import typedefs
from fingard._cogs.structs import references

DEFAULT_JSON_REFKEY = 'object'


class LogFormat(enum.Enum):
    """ Log formats, as specified on CLI. """
    PLAIN = '%(message)s'
    FULL = '[%(asctime)s] %(name)-20.20s [%(levelname)-8.8s] %(message)s'
    JSON = '-json-'  # not a format string


class ObjectTextFormatter(logging.Formatter):

    def __init__(self, fmt: Optional[str] = None, *, prefix: bool = False) -> None:
        super().__init__(fmt)
        self.prefix = prefix

    def format(self, record: logging.LogRecord) -> str:
        ref = getattr(record, 'k8s_ref', None)
        if self.prefix and ref is not None:
            name = ref.get('name') or ''
            namespace = ref.get('namespace')
            record = copy.copy(record)  # the other handlers get the original message
            record.msg = f"[{namespace}/{name}] {record.msg}" if namespace else f"[{name}] {record.msg}"
        return super().format(record)


class ObjectJsonFormatter(JsonFormatter):

    def __init__(self, *, refkey: Optional[str] = None) -> None:
        super().__init__(reserved_attrs=set(RESERVED_ATTRS) | {'k8s_ref'}, timestamp=True)
        self.refkey = refkey or DEFAULT_JSON_REFKEY

    def add_fields(
            self,
            log_record: dict[str, Any],
            record: logging.LogRecord,
            message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        if hasattr(record, 'k8s_ref'):
            log_record[self.refkey] = getattr(record, 'k8s_ref')
        log_record.setdefault('severity', _severity(record.levelno))


def _severity(levelno: int) -> str:
    return ("debug" if levelno <= logging.DEBUG else
            "info" if levelno <= logging.INFO else
            "warn" if levelno <= logging.WARNING else
            "error" if levelno <= logging.ERROR else
            "fatal")


class ObjectLogger(typedefs.LoggerAdapter):
    """
    An adapter that marks the records as being about one specific object.

    The wrapped logger is whatever the caller gives to the mutator,
    so the records go to the caller's handlers, not only to ours.
    """

    def __init__(
            self,
            logger: typedefs.Logger,
            *,
            resource: references.Resource,
            namespace: references.Namespace,
            name: str,
    ) -> None:
        super().__init__(logger, dict(  # type: ignore[arg-type]
            k8s_ref=dict(
                apiVersion=resource.api_version,
                plural=resource.plural,
                namespace=namespace,
                name=name,
            ),
        ))

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> tuple[str, MutableMapping[str, Any]]:
        # The stdlib adapter replaces the call's extras with its own; keep both.
        kwargs["extra"] = dict(self.extra or {}) | kwargs.get('extra', {})
        return msg, kwargs


# Recognised and replaced on repeated configure() calls, e.g. by several CLI runs in one process.
if TYPE_CHECKING:
    class _FingardStreamHandler(logging.StreamHandler[TextIO]):
        pass
else:
    class _FingardStreamHandler(logging.StreamHandler):
        pass


def configure(
        debug: Optional[bool] = None,
        verbose: Optional[bool] = None,
        quiet: Optional[bool] = None,
        log_format: LogFormat = LogFormat.FULL,
        log_prefix: Optional[bool] = None,
        log_refkey: Optional[str] = None,
) -> None:
    """ Set up the root logger for the CLI: one stderr handler of ours, the level, the format. """
    handler = _FingardStreamHandler()
    handler.setFormatter(make_formatter(log_format=log_format, log_prefix=log_prefix, log_refkey=log_refkey))
    root = logging.getLogger()
    root.handlers[:] = [h for h in root.handlers if not isinstance(h, _FingardStreamHandler)]
    root.addHandler(handler)
    root.setLevel('DEBUG' if debug or verbose else 'WARNING' if quiet else 'INFO')

    # The libraries' own messages are only shown with --debug.
    for name in ['asyncio', 'aiohttp']:
        lib_logger = logging.getLogger(name)
        lib_logger.propagate = bool(debug)
        if not debug:
            lib_logger.handlers[:] = [logging.NullHandler()]


def make_formatter(
        log_format: LogFormat = LogFormat.FULL,
        log_prefix: Optional[bool] = None,
        log_refkey: Optional[str] = None,
) -> logging.Formatter:
    """
    The JSON formatter for ``JSON``, the text formatter otherwise.

    Only the text messages are prefixed with the objects' names (by default,
    unless ``log_prefix`` is false); JSON records have them in a field.
    """
    match log_format:
        case LogFormat.JSON:
            return ObjectJsonFormatter(refkey=log_refkey)
        case LogFormat():
            return ObjectTextFormatter(log_format.value, prefix=log_prefix is not False)
        case _:
            raise ValueError(f"Unsupported log format: {log_format!r}")
