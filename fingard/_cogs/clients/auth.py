import base64
import contextlib
import ssl
import tempfile
from types import TracebackType
from typing import Optional

import aiohttp

from fingard._cogs.helpers import versions
from fingard._cogs.structs import credentials


class APIContext:
    """
    An HTTP session for the API server, with the connection info it was made from.

    One context is used for all the requests with the same credentials.
    It closes the session when used as an async context manager::

        async with APIContext(info) as context:
            store = APIObjectStore(context, settings=settings, logger=logger)
            ...
    """

    session: aiohttp.ClientSession
    server: str
    default_namespace: Optional[str]

    def __init__(
            self,
            info: credentials.ConnectionInfo,
            *,
            session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        super().__init__()
        self.server = info.server
        self.default_namespace = info.default_namespace
        self.session = session if session is not None else make_session(info)
        self.session.headers.setdefault('User-Agent', f'fingard/{versions.version or "unknown"}')

    async def __aenter__(self) -> "APIContext":
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self.session.close()


def make_session(info: credentials.ConnectionInfo) -> aiohttp.ClientSession:
    headers = {'Authorization': f'Bearer {info.token}'} if info.token else {}
    auth = aiohttp.BasicAuth(info.username, info.password) if info.username and info.password else None
    connector = aiohttp.TCPConnector(limit=0, ssl=make_ssl_context(info))
    return aiohttp.ClientSession(connector=connector, headers=headers, auth=auth)


def make_ssl_context(info: credentials.ConnectionInfo) -> ssl.SSLContext:
    """
    Verify the server with the cluster's CA, and identify with the client certificate (if any).
    """
    cadata = decode_to_pem(info.ca_data) if info.ca_data is not None else None
    context = ssl.create_default_context(cafile=info.ca_path, cadata=cadata)
    if info.insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    # The temporary files are only needed while loading, so they are deleted right after.
    with contextlib.ExitStack() as stack:
        certfile = _as_file(stack, info.certificate_path, info.certificate_data)
        keyfile = _as_file(stack, info.private_key_path, info.private_key_data)
        if certfile and keyfile:
            context.load_cert_chain(certfile=certfile, keyfile=keyfile)
    return context


def _as_file(
        stack: contextlib.ExitStack,
        path: Optional[str],
        data: Optional[str | bytes],
) -> Optional[str]:
    # SSL contexts load the client certificates & keys from files only.
    if path:
        return path
    elif data is None:
        return None
    file = stack.enter_context(tempfile.NamedTemporaryFile(buffering=0))
    file.write(decode_to_pem(data).encode('ascii'))
    return file.name


def decode_to_pem(data: str | bytes) -> str:
    """ Accept both PEM and base64-encoded PEM, as kubeconfigs have either of them. """
    raw = data.encode('ascii') if isinstance(data, str) else data
    if raw.startswith(b'-----BEGIN '):
        return raw.decode('ascii')
    return base64.b64decode(raw).decode('ascii')
