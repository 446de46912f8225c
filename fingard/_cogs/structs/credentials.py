"""
The credentials to connect to the API server.

Only what a plain HTTP client can use: the server's address and CA,
the client certificate, a bearer token or a username & password.
The complex auth-providers (exec plugins, cloud SDKs) are not supported.

.. seealso::
    :mod:`piggybacking` for the ways to get these credentials.
"""
import dataclasses
from typing import Optional


class LoginError(Exception):
    """ Raised when the credentials cannot be found or interpreted. """


@dataclasses.dataclass(frozen=True)
class ConnectionInfo:
    server: str  # e.g. "https://localhost:6443"
    ca_path: Optional[str] = None
    ca_data: Optional[str | bytes] = None
    insecure: Optional[bool] = None
    username: Optional[str] = None
    password: Optional[str] = None
    token: Optional[str] = None
    certificate_path: Optional[str] = None
    certificate_data: Optional[str | bytes] = None
    private_key_path: Optional[str] = None
    private_key_data: Optional[str | bytes] = None
    default_namespace: Optional[str] = None  # for the calls without an explicit namespace
