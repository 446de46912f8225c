"""
Failures of the object stores, as seen by the finalizer mutators.

A failed API request is turned into an :class:`APIError` (or one of its
descendants for the statuses worth distinguishing), which carries the code,
the reason, and the message as reported by the API server in its ``Status``
response. The callers log these three fields and never need aiohttp's
own exceptions for that; those are only chained as the causes.

Failures below the HTTP level (connectivity, TLS, timeouts) are not wrapped:
they are not about the objects, and are listed in :data:`TRANSPORT_ERRORS`.
"""
import asyncio
import json
from typing import Any, Optional

import aiohttp
from typing_extensions import TypedDict


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.19/#status-v1-meta
class RawStatus(TypedDict, total=False):
    apiVersion: str
    kind: str
    status: str
    code: int
    reason: str
    message: str
    details: dict[str, Any]


class APIError(Exception):
    """ A failed API request with the server's explanation (if there was one). """

    def __init__(self, payload: Optional[RawStatus], *, status: int) -> None:
        self._payload: RawStatus = payload or {}
        self._status = status
        super().__init__(self._payload.get('message'), payload)

    @property
    def status(self) -> int:
        """ The HTTP status of the response. """
        return self._status

    @property
    def code(self) -> Optional[int]:
        return self._payload.get('code')

    @property
    def reason(self) -> Optional[str]:
        return self._payload.get('reason')

    @property
    def message(self) -> Optional[str]:
        return self._payload.get('message')

    @property
    def details(self) -> Optional[dict[str, Any]]:
        return self._payload.get('details')


class APIClientError(APIError):
    pass


class APIServerError(APIError):
    pass


class APIUnauthorizedError(APIClientError):
    pass


class APIForbiddenError(APIClientError):
    pass


class APINotFoundError(APIClientError):
    pass


class APIConflictError(APIClientError):
    """ The object has changed since it was read (the resource version mismatch). """


class APIUnprocessableEntityError(APIClientError):
    """ The replacement body is rejected by the server's validation. """


_ERRORS_BY_STATUS: dict[int, type[APIError]] = {
    401: APIUnauthorizedError,
    403: APIForbiddenError,
    404: APINotFoundError,
    409: APIConflictError,
    422: APIUnprocessableEntityError,
}

# Escalated from the client library as is: not K8s-specific, but still the store's failures.
TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


def _classify(status: int) -> type[APIError]:
    if status in _ERRORS_BY_STATUS:
        return _ERRORS_BY_STATUS[status]
    elif 400 <= status < 500:
        return APIClientError
    elif 500 <= status < 600:
        return APIServerError
    else:
        return APIError


async def _read_status(response: aiohttp.ClientResponse) -> Optional[RawStatus]:
    try:
        payload = await response.json()
    except (json.JSONDecodeError, aiohttp.ContentTypeError, aiohttp.ClientConnectionError):
        return None

    # Only the Status objects are explanations; anything else can leak the objects' data.
    if isinstance(payload, dict) and payload.get('kind') == 'Status':
        return payload  # type: ignore[return-value]
    return None


async def check_response(response: aiohttp.ClientResponse) -> None:
    """
    Raise an :class:`APIError` for a failed response, leave the successful ones unread.
    """
    if response.status < 400:
        return

    payload = await _read_status(response)
    cls = _classify(response.status)
    try:
        response.raise_for_status()  # also releases the response
    except aiohttp.ClientResponseError as e:
        raise cls(payload, status=response.status) from e
