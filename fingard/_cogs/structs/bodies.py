"""
All the structures coming from/to the Kubernetes API.

Everything marked "raw" is a plain unwrapped unprocessed data as JSON-decoded
from Kubernetes API, as retrieved in the fetching API calls. All the payload
which is not used here falls into `Any`, and is not type-checked.

Custom objects can contain arbitrary fields. Only a few of them matter
for finalizing: the deletion timestamp, the finalizers, the resource version.
These are extracted into an explicitly typed :class:`Snapshot`, while the rest
of the document is carried along as is -- so that it can be written back
without understanding (or damaging) the fields unrelated to finalizers.
"""
import copy
import dataclasses
import datetime
from typing import Any, Mapping, Optional

import iso8601
from typing_extensions import TypedDict


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    namespace: str
    labels: Mapping[str, str]
    annotations: Mapping[str, str]
    finalizers: list[str]
    resourceVersion: str
    deletionTimestamp: str
    creationTimestamp: str


class RawBody(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: Mapping[str, Any]
    status: Mapping[str, Any]


@dataclasses.dataclass(frozen=True)
class Snapshot:
    """
    An object's state as read from the store at some point in time.

    The snapshot is never modified. The new desired state is rendered
    as a new raw body with :meth:`render`, the snapshot remains as it was.
    """

    deletion_timestamp: Optional[str]
    finalizers: tuple[str, ...]
    resource_version: Optional[str]
    raw: RawBody = dataclasses.field(repr=False, compare=False)

    @classmethod
    def parse(cls, raw: RawBody) -> "Snapshot":
        meta = raw.get('metadata') or {}
        return cls(
            deletion_timestamp=meta.get('deletionTimestamp') or None,
            finalizers=tuple(meta.get('finalizers') or ()),
            resource_version=meta.get('resourceVersion') or None,
            raw=copy.deepcopy(raw),
        )

    @property
    def deleted_at(self) -> Optional[datetime.datetime]:
        if self.deletion_timestamp is None:
            return None
        return iso8601.parse_date(self.deletion_timestamp)

    def render(self, *, finalizers: list[str]) -> RawBody:
        """
        Build a full body for replacement, with new finalizers and all other fields kept.

        The resource version is kept as it was read, so that the API server
        rejects the replacement if the object has changed since then.
        """
        body = copy.deepcopy(self.raw)
        meta = body['metadata'] = dict(body.get('metadata') or {})
        meta['finalizers'] = list(finalizers)
        if self.resource_version is not None:
            meta['resourceVersion'] = self.resource_version
        return body
