"""
All the functions to manipulate the object finalization and deletion.

Finalizers are used to block the actual deletion until the finalizers
are removed, meaning that the owning controller has done all its duties
to "release" the object (e.g. cleanups of the external storage).

None of these functions modify their arguments: new lists are returned.
"""
from typing import Sequence

from fingard._cogs.structs import bodies


def is_deletion_ongoing(
        snapshot: bodies.Snapshot,
) -> bool:
    return snapshot.deletion_timestamp is not None


def is_deletion_blocked(
        snapshot: bodies.Snapshot,
        finalizer: str,
) -> bool:
    return finalizer in snapshot.finalizers


def block_deletion(finalizers: Sequence[str], finalizer: str) -> list[str]:
    # Appended at the end; the existing ones are neither reordered nor deduplicated.
    if finalizer in finalizers:
        return list(finalizers)
    return list(finalizers) + [finalizer]


def allow_deletion(finalizers: Sequence[str], finalizer: str) -> list[str]:
    result = list(finalizers)
    if finalizer in result:
        result.remove(finalizer)  # the first one only
    return result
