"""Blacklist filtering of tree changes by path prefix.

Matching is a literal ``str.startswith`` on the whole path, not aware of path
segments: the prefix ``"vendor"`` also drops ``"vendor2/file.go"``. Prefixes
are used exactly as given, so include the trailing ``/`` to match a directory.
"""

from __future__ import annotations

from collections.abc import Sequence

from treediff.models import Change


def is_blacklisted(change: Change, prefixes: Sequence[str]) -> bool:
    """True if either side of *change* lives under one of *prefixes*."""
    for side in (change.old, change.new):
        if side is None:
            continue
        for prefix in prefixes:
            if side.path.startswith(prefix):
                return True
    return False


def apply(changes: list[Change], prefixes: Sequence[str]) -> list[Change]:
    """Return *changes* without the blacklisted ones, keeping their order.

    With no prefixes the very same list is returned.
    """
    if not prefixes:
        return changes
    return [c for c in changes if not is_blacklisted(c, prefixes)]


def apply_in_place(changes: list[Change], prefixes: Sequence[str]) -> list[Change]:
    """Like :func:`apply`, but compacts *changes* itself and returns it."""
    if not prefixes:
        return changes
    kept = 0
    for change in changes:
        if is_blacklisted(change, prefixes):
            continue
        changes[kept] = change
        kept += 1
    del changes[kept:]
    return changes
