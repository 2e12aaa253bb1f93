"""Data layer: loading exported account snapshots."""

from .snapshot import AccountSnapshot, SnapshotError, load_snapshot, parse_snapshot

__all__ = [
    "AccountSnapshot",
    "SnapshotError",
    "load_snapshot",
    "parse_snapshot",
]
