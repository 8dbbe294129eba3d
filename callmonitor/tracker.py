## callmonitor/tracker.py

from __future__ import annotations


class DedupTracker:
    """Keys of files already handed downstream in this process.

    Lives only in memory: a restart starts from an empty set, so files still
    in the input directory are processed again.
    """

    def __init__(self):
        self._keys: set[str] = set()

    def seen(self, key: str) -> bool:
        return key in self._keys

    def mark_seen(self, key: str) -> None:
        self._keys.add(key)

    def __contains__(self, key: str) -> bool:
        return self.seen(key)

    def __len__(self) -> int:
        return len(self._keys)
