"""Test doubles shared across the suite."""

from __future__ import annotations

from typing import List

from callmonitor.schemas import FilePayload
from callmonitor.utils import PublishError


class RecordingPublisher:
    """Collects payloads instead of sending them; can be told to fail."""

    def __init__(self, fail_for: tuple[str, ...] = (), fail_times: int = 0):
        self.payloads: List[FilePayload] = []
        self.attempts = 0
        self.fail_for = fail_for
        self.fail_times = fail_times
        self.closed = False

    def publish(self, payload: FilePayload) -> None:
        self.attempts += 1
        if payload.handle.name in self.fail_for:
            raise PublishError(f"connection refused for {payload.handle.name}")
        if self.fail_times > 0:
            self.fail_times -= 1
            raise PublishError("connection refused")
        self.payloads.append(payload)

    def close(self) -> None:
        self.closed = True

    @property
    def names(self) -> List[str]:
        return [p.handle.name for p in self.payloads]
