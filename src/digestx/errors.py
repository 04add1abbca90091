"""Exceptions raised by the digest engine."""

from __future__ import annotations


class DigestError(Exception):
    """Base class for digest failures."""


class ConvergenceExceeded(DigestError):
    """Watchers kept changing for more than ``ttl`` passes.

    ``watch_log`` holds, for each of the last few passes, the watchers
    that fired as ``(name, new_value, old_value)`` tuples.
    """

    def __init__(self, ttl: int, watch_log: list[list[tuple]] | None = None) -> None:
        self.ttl = ttl
        self.watch_log = watch_log or []
        super().__init__(
            f"{ttl} digest iterations reached. Aborting!\n"
            f"Watchers fired in the last {len(self.watch_log)} iterations: {self.watch_log!r}"
        )


class DigestInProgress(DigestError):
    """A digest or apply was started while the scope was already in a phase."""

    def __init__(self, phase: str) -> None:
        self.phase = phase
        super().__init__(f"{phase} already in progress")
