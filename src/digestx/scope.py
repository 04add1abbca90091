"""Scope — a data container with dirty-checked watchers.

Application data lives in plain attributes. Watchers registered with
watch() derive values from the scope; digest() re-evaluates them until
nothing changes, calling each watcher's listener when its value moved.

    scope = Scope()
    scope.name = "Jane"
    scope.watch(lambda s: s.name, lambda new, old, s: print(new))
    scope.digest()  # prints "Jane"

A digest is a sequence of passes over the registry. Listeners may write
to the scope or register new watchers; later passes pick that up, so
chained watchers settle within one digest() call. A digest that is still
dirty after the TTL (10 passes by default) raises ConvergenceExceeded.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any, Callable

from digestx._equality import _UNSET, are_equal, snapshot
from digestx.errors import ConvergenceExceeded, DigestInProgress
from digestx.watcher import WatchHandle, Watcher

if TYPE_CHECKING:
    from digestx.watcher import EvaluateFn, ListenerFn

logger = logging.getLogger("digestx.scope")

DEFAULT_TTL = 10

# Passes per digest before giving up. Read at the start of every digest.
_digest_ttl = DEFAULT_TTL

# Passes kept in ConvergenceExceeded.watch_log.
_WATCH_LOG_DEPTH = 5


def set_digest_ttl(ttl: int) -> None:
    """Set the pass ceiling for all subsequent digests.

    Call once at startup:
        digestx.set_digest_ttl(20)
    """
    global _digest_ttl
    if ttl < 2:
        raise ValueError(f"digest TTL must be at least 2, got {ttl}")
    _digest_ttl = ttl


def get_digest_ttl() -> int:
    return _digest_ttl


class Scope:
    """Attribute container observed by dirty-checking watchers.

    Unset public attributes read as None, so watchers can observe fields
    before anything assigns them. This applies to every unknown name,
    including misspelt methods: scope.digets() fails with "'NoneType'
    object is not callable" rather than AttributeError. Names starting
    with an underscore are reserved for the digest machinery and raise
    AttributeError as usual.
    """

    def __init__(self) -> None:
        self._watchers: list[Watcher] = []
        self._last_dirty_watch: Watcher | None = None
        self._phase: str | None = None
        self._post_digest_queue: deque[Callable[[], Any]] = deque()
        self._batch_depth = 0
        self._iterating = False
        self._needs_compaction = False
        self._fired: list[tuple] = []

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails. Unknown public names are
        # unset fields, not typos; there is no way to tell them apart here.
        if name.startswith("_"):
            raise AttributeError(name)
        return None

    @property
    def phase(self) -> str | None:
        """Current phase: "digest", "apply" or None."""
        return self._phase

    # --- Registry ---

    def watch(
        self,
        evaluate: EvaluateFn,
        on_change: ListenerFn | None = None,
        use_value_equality: bool = False,
    ) -> WatchHandle:
        """Register a watcher. Returns a handle for disposal.

        evaluate(scope) computes the watched value. on_change(new, old, scope)
        fires whenever that value changes; on the first digest old is new.
        With use_value_equality, structures are compared by content and
        in-place mutations count as changes.
        """
        watcher = Watcher(evaluate, on_change, use_value_equality)
        self._watchers.append(watcher)
        # A watcher added by a listener must not be skipped by the short-circuit.
        self._last_dirty_watch = None
        return WatchHandle(self, watcher)

    def _remove_watcher(self, watcher: Watcher) -> None:
        self._last_dirty_watch = None
        if self._iterating:
            # Removing now would shift the indices of the running pass.
            self._needs_compaction = True
        else:
            self._watchers.remove(watcher)

    def _compact(self) -> None:
        if self._needs_compaction:
            self._watchers = [w for w in self._watchers if not w.disposed]
            self._needs_compaction = False

    # --- Digest ---

    def run_once(self) -> bool:
        """Evaluate every watcher once. Returns True if any was dirty."""
        self._compact()
        self._fired = []
        dirty = False
        self._iterating = True
        try:
            # Index loop: watchers appended by listeners are reached in this pass.
            i = 0
            while i < len(self._watchers):
                watcher = self._watchers[i]
                i += 1
                if watcher.disposed:
                    continue

                new_value = watcher.evaluate(self)
                last_value = watcher.last_value

                if not are_equal(new_value, last_value, watcher.use_value_equality):
                    old_value = new_value if last_value is _UNSET else last_value
                    self._last_dirty_watch = watcher
                    watcher.last_value = (
                        snapshot(new_value) if watcher.use_value_equality else new_value
                    )
                    self._fired.append((watcher.name, new_value, old_value))
                    if watcher.on_change is not None:
                        watcher.on_change(new_value, old_value, self)
                    dirty = True
                elif watcher is self._last_dirty_watch:
                    # A full round since the last change: nothing left to do.
                    return False
        finally:
            self._iterating = False
        return dirty

    def digest(self) -> None:
        """Run passes until no watcher is dirty.

        Raises ConvergenceExceeded if still dirty after the TTL, and
        DigestInProgress if called while this scope is digesting or applying.
        """
        ttl = _digest_ttl
        watch_log: deque[list[tuple]] = deque(maxlen=_WATCH_LOG_DEPTH)
        passes = 0

        self._begin_phase("digest")
        self._last_dirty_watch = None
        try:
            while True:
                dirty = self.run_once()
                passes += 1
                if not dirty:
                    break
                watch_log.append(self._fired)
                if passes > ttl:
                    logger.warning(
                        "Digest did not converge after %d passes; last fired: %r",
                        ttl, watch_log[-1],
                    )
                    raise ConvergenceExceeded(ttl, list(watch_log))
        finally:
            self._clear_phase()

        logger.debug("Digest converged after %d passes over %d watchers",
                     passes, len(self._watchers))

        while self._post_digest_queue:
            self._post_digest_queue.popleft()()

    def post_digest(self, fn: Callable[[], Any]) -> None:
        """Run fn once, after the next digest completes."""
        self._post_digest_queue.append(fn)

    # --- Evaluation helpers ---

    def eval(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Call fn(scope, *args) and return its result."""
        return fn(self, *args)

    def apply(self, fn: Callable[..., Any] | None = None, *args: Any) -> Any:
        """Evaluate fn against the scope, then digest.

        The digest runs even if fn raises; fn's exception then propagates.
        """
        self._begin_phase("apply")
        try:
            if fn is not None:
                return self.eval(fn, *args)
            return None
        finally:
            self._clear_phase()
            self.digest()

    def _begin_phase(self, phase: str) -> None:
        if self._phase is not None:
            raise DigestInProgress(self._phase)
        self._phase = phase

    def _clear_phase(self) -> None:
        self._phase = None

    def __repr__(self) -> str:
        fields = {k: v for k, v in vars(self).items() if not k.startswith("_")}
        return f"Scope({fields!r})"
