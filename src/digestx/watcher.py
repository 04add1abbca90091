"""Watcher records and the handles returned by Scope.watch().

A Watcher pairs an evaluate function with an optional listener and
remembers the last value it saw. The scope owns the record; callers only
get a WatchHandle, which can dispose of the watcher.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from digestx._equality import _UNSET

if TYPE_CHECKING:
    from digestx.scope import Scope

    EvaluateFn = Callable[[Scope], Any]
    ListenerFn = Callable[[Any, Any, Scope], None]


class Watcher:
    """One registered (evaluate, listener) pair."""

    __slots__ = ("evaluate", "on_change", "use_value_equality", "last_value", "disposed")

    def __init__(
        self,
        evaluate: EvaluateFn,
        on_change: ListenerFn | None = None,
        use_value_equality: bool = False,
    ) -> None:
        self.evaluate = evaluate
        self.on_change = on_change
        self.use_value_equality = use_value_equality
        self.last_value: Any = _UNSET
        self.disposed = False

    @property
    def name(self) -> str:
        return getattr(self.evaluate, "__name__", repr(self.evaluate))

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else "active"
        return f"Watcher({self.name}, {state})"


class WatchHandle:
    """Disposable handle for a registered watcher."""

    __slots__ = ("_scope", "_watcher")

    def __init__(self, scope: Scope, watcher: Watcher) -> None:
        self._scope = scope
        self._watcher = watcher

    @property
    def disposed(self) -> bool:
        return self._watcher.disposed

    def dispose(self) -> None:
        """Stop watching. Safe to call from a listener and more than once."""
        if self._watcher.disposed:
            return
        self._watcher.disposed = True
        self._scope._remove_watcher(self._watcher)

    def __repr__(self) -> str:
        return f"WatchHandle({self._watcher!r})"
