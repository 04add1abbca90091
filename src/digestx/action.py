"""Actions and transactions — mutate a scope, then digest once.

Wrapping mutations in `with transaction(scope)` or an @action(scope)
function defers the digest until the outermost block exits, so listeners
see the final state rather than each intermediate step.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, ParamSpec, TypeVar

if TYPE_CHECKING:
    from digestx.scope import Scope

P = ParamSpec("P")
R = TypeVar("R")


@contextmanager
def transaction(scope: Scope) -> Iterator[Scope]:
    """Context manager for batching mutations on one scope.

    Usage:
        with transaction(scope) as s:
            s.first = "Ada"
            s.last = "Lovelace"
            # listeners fire here, after both are set

    The digest runs even if the block raises.
    """
    scope._batch_depth += 1
    try:
        yield scope
    finally:
        scope._batch_depth -= 1
        if scope._batch_depth == 0:
            scope.digest()


def action(scope: Scope) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator: run fn inside transaction(scope).

    Usage:
        @action(scope)
        def rename(first, last):
            scope.first = first
            scope.last = last
    """

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with transaction(scope):
                return fn(*args, **kwargs)

        return wrapper

    return decorator
