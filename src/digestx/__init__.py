"""digestx: dirty-checking change detection for plain Python scopes."""

from importlib.metadata import version as _version

__version__ = _version("digestx")

from digestx.scope import Scope, DEFAULT_TTL, set_digest_ttl, get_digest_ttl
from digestx.watcher import Watcher, WatchHandle
from digestx.action import action, transaction
from digestx.errors import DigestError, ConvergenceExceeded, DigestInProgress

__all__ = [
    "Scope",
    "Watcher",
    "WatchHandle",
    "action",
    "transaction",
    "DEFAULT_TTL",
    "set_digest_ttl",
    "get_digest_ttl",
    "DigestError",
    "ConvergenceExceeded",
    "DigestInProgress",
]
