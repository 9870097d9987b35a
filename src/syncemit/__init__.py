"""In-process synchronous publish/subscribe emitter."""

from importlib.metadata import version, PackageNotFoundError

from .config import DEFAULT_MAX_LISTENERS, EmitterSettings
from .emitter import ERROR_EVENT, EventEmitter, OnceWrapper, create_event_emitter
from .exceptions import EmitterError, InvalidArgument
from .registry import HandlerEntry, Registry

try:
    __version__ = version("syncemit")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"

__all__ = [
    "DEFAULT_MAX_LISTENERS",
    "ERROR_EVENT",
    "EmitterError",
    "EmitterSettings",
    "EventEmitter",
    "HandlerEntry",
    "InvalidArgument",
    "OnceWrapper",
    "Registry",
    "__version__",
    "create_event_emitter",
]
