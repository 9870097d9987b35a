from __future__ import annotations

import logging
from threading import RLock
from typing import Any, List, Optional, Set

from .config import EmitterSettings, MaxListeners, check_max_listeners, is_unbounded
from .exceptions import InvalidArgument
from .registry import EventKey, HandlerEntry, Listener, Registry

logger = logging.getLogger(__name__)

ERROR_EVENT = "error"


def _describe(listener: Any) -> str:
    return getattr(listener, "__qualname__", None) or getattr(listener, "__name__", None) or repr(listener)


class OnceWrapper:
    """Callable registered in place of a one-shot listener.

    The first call removes the wrapper from its emitter and then forwards the call to
    the original listener. Later calls are no-ops, which covers a re-entrant emit that
    reaches the same wrapper from an outer snapshot.
    """

    def __init__(self, emitter: "EventEmitter", event: EventKey, listener: Listener) -> None:
        self.emitter = emitter
        self.event = event
        self.listener = listener
        self.fired = False

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        with self.emitter._lock:
            if self.fired:
                return None
            self.fired = True
        # Unregister before invoking so the listener may re-register itself
        self.emitter.off(self.event, self)
        return self.listener(*args, **kwargs)

    def __repr__(self) -> str:
        return f"<OnceWrapper {_describe(self.listener)} for {self.event!r} fired={self.fired}>"


class EventEmitter:
    """Synchronous, thread-safe publish/subscribe emitter.

    Listeners are called in registration order on the caller's stack. ``emit`` works
    on a snapshot of the listeners taken before the first call, so listeners may add,
    remove or emit freely. Such changes only affect later emissions. A listener that
    raises does not stop its siblings. The exception is re-emitted as an ``"error"``
    event instead.
    """

    def __init__(self, settings: Optional[EmitterSettings] = None) -> None:
        self._settings = settings or EmitterSettings()
        self._registry = Registry()
        self._max_listeners: MaxListeners = self._settings.max_listeners
        self._warned: Set[EventKey] = set()
        self._lock = RLock()

    # -- configuration -------------------------------------------------

    def get_max_listeners(self) -> MaxListeners:
        return self._max_listeners

    def set_max_listeners(self, n: MaxListeners) -> "EventEmitter":
        """Set the per-event listener count above which a warning is logged.

        Raises:
            InvalidArgument: if ``n`` is not a non-negative number.
        """
        self._max_listeners = check_max_listeners(n)
        return self

    # -- registration --------------------------------------------------

    def on(self, event: EventKey, listener: Listener, *, once: bool = False) -> "EventEmitter":
        """Register ``listener`` for ``event``.

        Args:
            event: Event key, compared by equality.
            listener: Callable invoked with the arguments passed to :meth:`emit`.
            once: Register a one-shot listener that removes itself on first call.

        Raises:
            InvalidArgument: if ``listener`` is not callable.
        """
        if not callable(listener):
            raise InvalidArgument("listener must be callable")
        if once:
            entry = HandlerEntry(callback=OnceWrapper(self, event, listener), original=listener, once=True)
        else:
            entry = HandlerEntry(callback=listener, original=listener)
        warn = False
        with self._lock:
            count = self._registry.add(event, entry)
            if self._exceeds_max(count) and event not in self._warned:
                self._warned.add(event)
                warn = True
            max_listeners = self._max_listeners
        logger.debug("Registered %s%s for %r (%d total)", _describe(listener), " (once)" if once else "", event, count)
        if warn:
            logger.warning(
                "Possible listener leak detected: %d listeners registered for %r (max %s). "
                "Use set_max_listeners() to increase the limit.",
                count,
                event,
                max_listeners,
            )
        return self

    def add_listener(self, event: EventKey, listener: Listener, *, once: bool = False) -> "EventEmitter":
        return self.on(event, listener, once=once)

    def once(self, event: EventKey, listener: Listener) -> "EventEmitter":
        """Register a listener that is removed right before its first invocation."""
        return self.on(event, listener, once=True)

    # -- removal -------------------------------------------------------

    def off(self, event: EventKey, listener: Listener) -> "EventEmitter":
        """Remove every registration of ``listener`` for ``event``.

        Matches by identity against both the supplied callable and, for one-shot
        registrations, the internal wrapper. Non-callables and unknown listeners are
        ignored.
        """
        if not callable(listener):
            return self
        with self._lock:
            removed = self._registry.remove(event, listener)
            if event not in self._registry:
                self._warned.discard(event)
        if removed:
            logger.debug("Removed %d registration(s) of %s from %r", removed, _describe(listener), event)
        return self

    def remove_listener(self, event: EventKey, listener: Listener) -> "EventEmitter":
        return self.off(event, listener)

    def remove_all_listeners(self, event: Optional[EventKey] = None) -> "EventEmitter":
        """Remove all listeners for ``event``, or for every event when ``event`` is None."""
        with self._lock:
            self._registry.clear(event)
            if event is None:
                self._warned.clear()
            else:
                self._warned.discard(event)
        logger.debug("Removed all listeners for %s", "all events" if event is None else repr(event))
        return self

    # -- dispatch ------------------------------------------------------

    def emit(self, event: EventKey, *args: Any, **kwargs: Any) -> bool:
        """Call every listener registered for ``event`` with the given arguments.

        Returns:
            True if at least one listener was registered when the call began.
        """
        with self._lock:
            snapshot = self._registry.entries(event)
        if not snapshot:
            logger.debug("Emitting %r with no listeners", event)
            return False
        logger.debug("Emitting %r to %d listener(s)", event, len(snapshot))
        for entry in snapshot:
            try:
                entry.callback(*args, **kwargs)
            except Exception as exc:
                self._handle_failure(event, entry, exc)
        return True

    def _handle_failure(self, event: EventKey, entry: HandlerEntry, exc: Exception) -> None:
        if event == ERROR_EVENT:
            # Re-routing would recurse into the failing error handler
            logger.error(
                "Listener %s for %r raised; dropping", _describe(entry.original), ERROR_EVENT, exc_info=exc
            )
            return
        if self.emit(ERROR_EVENT, exc):
            return
        if self._settings.log_dropped_errors:
            logger.error(
                "Unhandled exception in listener %s for %r (no %r listener registered)",
                _describe(entry.original),
                event,
                ERROR_EVENT,
                exc_info=exc,
            )

    # -- queries -------------------------------------------------------

    def listener_count(self, event: EventKey) -> int:
        with self._lock:
            return self._registry.count(event)

    def event_names(self) -> List[EventKey]:
        with self._lock:
            return self._registry.keys()

    def listeners(self, event: EventKey) -> List[Listener]:
        """Return a copy of the listeners for ``event`` as originally supplied."""
        with self._lock:
            return [entry.original for entry in self._registry.entries(event)]

    def raw_listeners(self, event: EventKey) -> List[Listener]:
        """Return a copy of the callables actually invoked, including one-shot wrappers."""
        with self._lock:
            return [entry.callback for entry in self._registry.entries(event)]

    def _exceeds_max(self, count: int) -> bool:
        return not is_unbounded(self._max_listeners) and count > self._max_listeners


def create_event_emitter(settings: Optional[EmitterSettings] = None) -> EventEmitter:
    """Return a new, empty :class:`EventEmitter`."""
    return EventEmitter(settings)


__all__ = ["ERROR_EVENT", "EventEmitter", "OnceWrapper", "create_event_emitter"]
