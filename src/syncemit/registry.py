from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

EventKey = Hashable
Listener = Callable[..., Any]


@dataclass(eq=False)
class HandlerEntry:
    """One registered interest in an event.

    Attributes:
        callback: The callable invoked on dispatch. For one-shot entries this is the
            wrapper that removes itself before forwarding the call.
        original: The callable the caller supplied. Same object as ``callback`` for
            persistent entries.
        once: Whether the entry was registered as one-shot.
    """

    callback: Listener
    original: Listener
    once: bool = False

    def matches(self, listener: Listener) -> bool:
        return self.original is listener or self.callback is listener


class Registry:
    """Mapping from event key to its ordered list of handler entries.

    A key is present only while it has at least one entry. Entry order is
    registration order and defines dispatch order. Not thread-safe on its own;
    the owning emitter serializes access.
    """

    def __init__(self) -> None:
        self._entries: Dict[EventKey, List[HandlerEntry]] = {}

    def add(self, event: EventKey, entry: HandlerEntry) -> int:
        """Append ``entry`` to the sequence for ``event`` and return the new count."""
        entries = self._entries.setdefault(event, [])
        entries.append(entry)
        return len(entries)

    def remove(self, event: EventKey, listener: Listener) -> int:
        """Remove every entry for ``event`` whose original or effective callback is ``listener``.

        Returns:
            Number of entries removed.
        """
        entries = self._entries.get(event)
        if not entries:
            return 0
        kept = [entry for entry in entries if not entry.matches(listener)]
        removed = len(entries) - len(kept)
        if not kept:
            del self._entries[event]
        elif removed:
            entries[:] = kept
        return removed

    def clear(self, event: Optional[EventKey] = None) -> None:
        if event is None:
            self._entries.clear()
        else:
            self._entries.pop(event, None)

    def entries(self, event: EventKey) -> Tuple[HandlerEntry, ...]:
        """Return a snapshot of the entries for ``event`` (empty if none)."""
        return tuple(self._entries.get(event, ()))

    def count(self, event: EventKey) -> int:
        return len(self._entries.get(event, ()))

    def keys(self) -> List[EventKey]:
        return list(self._entries)

    def __contains__(self, event: object) -> bool:
        return event in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[EventKey]:
        return iter(self.keys())


__all__ = ["EventKey", "HandlerEntry", "Listener", "Registry"]
