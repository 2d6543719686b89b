"""Notification records emitted by mutating election operations."""

import logging
import threading
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    """Base class for notification records.

    The sequence number is assigned by the EventLog on append and is
    1-indexed across the whole log.
    """
    sequence: int = field(default=0, kw_only=True)

    @property
    def type(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, Any]:
        data = {"type": self.type}
        for f in fields(self):
            data[f.name] = getattr(self, f.name)
        return data


@dataclass(frozen=True)
class ElectionCreated(Event):
    election_id: int
    name: str


@dataclass(frozen=True)
class CandidateAdded(Event):
    election_id: int
    candidate_id: int
    name: str


@dataclass(frozen=True)
class ElectionStarted(Event):
    election_id: int


@dataclass(frozen=True)
class ElectionClosed(Event):
    election_id: int


@dataclass(frozen=True)
class VoteCast(Event):
    election_id: int
    candidate_id: int
    caller: Any
    num_votes: int


Subscriber = Callable[[Event], None]


class EventLog:
    """Append-only, ordered log of notification records.

    Subscribers are called synchronously, in registration order, with each
    event as it is appended. A subscriber that raises is logged and skipped;
    it cannot undo the operation that emitted the event.

    Subscribers run while the emitting election is locked, so they may read
    that election but should not block on other elections.
    """

    def __init__(self):
        self._events: list[Event] = []
        self._subscribers: list[Subscriber] = []
        self._lock = threading.RLock()

    def subscribe(self, callback: Subscriber) -> Subscriber:
        """Register a subscriber. Usable as a decorator."""
        with self._lock:
            self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.remove(callback)

    def append(self, event: Event) -> Event:
        """Stamp the event with the next sequence number, store it and notify subscribers.

        Returns:
            The stored event (a copy of the argument carrying its sequence number)
        """
        with self._lock:
            event = replace(event, sequence=len(self._events) + 1)
            self._events.append(event)
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Event subscriber %r failed on %s #%d",
                    callback, event.type, event.sequence,
                )

        return event

    def for_election(self, election_id: int) -> list[Event]:
        """Return the events emitted for one election, in emission order."""
        with self._lock:
            return [e for e in self._events
                    if getattr(e, "election_id", None) == election_id]

    def __iter__(self) -> Iterator[Event]:
        with self._lock:
            return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)
