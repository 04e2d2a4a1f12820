"""Timestamped diagnostic events emitted by the simulation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional


class EventCategory(Enum):
    """What kind of thing happened."""
    FIELD = "Field"
    DRONE = "Drone"
    DETECTION = "Detection"
    RETASK = "Retask"
    SIMULATION = "Simulation"


@dataclass(frozen=True)
class Event:
    """One human-readable record in the event log."""
    time: float
    category: EventCategory
    message: str

    def __str__(self) -> str:
        return f"[{self.category.value}] t={self.time:.1f}s {self.message}"


@dataclass
class EventLog:
    """
    Append-only event history.

    With verbose set, every event is also printed as it is recorded.
    """
    verbose: bool = False
    _events: List[Event] = field(default_factory=list, repr=False)

    def record(self, time: float, category: EventCategory, message: str) -> Event:
        event = Event(time=time, category=category, message=message)
        self._events.append(event)
        if self.verbose:
            print(event)
        return event

    def filter(self, category: Optional[EventCategory] = None) -> List[Event]:
        """Events of one category, or all of them."""
        if category is None:
            return list(self._events)
        return [e for e in self._events if e.category == category]

    def clear(self) -> None:
        self._events = []

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)
