"""Filter events against a list of run/subrun/event numbers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RunSubrunEvent:
    """Identifier of one event."""

    run: int
    subrun: int
    event: int


class EventListFilter:
    """Keeps a list of selected events and answers whether an event is on it."""

    def __init__(self) -> None:
        self.events: list[RunSubrunEvent] = []

    def load(self, path: str | Path) -> None:
        """Replace the list with the whitespace-separated triples in the file."""
        tokens = [int(token) for token in Path(path).read_text().split()]
        if len(tokens) % 3:
            raise ValueError(f"{path}: expected run, subrun and event triples")
        self.events = [RunSubrunEvent(*tokens[i : i + 3]) for i in range(0, len(tokens), 3)]

    def passes(self, run: int, subrun: int, event: int) -> bool:
        """Return True if an entry has this run and event number; the subrun is not compared."""
        return any(entry.run == run and entry.event == event for entry in self.events)