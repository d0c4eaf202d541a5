"""Connectedness test between seeds on a single wire plane."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

MIN_CLUSTER_SIZE = 50


class ConnectednessTest:
    """Checks that the decay products are connected to each other but not to the muon."""

    def __init__(self, plane: int, dead_channels: Iterable[int] = ()) -> None:
        self.plane = plane
        self.dead_channels = frozenset(dead_channels)
        self.seed_indexes: list[list[int]] = []
        self.output_indexes: list[list[int]] = []
        self.output_sizes: list[list[int]] = []
        self.seed_channels: list[list[int]] = []

    @classmethod
    def from_directory(cls, plane: int, directory: str | Path) -> ConnectednessTest:
        """Build a test using the dead channel list in ``<directory>/Plane<plane>.txt``."""
        path = Path(directory) / f"Plane{plane}.txt"
        channels = [int(token) for token in path.read_text().split()]
        return cls(plane, channels)

    def load_info(
        self,
        seed_indexes: Sequence[Sequence[int]],
        output_indexes: Sequence[Sequence[int]],
        output_sizes: Sequence[Sequence[int]],
        seed_channels: Sequence[Sequence[int]],
    ) -> None:
        """Store the clustering results for the current event."""
        self.seed_indexes = [list(row) for row in seed_indexes]
        self.output_indexes = [list(row) for row in output_indexes]
        self.output_sizes = [list(row) for row in output_sizes]
        self.seed_channels = [list(row) for row in seed_channels]

    def run(self, muon_index: int, proton_index: int, pion_index: int) -> bool:
        """Return True if proton and pion share a cluster that the muon is not part of."""
        wanted = (muon_index, proton_index, pion_index)
        entry = next(
            (i for i, seeds in enumerate(self.seed_indexes) if all(w in seeds[:3] for w in wanted)),
            None,
        )
        if entry is None:
            return False

        seeds = self.seed_indexes[entry][:3]
        outputs = self.output_indexes[entry][:3]
        sizes = self.output_sizes[entry][:3]

        if -1 in outputs:
            return False
        if any(size < MIN_CLUSTER_SIZE for size in sizes):
            return False
        if self.dead_wire_between(self.seed_channels[entry]):
            return False
        # All three particles merged into one cluster
        if outputs[0] == outputs[1] == outputs[2]:
            return False

        def output_of(seed: int) -> int:
            return outputs[max(j for j, s in enumerate(seeds) if s == seed)]

        muon, proton, pion = (output_of(seed) for seed in wanted)
        return muon != proton and muon != pion and proton == pion

    def dead_wire_between(self, channels: Sequence[int]) -> bool:
        """Return True if a dead channel lies between the lowest and highest seed channel."""
        if len(channels) < 2:
            return False
        low, high = min(channels), max(channels)
        return any(ch in self.dead_channels for ch in range(low, high + 1))