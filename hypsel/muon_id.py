"""Selection of the muon candidate among the reconstructed tracks."""

from __future__ import annotations

from collections.abc import Sequence

from hypsel.event import Track


class MuonID:
    """Picks the longest track passing PID, length and vertex proximity cuts."""

    def __init__(self, pid_cut: float = 0.0, min_length: float = 0.0, max_separation: float = 1000.0) -> None:
        self.set_tune(pid_cut, min_length, max_separation)

    def set_tune(self, pid_cut: float, min_length: float, max_separation: float) -> None:
        self.pid_cut = pid_cut
        self.min_length = min_length
        self.max_separation = max_separation

    def select_candidate(self, tracks: Sequence[Track]) -> int | None:
        """Return the index of the muon candidate, or None if no track qualifies."""
        best: int | None = None
        # The running best length is kept as a whole number, as the selection tunes assume
        best_length = -1
        for i, track in enumerate(tracks):
            if (
                track.llr_pid < self.pid_cut
                or track.length < self.min_length
                or track.displacement > self.max_separation
            ):
                continue
            if track.length > best_length:
                best = i
                best_length = int(track.length)
        return best