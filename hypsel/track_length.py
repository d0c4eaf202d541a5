"""Cut on the lengths of the shortest reconstructed tracks."""

from __future__ import annotations

from collections.abc import Sequence

from hypsel.event import Track


def sort_tracks(tracks: Sequence[Track]) -> list[Track]:
    """Return the tracks in descending order of length, keeping ties in their order."""
    return sorted(tracks, key=lambda t: t.length, reverse=True)


class TrackLengthCut:
    """Requires the two shortest tracks to be below the given lengths."""

    def __init__(self, secondary_cut: float = 0.0, tertiary_cut: float = 0.0) -> None:
        self.set_tune(secondary_cut, tertiary_cut)

    def set_tune(self, secondary_cut: float, tertiary_cut: float) -> None:
        self.secondary_cut = secondary_cut
        self.tertiary_cut = tertiary_cut

    def apply(self, tracks: Sequence[Track]) -> bool:
        """Return True if the shortest and second shortest tracks pass their cuts."""
        if len(tracks) < 2:
            return False
        ordered = sort_tracks(tracks)
        return ordered[-1].length < self.secondary_cut and ordered[-2].length < self.tertiary_cut