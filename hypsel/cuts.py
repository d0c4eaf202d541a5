"""Bookkeeping of event counts passing one selection cut."""

from __future__ import annotations

import math
from dataclasses import dataclass


def _ratio(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics: x/0 gives inf or nan instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def _root(value: float) -> float:
    return math.sqrt(value) if value >= 0 else math.nan


@dataclass
class Cut:
    """Weighted event counts before and after a cut, with their variances."""

    name: str = ""

    total_events: float = 0.0
    signal_events: float = 0.0
    good_reco_events: float = 0.0

    total_events_var: float = 0.0
    signal_events_var: float = 0.0
    good_reco_events_var: float = 0.0

    events_in: float = 0.0
    events_out: float = 0.0

    events_in_var: float = 0.0
    events_out_var: float = 0.0

    signal_events_in: float = 0.0
    signal_events_out: float = 0.0
    good_reco_events_in: float = 0.0
    good_reco_events_out: float = 0.0

    signal_events_in_var: float = 0.0
    signal_events_out_var: float = 0.0
    good_reco_events_in_var: float = 0.0
    good_reco_events_out_var: float = 0.0

    def signal_efficiency(self) -> float:
        return _ratio(self.signal_events_out, self.signal_events)

    def signal_purity(self) -> float:
        return _ratio(self.signal_events_out, self.events_out)

    def good_reco_efficiency(self) -> float:
        return _ratio(self.good_reco_events_out, self.good_reco_events)

    def good_reco_purity(self) -> float:
        return _ratio(self.good_reco_events_out, self.events_out)

    def significance(self) -> float:
        return _ratio(self.signal_events_out, _root(self.events_out))

    def background_acceptance(self) -> float:
        return _ratio(
            self.events_out - self.signal_events_out,
            self.total_events - self.signal_events,
        )

    def predicted_signal(self) -> float:
        return self.signal_events_out

    def predicted_signal_error(self) -> float:
        return _root(self.signal_events_out_var)

    def predicted_background(self) -> float:
        return self.events_out - self.signal_events_out

    def predicted_background_error(self) -> float:
        return _root(self.events_out_var - self.signal_events_out_var)

    def reset(self) -> None:
        """Zero the event counts; variances and the name are kept."""
        self.total_events = 0.0
        self.signal_events = 0.0
        self.good_reco_events = 0.0
        self.events_in = 0.0
        self.events_out = 0.0
        self.signal_events_in = 0.0
        self.signal_events_out = 0.0
        self.good_reco_events_in = 0.0
        self.good_reco_events_out = 0.0