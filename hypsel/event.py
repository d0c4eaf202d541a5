"""Reconstructed and simulated content of a single event."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

Vector3 = tuple[float, float, float]


@dataclass
class Track:
    """A reconstructed track-like particle."""

    index: int = -1
    start: Vector3 = (0.0, 0.0, 0.0)
    direction: Vector3 = (0.0, 0.0, 0.0)
    length: float = 0.0
    llr_pid: float = 0.0
    displacement: float = 0.0
    track_shower_score: float = 0.0
    mean_dedx_three_plane: float = 0.0


@dataclass
class Event:
    """Everything known about one event, truth and reconstruction."""

    is_data: bool = False
    event_id: int = 0
    run: int = 0
    subrun: int = 0
    event: int = 0
    file_id: int = 0
    weight: float = 1.0

    # Flags applying to the entire event
    is_signal: bool = False
    has_hyperon: bool = False
    has_neutron_scatter: bool = False
    is_signal_sigma_zero: bool = False

    # Flags for each simulated interaction
    mode: list[str] = field(default_factory=list)
    ccnc: list[str] = field(default_factory=list)
    n_mc_truths: int = 0
    n_mc_truths_in_tpc: int = 0
    in_active_tpc: list[bool] = field(default_factory=list)
    is_hyperon: list[bool] = field(default_factory=list)
    is_lambda: list[bool] = field(default_factory=list)
    is_lambda_charged: list[bool] = field(default_factory=list)
    is_sigma_zero: list[bool] = field(default_factory=list)
    is_sigma_zero_charged: list[bool] = field(default_factory=list)
    is_associated_hyperon: list[bool] = field(default_factory=list)
    is_signal_truth: list[bool] = field(default_factory=list)
    is_signal_sigma_zero_truth: list[bool] = field(default_factory=list)
    good_reco: bool = False

    true_primary_vertex: list[Vector3] = field(default_factory=list)

    # Simulated particles
    neutrino: list[Any] = field(default_factory=list)
    lepton: list[Any] = field(default_factory=list)
    hyperon: list[Any] = field(default_factory=list)
    primary_nucleon: list[Any] = field(default_factory=list)
    primary_pion: list[Any] = field(default_factory=list)
    primary_kaon: list[Any] = field(default_factory=list)
    decay: list[Any] = field(default_factory=list)
    sigma_zero_decay_lambda: list[Any] = field(default_factory=list)
    sigma_zero_decay_photon: list[Any] = field(default_factory=list)
    kaon_decay: list[Any] = field(default_factory=list)

    decay_vertex: list[Vector3] = field(default_factory=list)

    reco_primary_vertex: Vector3 = (0.0, 0.0, 0.0)
    n_primary_track_daughters: int = 0
    n_primary_shower_daughters: int = 0

    tracklike_primary_daughters: list[Track] = field(default_factory=list)
    showerlike_primary_daughters: list[Track] = field(default_factory=list)

    true_muon_index: int = -1
    true_decay_proton_index: int = -1
    true_decay_pion_index: int = -1

    muon_candidate: Track | None = None
    decay_proton_candidate: Track | None = None
    decay_pion_candidate: Track | None = None

    selector_bdt_score: float = 0.0
    analysis_bdt_score: float = 0.0

    # Connectedness test inputs, keyed by wire plane
    conn_seed_indexes: dict[int, list[list[int]]] = field(default_factory=dict)
    conn_output_indexes: dict[int, list[list[int]]] = field(default_factory=dict)
    conn_output_sizes: dict[int, list[list[int]]] = field(default_factory=dict)
    conn_seed_channels: dict[int, list[list[int]]] = field(default_factory=dict)
    conn_seed_ticks: dict[int, list[list[int]]] = field(default_factory=dict)

    # Systematic weights: sys_weights[truth][dial][universe]
    sys_dials: list[str] = field(default_factory=list)
    sys_weights: list[list[list[float]]] = field(default_factory=list)

    def summary(self) -> str:
        """Return the run, subrun and event numbers as one line."""
        return f"{self.run}  {self.subrun}  {self.event}"