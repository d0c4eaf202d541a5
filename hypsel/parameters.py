"""Selection tune parameters and the predefined tunes."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass

from hypsel.fiducial import FVVersion


class BeamMode(enum.IntEnum):
    """Beam running mode."""

    FHC = 0
    RHC = 1
    BNB = 2


TMVA_DIR = "TMVA"


def _weights_dir(kind: str, tune: str) -> str:
    return f"{TMVA_DIR}/{kind}/Tunes/{tune}/dataset/weights"


@dataclass
class SelectionParameters:
    """All parameters that define one tune of the selection."""

    name: str = ""
    has_been_setup: bool = False

    # Preselection
    fv: int | None = None
    padding: float | None = None

    # Muon ID
    minimum_mip_length: float | None = None
    max_displacement: float | None = None
    pid_cut: float | None = None

    # Subleading track length cut
    secondary_track_length_cut: float | None = None
    tertiary_track_length_cut: float | None = None

    # Selector BDT inputs
    proton_pid_cut: float | None = None
    pion_pid_cut: float | None = None
    separation_cut: float | None = None

    # Vertex fitter
    vertex_pull: float = 5.0

    analysis_bdt_cut: float | None = None

    w_max: float | None = None
    w_min: float | None = None
    alpha_cut: float | None = None

    selector_bdt_weights_dir: str = ""
    analysis_bdt_weights_dir: str = ""

    parameters_are_set: bool = False

    run_period: int | None = None
    beam_mode: BeamMode | None = None


def build_tunes() -> dict[str, SelectionParameters]:
    """Build the predefined tunes, keyed by tune name."""
    fhc_325 = SelectionParameters(
        name="FHC Tune 325",
        run_period=1,
        fv=FVVersion.WIRECELL_PADDED,
        padding=10,
        minimum_mip_length=10,
        secondary_track_length_cut=1000,
        tertiary_track_length_cut=1000,
        max_displacement=1,
        pid_cut=0.6,
        proton_pid_cut=0.1,
        pion_pid_cut=-0.1,
        separation_cut=3,
        vertex_pull=5,
        selector_bdt_weights_dir=_weights_dir("SelectorMVA", "FHC_Tune_325"),
        analysis_bdt_weights_dir=_weights_dir("AnalysisMVA", "FHC_Tune_325"),
        analysis_bdt_cut=0.15,
        beam_mode=BeamMode.FHC,
        has_been_setup=True,
    )

    rhc_397 = dataclasses.replace(
        fhc_325,
        name="RHC Tune 397",
        run_period=3,
        proton_pid_cut=0.0,
        selector_bdt_weights_dir=_weights_dir("SelectorMVA", "RHC_Tune_397"),
        analysis_bdt_weights_dir=_weights_dir("AnalysisMVA", "RHC_Tune_397"),
        analysis_bdt_cut=0.2,
        beam_mode=BeamMode.RHC,
    )

    fhc_test = dataclasses.replace(
        fhc_325,
        name="FHC Tune test",
        padding=0,
        minimum_mip_length=0,
        pid_cut=0.3,
        proton_pid_cut=1.0,
        pion_pid_cut=-1.0,
        separation_cut=100,
        selector_bdt_weights_dir=_weights_dir("SelectorMVA", "FHC_Tune_test"),
        analysis_bdt_weights_dir=_weights_dir("AnalysisMVA", "FHC_Tune_test"),
    )

    fhc_test2 = dataclasses.replace(
        fhc_325,
        name="FHC Tune test 2",
        proton_pid_cut=1.0,
        pion_pid_cut=-1.0,
        separation_cut=100,
        selector_bdt_weights_dir=_weights_dir("SelectorMVA", "FHC_Tune_test2"),
        analysis_bdt_weights_dir=_weights_dir("AnalysisMVA", "FHC_Tune_test2"),
    )

    fhc_1000 = dataclasses.replace(
        fhc_325,
        name="FHC Tune 1000",
        padding=5,
        minimum_mip_length=5,
        pion_pid_cut=0.0,
        separation_cut=10,
        selector_bdt_weights_dir=_weights_dir("SelectorMVA", "FHC_Tune_1000"),
        analysis_bdt_weights_dir=_weights_dir("AnalysisMVA", "FHC_Tune_1000"),
    )

    # Tune 325 without the selector BDT score in the analysis BDT
    fhc_325_alt = dataclasses.replace(
        fhc_325,
        name="FHC Tune 325 Alt",
        analysis_bdt_weights_dir=_weights_dir("AnalysisMVA", "FHC_Tune_325_Alt"),
        analysis_bdt_cut=0.2,
    )

    fhc_326 = dataclasses.replace(
        fhc_325,
        name="FHC Tune 326",
        selector_bdt_weights_dir=_weights_dir("SelectorMVA", "FHC_Tune_326"),
        analysis_bdt_weights_dir=_weights_dir("AnalysisMVA", "FHC_Tune_326"),
        analysis_bdt_cut=0.1,
    )

    fhc_325_nobdt = dataclasses.replace(
        fhc_325, name="FHC Tune 325 NoBDT", w_min=1.09, w_max=1.14, alpha_cut=14
    )

    rhc_397_nobdt = dataclasses.replace(
        rhc_397, name="RHC Tune 397 NoBDT", w_min=1.09, w_max=1.14, alpha_cut=14
    )

    tunes = [
        fhc_325,
        rhc_397,
        fhc_test,
        fhc_test2,
        fhc_1000,
        fhc_325_alt,
        fhc_326,
        fhc_325_nobdt,
        rhc_397_nobdt,
    ]
    return {tune.name: tune for tune in tunes}


def get_tune(name: str) -> SelectionParameters:
    """Return a fresh copy of the predefined tune with this name."""
    tunes = build_tunes()
    try:
        return tunes[name]
    except KeyError:
        raise KeyError(f"unknown selection tune {name!r}") from None