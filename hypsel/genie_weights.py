"""Generator and Geant4 reweighting of simulated events."""

from __future__ import annotations

import math
from collections.abc import Sequence

from hypsel.event import Event

GENIE_MULTISIM_UNIVERSES = 600
G4_MULTISIM_UNIVERSES = 1000

TUNED_CV_DIAL = "TunedCentralValue_UBGenie"
CCQE_RPA_DIAL = "RPA_CCQE_UBGenie"
CCMEC_DIAL = "XSecShape_CCMEC_UBGenie"

CV_DIALS = (TUNED_CV_DIAL, "splines_general_Spline", "RootinoFix_UBGenie")
ALT_MODEL_DIALS = (
    "VecFFCCQEshape_UBGenie",
    "AxFFCCQEshape_UBGenie",
    "DecayAngMEC_UBGenie",
    "NormCCCOH_UBGenie",
    "NormNCCOH_UBGenie",
    "ThetaDelta2NRad_UBGenie",
    "Theta_Delta2Npi_UBGenie",
    CCMEC_DIAL,
)
ALT_MODEL_CAPTIONS = (
    "CCQE Vec. FF Shape",
    "CCQE Ax. FF Shape",
    "MEC Decay Angle",
    "CCCOH Norm.",
    "NCCOH Norm",
    "#Delta Rad. Angle",
    "#Delta Had. Angle",
    "CCMEC Cross Section",
)
G4_DIALS = (
    "reinteractions_proton_Geant4",
    "reinteractions_piplus_Geant4",
    "reinteractions_piminus_Geant4",
    "reinteractions_Lambda_Geant4",
)
MULTISIM_DIALS = ("All_UBGenie",) + G4_DIALS


def _physical(weight: float) -> float:
    """Replace infinite, undefined or huge weights by 1."""
    if math.isinf(weight) or math.isnan(weight) or weight > 100:
        return 1.0
    return weight


class GenG4WeightHandler:
    """Holds the systematic weights of one event and combines them per dial."""

    def __init__(self) -> None:
        self._weight_maps: list[dict[str, list[float]]] = []

    def load_event(self, event: Event) -> None:
        """Take the weights of an event, one map of dial to universes per truth."""
        self._weight_maps = [
            {
                dial: [_physical(w) for w in universes]
                for dial, universes in zip(event.sys_dials, truth, strict=True)
            }
            for truth in event.sys_weights
        ]

    def cv_weight(self) -> float:
        """Return the product over truths of the central value tune weights."""
        weight = 1.0
        for weight_map in self._weight_maps:
            factors = []
            for dial in CV_DIALS:
                if dial not in weight_map:
                    raise ValueError(f"GENIE tune dial {dial} has no weights")
                factors.append(weight_map[dial][0])
            weight *= _physical(math.prod(factors))
        return weight

    def weights(self, dial: str) -> list[float]:
        """Return the per-universe weights for a dial, relative to the tuned central value."""
        if not self._weight_maps:
            return []
        if dial not in self._weight_maps[0]:
            raise ValueError(f"GENIE/G4 weights with label {dial} not found")

        is_g4 = dial in G4_DIALS
        result = [1.0] * len(self._weight_maps[0][dial])
        for weight_map in self._weight_maps:
            universes: Sequence[float] | None = weight_map.get(dial)
            if universes is None or len(universes) != len(result):
                raise ValueError(f"GENIE/G4 weights with label {dial} has size mismatch")
            result = [w * u for w, u in zip(result, universes)]
            if not is_g4:
                tuned = weight_map.get(TUNED_CV_DIAL)
                if tuned is None:
                    raise ValueError(f"GENIE tune dial {TUNED_CV_DIAL} has no weights")
                result = [w / tuned[0] for w in result]

        if dial in CV_DIALS or dial in MULTISIM_DIALS or dial == CCQE_RPA_DIAL:
            return result
        if dial in ALT_MODEL_DIALS:
            return [result[1]] if dial == CCMEC_DIAL else [result[0]]
        raise ValueError(f"GENIE/G4 dial {dial} is not CV, Multisim, AltModel or CCQE RPA")