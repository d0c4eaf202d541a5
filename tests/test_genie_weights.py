import math

import pytest

from hypsel.event import Event
from hypsel.genie_weights import (
    CCMEC_DIAL,
    CV_DIALS,
    TUNED_CV_DIAL,
    GenG4WeightHandler,
)

DIALS = list(CV_DIALS) + [
    "All_UBGenie",
    "reinteractions_proton_Geant4",
    CCMEC_DIAL,
    "VecFFCCQEshape_UBGenie",
    "Other",
]

TUNED = 2.0
ALL = [2.0, 4.0]
G4 = [0.5, 1.5]
MEC = [2.0, 6.0]
VECFF = [4.0, 8.0]


def truth(tuned=TUNED, all_weights=ALL):
    return [[tuned], [1.0], [1.0], list(all_weights), list(G4), list(MEC), list(VECFF), [1.0]]


def handler_for(*truths):
    h = GenG4WeightHandler()
    h.load_event(Event(sys_dials=list(DIALS), sys_weights=[list(t) for t in truths]))
    return h


def test_cv_weight_is_tuned_value_for_unit_splines():
    assert handler_for(truth()).cv_weight() == pytest.approx(TUNED)


def test_cv_weight_without_truths_is_one():
    assert GenG4WeightHandler().cv_weight() == 1.0


def test_multisim_weights_divide_out_tune():
    assert handler_for(truth()).weights("All_UBGenie") == pytest.approx([w / TUNED for w in ALL])


def test_g4_weights_are_not_divided():
    assert handler_for(truth()).weights("reinteractions_proton_Geant4") == pytest.approx(G4)


def test_alt_model_uses_first_universe():
    assert handler_for(truth()).weights("VecFFCCQEshape_UBGenie") == pytest.approx([VECFF[0] / TUNED])


def test_ccmec_uses_second_universe():
    assert handler_for(truth()).weights(CCMEC_DIAL) == pytest.approx([MEC[1] / TUNED])


def test_weights_multiply_over_truths():
    single = handler_for(truth()).weights("All_UBGenie")
    double = handler_for(truth(), truth()).weights("All_UBGenie")
    assert double == pytest.approx([w * w for w in single])


def test_unphysical_weights_replaced():
    h = handler_for(truth(all_weights=[math.inf, 200.0]))
    assert h.weights("All_UBGenie") == pytest.approx([1.0 / TUNED, 1.0 / TUNED])


def test_unphysical_tune_gives_unit_cv_weight():
    assert handler_for(truth(tuned=math.nan)).cv_weight() == 1.0


def test_unknown_category_raises():
    with pytest.raises(ValueError):
        handler_for(truth()).weights("Other")


def test_missing_dial_raises():
    with pytest.raises(ValueError):
        handler_for(truth()).weights("NotADial")


def test_no_weights_gives_empty_list():
    assert GenG4WeightHandler().weights("All_UBGenie") == []


def test_missing_cv_dial_raises():
    h = GenG4WeightHandler()
    h.load_event(Event(sys_dials=[TUNED_CV_DIAL], sys_weights=[[[1.0]]]))
    with pytest.raises(ValueError):
        h.cv_weight()


def test_event_weights_are_not_modified():
    event = Event(sys_dials=list(DIALS), sys_weights=[truth(all_weights=[math.inf, 2.0])])
    GenG4WeightHandler().load_event(event)
    assert math.isinf(event.sys_weights[0][3][0])


def test_dial_count_mismatch_raises():
    h = GenG4WeightHandler()
    with pytest.raises(ValueError):
        h.load_event(Event(sys_dials=list(DIALS), sys_weights=[[[1.0]]]))