from hypsel.event import Track
from hypsel.muon_id import MuonID


def track(length, pid=1.0, displacement=0.0):
    return Track(length=length, llr_pid=pid, displacement=displacement)


def test_longest_passing_track_selected():
    tracks = [track(10), track(30), track(20)]
    assert MuonID().select_candidate(tracks) == 1


def test_no_tracks_gives_none():
    assert MuonID().select_candidate([]) is None


def test_pid_cut_excludes_track():
    tracks = [track(10), track(30, pid=0.1)]
    assert MuonID(0.5, 0.0, 1000.0).select_candidate(tracks) == 0


def test_length_and_displacement_cuts():
    tracks = [track(4), track(30, displacement=5.0)]
    assert MuonID(0.0, 5.0, 1.0).select_candidate(tracks) is None


def test_set_tune_changes_selection():
    m = MuonID()
    tracks = [track(30, pid=0.2)]
    assert m.select_candidate(tracks) == 0
    m.set_tune(0.6, 0.0, 1000.0)
    assert m.select_candidate(tracks) is None


def test_best_length_compared_as_whole_number():
    tracks = [track(5.7), track(5.3)]
    assert MuonID().select_candidate(tracks) == 1