from hypsel.event import Track
from hypsel.track_length import TrackLengthCut, sort_tracks


def tracks(*lengths):
    return [Track(index=i, length=length) for i, length in enumerate(lengths)]


def test_sort_is_descending():
    result = sort_tracks(tracks(1, 3, 2))
    assert [t.length for t in result] == [3, 2, 1]


def test_sort_keeps_ties_in_order_and_leaves_input():
    original = tracks(2, 5, 2)
    result = sort_tracks(original)
    assert [t.index for t in result] == [1, 0, 2]
    assert [t.length for t in original] == [2, 5, 2]


def test_fewer_than_two_tracks_fail():
    assert TrackLengthCut(1000, 1000).apply(tracks(1)) is False


def test_short_tracks_pass():
    assert TrackLengthCut(10, 20).apply(tracks(100, 15, 5)) is True


def test_shortest_too_long_fails():
    assert TrackLengthCut(4, 20).apply(tracks(100, 15, 5)) is False


def test_second_shortest_too_long_fails():
    cut = TrackLengthCut(10, 20)
    cut.set_tune(10, 15)
    assert cut.apply(tracks(100, 15, 5)) is False