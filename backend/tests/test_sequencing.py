"""Stop numbering stays 1..N"""
from dataclasses import dataclass

import pytest

from woodyard.services import sequencing


@dataclass
class S:
    id: int
    sequence_number: int = 0


def _stops(n):
    return sequencing.renumber([S(i) for i in range(1, n + 1)])


def _numbers(stops):
    return [s.sequence_number for s in stops]


def test_renumber():
    """1..N in list order"""
    stops = [S(5, 9), S(6, 2), S(7, 2)]
    sequencing.renumber(stops)
    assert _numbers(stops) == [1, 2, 3]
    assert sequencing.is_contiguous(stops)


def test_append_and_remove():
    """Append and remove"""
    stops = _stops(3)
    sequencing.append_stop(stops, S(9))
    assert _numbers(stops) == [1, 2, 3, 4]
    sequencing.remove_stop(stops, stops[1])
    assert [s.id for s in stops] == [1, 3, 9]
    assert _numbers(stops) == [1, 2, 3]


def test_move_stop():
    """Move forward"""
    stops = _stops(4)
    sequencing.move_stop(stops, 0, 2)
    assert [s.id for s in stops] == [2, 3, 1, 4]
    assert _numbers(stops) == [1, 2, 3, 4]


def test_move_stop_clamps_target():
    """Target past the end"""
    stops = _stops(3)
    sequencing.move_stop(stops, 0, 99)
    assert [s.id for s in stops] == [2, 3, 1]


def test_move_stop_bad_source():
    """Bad source index"""
    with pytest.raises(IndexError):
        sequencing.move_stop(_stops(2), 5, 0)


def test_reorder():
    """Explicit order"""
    stops = _stops(3)
    sequencing.reorder(stops, [3, 1, 2])
    assert [(s.id, s.sequence_number) for s in stops] == [(3, 1), (1, 2), (2, 3)]


@pytest.mark.parametrize("ids", [[1, 2], [1, 2, 2], [1, 2, 4]])
def test_reorder_rejects_non_permutation(ids):
    """Reorder needs every id once"""
    with pytest.raises(ValueError):
        sequencing.reorder(_stops(3), ids)


def test_is_contiguous_detects_gaps():
    """Gaps and duplicates"""
    assert not sequencing.is_contiguous([S(1, 1), S(2, 3)])
    assert not sequencing.is_contiguous([S(1, 1), S(2, 1)])
    assert sequencing.is_contiguous([])
