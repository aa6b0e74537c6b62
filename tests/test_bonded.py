import numpy as np
import pytest

from dla_growth import BondedSequence


def test_append_and_read_back():
    seq = BondedSequence(capacity=10)
    assert len(seq) == 0
    assert seq.append(5, 5, (0, 255, 255)) == 1
    assert seq.append(4, 5, (0, 200, 255)) == 2

    first = seq[0]
    assert first.position == (5, 5)
    assert first.color == (0, 255, 255)
    assert first.bonded
    assert seq[-1].position == (4, 5)
    assert [p.position for p in seq] == [(5, 5), (4, 5)]

    with pytest.raises(IndexError):
        seq[2]


def test_views_are_read_only():
    seq = BondedSequence(capacity=4)
    seq.append(1, 2, (3, 4, 5))
    with pytest.raises(ValueError):
        seq.x_coords()[0] = 7
    with pytest.raises(ValueError):
        seq.colors()[0, 0] = 7
    assert seq[0].position == (1, 2)


def test_published_elements_survive_appends():
    """A reader holding an earlier view keeps seeing the same elements."""
    seq = BondedSequence(capacity=100)
    seq.append(10, 10, (1, 1, 1))
    seq.append(11, 10, (2, 2, 2))

    xs = seq.x_coords()
    colors = seq.colors()
    positions = seq.positions()

    for i in range(50):
        seq.append(20 + i, 30, (i, i, i))

    assert len(xs) == 2
    assert xs.tolist() == [10, 11]
    assert colors.tolist() == [[1, 1, 1], [2, 2, 2]]
    assert positions.tolist() == [[10, 10], [11, 10]]
    assert len(seq) == 52
    assert np.array_equal(seq.x_coords()[:2], xs)


def test_iteration_stops_at_observed_length():
    seq = BondedSequence(capacity=10)
    seq.append(0, 0, (0, 0, 0))
    it = iter(seq)
    seq_first = next(it)
    seq.append(1, 0, (0, 0, 0))
    assert seq_first.position == (0, 0)
    assert list(it) == []


def test_capacity_is_enforced():
    seq = BondedSequence(capacity=2)
    seq.append(0, 0, (0, 0, 0))
    seq.append(1, 0, (0, 0, 0))
    with pytest.raises(IndexError, match="full"):
        seq.append(2, 0, (0, 0, 0))
    with pytest.raises(ValueError):
        BondedSequence(capacity=0)
