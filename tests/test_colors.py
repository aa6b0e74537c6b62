import pytest

from dla_growth import interpolate_color, to_rgb255
from dla_growth.colors import BLUE, CYAN, attachment_fraction


def test_interpolation_endpoints():
    assert interpolate_color(CYAN, BLUE, 0.0) == CYAN
    assert interpolate_color(CYAN, BLUE, 1.0) == BLUE


def test_interpolation_truncates():
    assert interpolate_color(CYAN, BLUE, 0.5) == (0, 127, 255)
    assert interpolate_color((0, 0, 0), (10, 100, 255), 0.25) == (2, 25, 63)


def test_attachment_fraction():
    assert attachment_fraction(1, 4) == 0.25
    assert attachment_fraction(4, 4) == 1.0
    # Zero target: the seed takes the first colour
    assert attachment_fraction(1, 0) == 0.0


def test_to_rgb255_accepts_names_and_triples():
    assert to_rgb255("cyan") == (0, 255, 255)
    assert to_rgb255("#ff8800") == (255, 136, 0)
    assert to_rgb255([0, 0, 255]) == (0, 0, 255)
    assert to_rgb255((12, 34, 56)) == (12, 34, 56)


@pytest.mark.parametrize("bad", [(0, 0), (0, 0, 256), (-1, 0, 0), (0.5, 0, 0), (1, 2, 3, 4)])
def test_to_rgb255_rejects_bad_triples(bad):
    with pytest.raises(ValueError):
        to_rgb255(bad)


def test_to_rgb255_rejects_unknown_name():
    with pytest.raises(ValueError):
        to_rgb255("not-a-colour")


def test_attachment_fraction_is_clamped():
    """Particles bonding after the target was lowered take the second colour."""
    assert attachment_fraction(3, 1) == 1.0
    assert interpolate_color(CYAN, BLUE, attachment_fraction(51, 12)) == BLUE
