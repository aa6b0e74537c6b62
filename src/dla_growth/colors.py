from __future__ import annotations

from typing import Sequence, Tuple, Union

import matplotlib.colors as mcolors

RGB = Tuple[int, int, int]
ColorLike = Union[str, Sequence[int]]

CYAN: RGB = (0, 255, 255)
BLUE: RGB = (0, 0, 255)


def to_rgb255(color: ColorLike) -> RGB:
    """
    Coerce a colour to an ``(r, g, b)`` triple of ints in 0..255.

    Accepts an integer triple or any colour string matplotlib understands
    ("cyan", "#ff8800", "tab:blue", ...).
    """
    if isinstance(color, str):
        r, g, b = mcolors.to_rgb(color)
        return int(round(r * 255)), int(round(g * 255)), int(round(b * 255))

    values = tuple(color)
    if len(values) != 3:
        raise ValueError(f"expected an (r, g, b) triple, got {color!r}")
    rgb = []
    for v in values:
        iv = int(v)
        if iv != v or not 0 <= iv <= 255:
            raise ValueError(f"RGB components must be integers in 0..255, got {color!r}")
        rgb.append(iv)
    return rgb[0], rgb[1], rgb[2]


def interpolate_color(first: RGB, second: RGB, t: float) -> RGB:
    """
    Linear blend of two colours: ``t = 0`` gives ``first``, ``t = 1`` gives ``second``.
    Channels are truncated towards zero.
    """
    return (
        int((1.0 - t) * first[0] + t * second[0]),
        int((1.0 - t) * first[1] + t * second[1]),
        int((1.0 - t) * first[2] + t * second[2]),
    )


def attachment_fraction(index: int, target: int) -> float:
    """
    Blend fraction for the ``index``-th bonded particle (seed is 1), within [0, 1].
    0 when target is 0; 1 for particles past a target lowered mid-run.
    """
    if target <= 0:
        return 0.0
    return min(index, target) / target
