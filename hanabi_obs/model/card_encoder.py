"""Card identity indexing and the small one-hot/thermometer writers.

Identities use color-major ordering: ``index = color * num_ranks + rank``.
Every section encoder goes through these helpers instead of repeating the
offset arithmetic.
"""

import numpy as np


def card_index(color: int, rank: int, num_ranks: int) -> int:
    """The card's one-hot index using a color-major ordering."""
    if color < 0 or rank < 0 or rank >= num_ranks:
        raise ValueError(f"card ({color}, {rank}) has no identity index")
    return color * num_ranks + rank


def write_one_hot(section: np.ndarray, start: int, width: int, value: int) -> int:
    """Set ``section[start + value]`` inside a field of ``width`` slots.

    Returns the field width so callers can advance their cursor.
    """
    if not 0 <= value < width:
        raise ValueError(f"one-hot value {value} outside field of width {width}")
    section[start + value] = 1.0
    return width


def write_thermometer(section: np.ndarray, start: int, width: int, count: int) -> int:
    """Set the first ``count`` of ``width`` slots starting at ``start``."""
    if not 0 <= count <= width:
        raise ValueError(f"thermometer count {count} outside field of width {width}")
    section[start:start + count] = 1.0
    return width


def write_bitmask(section: np.ndarray, start: int, width: int, bitmask: int) -> int:
    """Spread the low ``width`` bits of ``bitmask`` over ``width`` slots."""
    for i in range(width):
        if bitmask & (1 << i):
            section[start + i] = 1.0
    return width
