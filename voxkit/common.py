"""Shared types, constants and grid/index conversion helpers."""

from __future__ import annotations

import math
from typing import ClassVar, Iterator, Sequence

import numpy as np

K_EPSILON = 1e-6
"""Tolerance used for coordinates."""

K_FLOAT_EPSILON = 1e-6
"""Tolerance used for weights."""

Index = tuple[int, int, int]


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class Color:
    """An RGBA colour with 8-bit channels.

    ``Color()`` is fully transparent black, ``Color(r, g, b)`` is opaque and
    ``Color(r, g, b, a)`` sets every channel.
    """

    __slots__ = ("r", "g", "b", "a")

    _NAMED: ClassVar[dict[str, tuple[int, int, int]]] = {
        "white": (255, 255, 255),
        "black": (0, 0, 0),
        "gray": (127, 127, 127),
        "red": (255, 0, 0),
        "green": (0, 255, 0),
        "blue": (0, 0, 255),
        "yellow": (255, 255, 0),
        "orange": (255, 127, 0),
        "purple": (127, 0, 255),
        "teal": (0, 255, 255),
        "pink": (255, 0, 127),
    }

    def __init__(self, *channels: int) -> None:
        if not channels:
            channels = (0, 0, 0, 0)
        elif len(channels) == 3:
            channels = (*channels, 255)
        elif len(channels) != 4:
            raise TypeError(
                f"Color takes 0, 3 or 4 channels, got {len(channels)}"
            )
        self.r, self.g, self.b, self.a = (int(c) & 0xFF for c in channels)

    def __iter__(self) -> Iterator[int]:
        return iter((self.r, self.g, self.b, self.a))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return tuple(self) == tuple(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Color(r={self.r}, g={self.g}, b={self.b}, a={self.a})"

    @staticmethod
    def blend_two_colors(
        first_color: Color,
        first_weight: float,
        second_color: Color,
        second_weight: float,
    ) -> Color:
        """Blend two colours by their relative weights."""
        total_weight = first_weight + second_weight
        w1 = first_weight / total_weight
        w2 = second_weight / total_weight
        return Color(
            *(
                _round_half_away(c1 * w1 + c2 * w2)
                for c1, c2 in zip(first_color, second_color)
            )
        )

    @classmethod
    def named(cls, name: str) -> Color:
        """Return one of the predefined opaque colours by name."""
        try:
            return cls(*cls._NAMED[name.lower()])
        except KeyError:
            raise ValueError(f"unknown colour name: {name!r}") from None


def get_grid_index_from_point(
    point: Sequence[float], grid_size_inv: float = 1.0
) -> Index:
    """Grid index of the cell containing ``point``.

    With the default ``grid_size_inv`` the point is taken as already scaled.
    Near cell borders float precision may pick the neighbouring cell.
    """
    return tuple(
        math.floor(float(c) * grid_size_inv + K_EPSILON) for c in point
    )  # type: ignore[return-value]


def get_grid_index_from_origin_point(
    point: Sequence[float], grid_size_inv: float
) -> Index:
    """Grid index of a cell given its origin point (robust to rounding)."""
    return tuple(
        _round_half_away(float(c) * grid_size_inv) for c in point
    )  # type: ignore[return-value]


def get_center_point_from_grid_index(
    idx: Sequence[int], grid_size: float
) -> np.ndarray:
    """Centre point of the grid cell ``idx``."""
    return np.array([(float(i) + 0.5) * grid_size for i in idx])


def get_origin_point_from_grid_index(
    idx: Sequence[int], grid_size: float
) -> np.ndarray:
    """Origin (minimum corner) of the grid cell ``idx``."""
    return np.array([float(i) * grid_size for i in idx])


def get_global_voxel_index_from_block_and_voxel_index(
    block_index: Sequence[int], voxel_index: Sequence[int], voxels_per_side: int
) -> Index:
    """Combine a block index and a local voxel index into a global index."""
    return tuple(
        int(b) * voxels_per_side + int(v)
        for b, v in zip(block_index, voxel_index)
    )  # type: ignore[return-value]


def get_block_index_from_global_voxel_index(
    global_voxel_idx: Sequence[int], voxels_per_side_inv: float
) -> Index:
    """Index of the block that holds a global voxel index."""
    return tuple(
        math.floor(float(g) * voxels_per_side_inv) for g in global_voxel_idx
    )  # type: ignore[return-value]


def is_power_of_two(x: int) -> bool:
    """True if ``x`` has at most one bit set (zero counts)."""
    return (x & (x - 1)) == 0


def get_local_from_global_voxel_index(
    global_voxel_idx: Sequence[int], voxels_per_side: int
) -> Index:
    """Index inside its block of a global voxel index.

    ``voxels_per_side`` must be a power of two.
    """
    if not is_power_of_two(voxels_per_side):
        raise ValueError(
            f"voxels_per_side must be a power of two, got {voxels_per_side}"
        )
    mask = voxels_per_side - 1
    return tuple(int(g) & mask for g in global_voxel_idx)  # type: ignore[return-value]


def get_block_and_voxel_index_from_global_voxel_index(
    global_voxel_idx: Sequence[int], voxels_per_side: int
) -> tuple[Index, Index]:
    """Split a global voxel index into ``(block_index, voxel_index)``."""
    block_index = get_block_index_from_global_voxel_index(
        global_voxel_idx, 1.0 / voxels_per_side
    )
    voxel_index = get_local_from_global_voxel_index(
        global_voxel_idx, voxels_per_side
    )
    return block_index, voxel_index


def signum(x: float) -> int:
    """Sign of ``x`` as -1, 0 or 1."""
    if x == 0:
        return 0
    return -1 if x < 0 else 1


def log_odds_from_probability(probability: float) -> float:
    """Log-odds of a probability in [0, 1]."""
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"probability must be in [0, 1], got {probability}")
    if probability == 1.0:
        return math.inf
    if probability == 0.0:
        return -math.inf
    return math.log(probability / (1.0 - probability))


def probability_from_log_odds(log_odds: float) -> float:
    """Probability corresponding to a log-odds value."""
    if log_odds > 700.0:
        return 1.0
    return 1.0 - 1.0 / (1.0 + math.exp(log_odds))