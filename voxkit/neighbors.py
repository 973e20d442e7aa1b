"""Voxel neighbourhood lookup tables and cross-block neighbour indexing."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Sequence

from voxkit.common import Index


class Connectivity(IntEnum):
    """Number of neighbours considered around a voxel."""

    SIX = 6
    EIGHTEEN = 18
    TWENTY_SIX = 26


_OFFSET_ROWS = (
    (-1, 1, 0, 0, 0, 0, -1, -1, 1, 1, 0, 0, 0, 0, -1, 1, -1, 1, -1, -1, -1, -1, 1, 1, 1, 1),
    (0, 0, -1, 1, 0, 0, -1, 1, -1, 1, -1, -1, 1, 1, 0, 0, 0, 0, -1, -1, 1, 1, -1, -1, 1, 1),
    (0, 0, 0, 0, -1, 1, 0, 0, 0, 0, -1, 1, -1, 1, -1, -1, 1, 1, -1, 1, -1, 1, -1, 1, -1, 1),
)

OFFSETS: tuple[Index, ...] = tuple(zip(*_OFFSET_ROWS))  # type: ignore[assignment]
"""Offsets to the 6, 18 and 26 neighbourhood, in that order."""

DISTANCES: tuple[float, ...] = (
    (1.0,) * 6 + (math.sqrt(2.0),) * 12 + (math.sqrt(3.0),) * 8
)
"""Distances (in voxels) to each entry of ``OFFSETS``."""


def neighbors_from_global_index(
    global_index: Sequence[int],
    connectivity: Connectivity = Connectivity.TWENTY_SIX,
) -> list[Index]:
    """Global indices of all neighbours of ``global_index``."""
    base = tuple(int(c) for c in global_index)
    return [
        tuple(b + o for b, o in zip(base, offset))  # type: ignore[misc]
        for offset in OFFSETS[: int(connectivity)]
    ]


def neighbor_from_block_and_voxel_index_and_direction(
    block_index: Sequence[int],
    voxel_index: Sequence[int],
    direction: Sequence[int],
    voxels_per_side: int,
) -> tuple[Index, Index]:
    """Block and local voxel index of the voxel one ``direction`` away.

    Steps that leave the block are carried into the block index.
    """
    if voxels_per_side <= 0:
        raise ValueError(f"voxels_per_side must be positive, got {voxels_per_side}")
    block: list[int] = []
    voxel: list[int] = []
    for b, v, d in zip(block_index, voxel_index, direction):
        carry, local = divmod(int(v) + int(d), voxels_per_side)
        block.append(int(b) + carry)
        voxel.append(local)
    return tuple(block), tuple(voxel)  # type: ignore[return-value]


def neighbors_from_block_and_voxel_index(
    block_index: Sequence[int],
    voxel_index: Sequence[int],
    voxels_per_side: int,
    connectivity: Connectivity = Connectivity.TWENTY_SIX,
) -> list[tuple[Index, Index]]:
    """``(block_index, voxel_index)`` pairs of all neighbours of a voxel."""
    return [
        neighbor_from_block_and_voxel_index_and_direction(
            block_index, voxel_index, offset, voxels_per_side
        )
        for offset in OFFSETS[: int(connectivity)]
    ]


def offset_between_voxels(
    start_block_index: Sequence[int],
    start_voxel_index: Sequence[int],
    end_block_index: Sequence[int],
    end_voxel_index: Sequence[int],
    voxels_per_side: int,
) -> Index:
    """Signed offset between the global indices of two voxels."""
    if voxels_per_side == 0:
        raise ValueError("voxels_per_side must not be zero")
    return tuple(
        (int(ev) - int(sv)) + (int(eb) - int(sb)) * voxels_per_side
        for sb, sv, eb, ev in zip(
            start_block_index, start_voxel_index, end_block_index, end_voxel_index
        )
    )  # type: ignore[return-value]