"""Hash functions for integer 3-D grid indices."""

from __future__ import annotations

from typing import Sequence

SL = 17191
SL2 = SL * SL

_SIZE_T_MASK = (1 << 64) - 1
_UINT_MASK = (1 << 32) - 1


def _hash(index: Sequence[int]) -> int:
    x, y, z = (int(c) for c in index)
    wide = (x + y * SL + z * SL2) & _SIZE_T_MASK
    return wide & _UINT_MASK


def any_index_hash(index: Sequence[int]) -> int:
    """Hash of a block or voxel index, an unsigned 32-bit value."""
    return _hash(index)


def long_index_hash(index: Sequence[int]) -> int:
    """Hash of a global (64-bit) voxel index, an unsigned 32-bit value."""
    return _hash(index)