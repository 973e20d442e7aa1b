"""Voxel types and per-voxel comparison and merging."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import singledispatch

from voxkit.common import Color

NOT_SERIALIZABLE = "not_serializable"
TSDF = "tsdf"
ESDF = "esdf"
OCCUPANCY = "occupancy"
INTENSITY = "intensity"

_SAME_TOLERANCE = 1e-10


@dataclass
class TsdfVoxel:
    """Truncated signed distance voxel with a weight and a colour."""

    distance: float = 0.0
    weight: float = 0.0
    color: Color = field(default_factory=Color)


@dataclass
class EsdfVoxel:
    """Euclidean signed distance voxel.

    ``hallucinated`` marks voxels that did not come from the TSDF; it is not
    serialized. ``parent`` is the relative direction toward the parent voxel.
    """

    distance: float = 0.0
    observed: bool = False
    hallucinated: bool = False
    in_queue: bool = False
    fixed: bool = False
    parent: tuple[int, int, int] = (0, 0, 0)


@dataclass
class OccupancyVoxel:
    """Occupancy voxel storing the log-odds of being occupied."""

    probability_log: float = 0.0
    observed: bool = False


@dataclass
class IntensityVoxel:
    """Voxel storing a weighted intensity."""

    intensity: float = 0.0
    weight: float = 0.0


_VOXEL_TYPES: dict[type, str] = {
    TsdfVoxel: TSDF,
    EsdfVoxel: ESDF,
    OccupancyVoxel: OCCUPANCY,
    IntensityVoxel: INTENSITY,
}


def get_voxel_type(voxel_cls: type | object) -> str:
    """Serialization name of a voxel class (or of an instance's class)."""
    if not isinstance(voxel_cls, type):
        voxel_cls = type(voxel_cls)
    return _VOXEL_TYPES.get(voxel_cls, NOT_SERIALIZABLE)


def _check_same_type(voxel_a: object, voxel_b: object) -> None:
    if type(voxel_a) is not type(voxel_b):
        raise TypeError(
            f"cannot combine {type(voxel_a).__name__} "
            f"with {type(voxel_b).__name__}"
        )


@singledispatch
def _same(voxel_a: object, voxel_b: object) -> bool:
    raise TypeError(f"no comparison for {type(voxel_a).__name__}")


@_same.register
def _(voxel_a: TsdfVoxel, voxel_b: TsdfVoxel) -> bool:
    return (
        abs(voxel_a.distance - voxel_b.distance) < _SAME_TOLERANCE
        and abs(voxel_a.weight - voxel_b.weight) < _SAME_TOLERANCE
        and voxel_a.color == voxel_b.color
    )


@_same.register
def _(voxel_a: EsdfVoxel, voxel_b: EsdfVoxel) -> bool:
    return (
        abs(voxel_a.distance - voxel_b.distance) < _SAME_TOLERANCE
        and voxel_a.observed == voxel_b.observed
        and voxel_a.in_queue == voxel_b.in_queue
        and voxel_a.fixed == voxel_b.fixed
        and tuple(voxel_a.parent) == tuple(voxel_b.parent)
    )


@_same.register
def _(voxel_a: OccupancyVoxel, voxel_b: OccupancyVoxel) -> bool:
    return (
        abs(voxel_a.probability_log - voxel_b.probability_log) < _SAME_TOLERANCE
        and voxel_a.observed == voxel_b.observed
    )


def is_same_voxel(voxel_a: object, voxel_b: object) -> bool:
    """True if two voxels of the same type hold the same data."""
    _check_same_type(voxel_a, voxel_b)
    return _same(voxel_a, voxel_b)


@singledispatch
def _merge(voxel_a: object, voxel_b: object) -> None:
    raise TypeError(f"no merge rule for {type(voxel_a).__name__}")


@_merge.register
def _(voxel_a: TsdfVoxel, voxel_b: TsdfVoxel) -> None:
    combined_weight = voxel_a.weight + voxel_b.weight
    if combined_weight > 0:
        voxel_b.distance = (
            voxel_a.distance * voxel_a.weight + voxel_b.distance * voxel_b.weight
        ) / combined_weight
        voxel_b.color = Color.blend_two_colors(
            voxel_a.color, voxel_a.weight, voxel_b.color, voxel_b.weight
        )
        voxel_b.weight = combined_weight


@_merge.register
def _(voxel_a: EsdfVoxel, voxel_b: EsdfVoxel) -> None:
    if voxel_a.observed and voxel_b.observed:
        voxel_b.distance = (voxel_a.distance + voxel_b.distance) / 2.0
    elif voxel_a.observed:
        voxel_b.distance = voxel_a.distance
    voxel_b.observed = voxel_b.observed or voxel_a.observed


@_merge.register
def _(voxel_a: OccupancyVoxel, voxel_b: OccupancyVoxel) -> None:
    voxel_b.probability_log += voxel_a.probability_log
    voxel_b.observed = voxel_b.observed or voxel_a.observed


def merge_voxel_a_into_voxel_b(voxel_a: object, voxel_b: object) -> None:
    """Merge the data of ``voxel_a`` into ``voxel_b`` in place."""
    _check_same_type(voxel_a, voxel_b)
    _merge(voxel_a, voxel_b)