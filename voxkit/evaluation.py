"""Per-voxel error evaluation between a ground-truth and a test map."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from voxkit.voxel import EsdfVoxel, TsdfVoxel

_OBSERVED_WEIGHT = 1e-6


class VoxelEvaluationResult(Enum):
    """Outcome of comparing one voxel pair."""

    NO_OVERLAP = "no_overlap"
    IGNORED = "ignored"
    EVALUATED = "evaluated"


class VoxelEvaluationMode(Enum):
    """Which voxels behind a surface are left out of the evaluation."""

    EVALUATE_ALL_VOXELS = "evaluate_all_voxels"
    IGNORE_ERROR_BEHIND_TEST_SURFACE = "ignore_error_behind_test_surface"
    IGNORE_ERROR_BEHIND_GT_SURFACE = "ignore_error_behind_gt_surface"
    IGNORE_ERROR_BEHIND_ALL_SURFACES = "ignore_error_behind_all_surfaces"


_IGNORE_BEHIND_TEST = frozenset(
    {
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_TEST_SURFACE,
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_ALL_SURFACES,
    }
)
_IGNORE_BEHIND_GT = frozenset(
    {
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_GT_SURFACE,
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_ALL_SURFACES,
    }
)


@dataclass
class VoxelEvaluationDetails:
    """Summary of a layer evaluation; errors are absolute distance errors."""

    rmse: float = 0.0
    max_error: float = 0.0
    min_error: float = 0.0
    num_evaluated_voxels: int = 0
    num_ignored_voxels: int = 0
    num_overlapping_voxels: int = 0
    num_non_overlapping_voxels: int = 0

    def to_string(self) -> str:
        """Human-readable report of the evaluation."""
        return (
            "\n\n======= Layer Evaluation Results =======\n"
            f" num evaluated voxels:       {self.num_evaluated_voxels}\n"
            f" num overlapping voxels:     {self.num_overlapping_voxels}\n"
            f" num non-overlapping voxels: {self.num_non_overlapping_voxels}\n"
            f" num ignored voxels:         {self.num_ignored_voxels}\n"
            f" error min:                  {self.min_error:g}\n"
            f" error max:                  {self.max_error:g}\n"
            f" RMSE:                       {self.rmse:g}\n"
            "========================================\n"
        )

    def __str__(self) -> str:
        return self.to_string()


def is_observed_voxel(voxel: object) -> bool:
    """True if the voxel has been observed; unknown voxel types never are."""
    if isinstance(voxel, TsdfVoxel):
        return voxel.weight > _OBSERVED_WEIGHT
    if isinstance(voxel, EsdfVoxel):
        return bool(voxel.observed)
    return False


def get_voxel_sdf(voxel: object) -> float:
    """Signed distance stored in a TSDF or ESDF voxel."""
    if isinstance(voxel, (TsdfVoxel, EsdfVoxel)):
        return voxel.distance
    raise TypeError(f"{type(voxel).__name__} holds no signed distance")


def set_voxel_sdf(voxel: object, sdf: float) -> None:
    """Store a signed distance in a TSDF or ESDF voxel."""
    if not isinstance(voxel, (TsdfVoxel, EsdfVoxel)):
        raise TypeError(f"{type(voxel).__name__} holds no signed distance")
    voxel.distance = float(sdf)


def set_voxel_weight(voxel: object, weight: float) -> None:
    """Set a TSDF voxel's weight, or an ESDF voxel's observed flag."""
    if isinstance(voxel, TsdfVoxel):
        voxel.weight = float(weight)
    elif isinstance(voxel, EsdfVoxel):
        voxel.observed = weight > 0.0
    else:
        raise TypeError(f"{type(voxel).__name__} holds no weight")


def compute_voxel_error(
    voxel_gt: object,
    voxel_test: object,
    evaluation_mode: VoxelEvaluationMode,
) -> tuple[VoxelEvaluationResult, float]:
    """Compare two voxels; returns the result and the signed error.

    The error is ``test - gt`` when evaluated and 0.0 otherwise.
    """
    if not is_observed_voxel(voxel_gt) or not is_observed_voxel(voxel_test):
        return VoxelEvaluationResult.NO_OVERLAP, 0.0

    test_distance = get_voxel_sdf(voxel_test)
    gt_distance = get_voxel_sdf(voxel_gt)

    if (evaluation_mode in _IGNORE_BEHIND_TEST and test_distance < 0.0) or (
        evaluation_mode in _IGNORE_BEHIND_GT and gt_distance < 0.0
    ):
        return VoxelEvaluationResult.IGNORED, 0.0

    return VoxelEvaluationResult.EVALUATED, test_distance - gt_distance