import pytest

from voxkit.evaluation import (
    VoxelEvaluationDetails,
    VoxelEvaluationMode,
    VoxelEvaluationResult,
    compute_voxel_error,
    get_voxel_sdf,
    is_observed_voxel,
    set_voxel_sdf,
    set_voxel_weight,
)
from voxkit.voxel import EsdfVoxel, IntensityVoxel, OccupancyVoxel, TsdfVoxel


def test_tsdf_observed_depends_on_weight():
    assert not is_observed_voxel(TsdfVoxel())
    assert not is_observed_voxel(TsdfVoxel(weight=1e-7))
    assert is_observed_voxel(TsdfVoxel(weight=1.0))


def test_esdf_observed_flag():
    assert not is_observed_voxel(EsdfVoxel())
    assert is_observed_voxel(EsdfVoxel(observed=True))


def test_other_voxels_are_never_observed():
    assert not is_observed_voxel(OccupancyVoxel(observed=True))
    assert not is_observed_voxel(IntensityVoxel(weight=5.0))


def test_sdf_round_trip():
    tsdf = TsdfVoxel()
    esdf = EsdfVoxel()
    set_voxel_sdf(tsdf, 0.5)
    set_voxel_sdf(esdf, -1.5)
    assert get_voxel_sdf(tsdf) == 0.5
    assert get_voxel_sdf(esdf) == -1.5


def test_sdf_unsupported_type():
    with pytest.raises(TypeError):
        get_voxel_sdf(OccupancyVoxel())
    with pytest.raises(TypeError):
        set_voxel_sdf(IntensityVoxel(), 1.0)


def test_set_weight():
    tsdf = TsdfVoxel()
    set_voxel_weight(tsdf, 2.0)
    assert tsdf.weight == 2.0
    esdf = EsdfVoxel()
    set_voxel_weight(esdf, 1.0)
    assert esdf.observed is True
    set_voxel_weight(esdf, 0.0)
    assert esdf.observed is False
    with pytest.raises(TypeError):
        set_voxel_weight(OccupancyVoxel(), 1.0)


def test_no_overlap_when_unobserved():
    gt = TsdfVoxel(distance=0.5, weight=1.0)
    test = TsdfVoxel(distance=0.75)
    result, error = compute_voxel_error(
        gt, test, VoxelEvaluationMode.EVALUATE_ALL_VOXELS
    )
    assert result is VoxelEvaluationResult.NO_OVERLAP
    assert error == 0.0


def test_evaluated_error_is_test_minus_gt():
    gt = TsdfVoxel(distance=0.5, weight=1.0)
    test = TsdfVoxel(distance=0.75, weight=1.0)
    result, error = compute_voxel_error(
        gt, test, VoxelEvaluationMode.EVALUATE_ALL_VOXELS
    )
    assert result is VoxelEvaluationResult.EVALUATED
    assert error == pytest.approx(0.25)
    _, reverse = compute_voxel_error(
        test, gt, VoxelEvaluationMode.EVALUATE_ALL_VOXELS
    )
    assert reverse == pytest.approx(-error)


@pytest.mark.parametrize(
    "mode, expected",
    [
        (VoxelEvaluationMode.EVALUATE_ALL_VOXELS, VoxelEvaluationResult.EVALUATED),
        (
            VoxelEvaluationMode.IGNORE_ERROR_BEHIND_TEST_SURFACE,
            VoxelEvaluationResult.IGNORED,
        ),
        (
            VoxelEvaluationMode.IGNORE_ERROR_BEHIND_GT_SURFACE,
            VoxelEvaluationResult.EVALUATED,
        ),
        (
            VoxelEvaluationMode.IGNORE_ERROR_BEHIND_ALL_SURFACES,
            VoxelEvaluationResult.IGNORED,
        ),
    ],
)
def test_modes_with_test_behind_surface(mode, expected):
    gt = EsdfVoxel(distance=1.0, observed=True)
    test = EsdfVoxel(distance=-1.0, observed=True)
    result, error = compute_voxel_error(gt, test, mode)
    assert result is expected
    if expected is VoxelEvaluationResult.IGNORED:
        assert error == 0.0
    else:
        assert error == pytest.approx(-2.0)


@pytest.mark.parametrize(
    "mode, expected",
    [
        (
            VoxelEvaluationMode.IGNORE_ERROR_BEHIND_TEST_SURFACE,
            VoxelEvaluationResult.EVALUATED,
        ),
        (
            VoxelEvaluationMode.IGNORE_ERROR_BEHIND_GT_SURFACE,
            VoxelEvaluationResult.IGNORED,
        ),
        (
            VoxelEvaluationMode.IGNORE_ERROR_BEHIND_ALL_SURFACES,
            VoxelEvaluationResult.IGNORED,
        ),
    ],
)
def test_modes_with_gt_behind_surface(mode, expected):
    gt = TsdfVoxel(distance=-0.5, weight=1.0)
    test = TsdfVoxel(distance=0.5, weight=1.0)
    result, _ = compute_voxel_error(gt, test, mode)
    assert result is expected


def test_unknown_voxel_type_has_no_overlap():
    result, error = compute_voxel_error(
        OccupancyVoxel(observed=True),
        OccupancyVoxel(observed=True),
        VoxelEvaluationMode.EVALUATE_ALL_VOXELS,
    )
    assert result is VoxelEvaluationResult.NO_OVERLAP
    assert error == 0.0


def test_details_defaults_and_report():
    details = VoxelEvaluationDetails(
        rmse=0.5, max_error=1.0, min_error=0.0, num_evaluated_voxels=3
    )
    text = details.to_string()
    assert text.startswith("\n\n======= Layer Evaluation Results =======\n")
    assert " num evaluated voxels:       3\n" in text
    assert " RMSE:                       0.5\n" in text
    assert text.endswith("========================================\n")
    assert str(details) == text


def test_details_default_counts():
    details = VoxelEvaluationDetails()
    assert details.num_ignored_voxels == 0
    assert details.num_non_overlapping_voxels == 0
    assert " num ignored voxels:         0\n" in details.to_string()