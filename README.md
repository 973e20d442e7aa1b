# voxkit

Building blocks for voxel-based 3-D mapping in Python. The package is a
library. It has no command-line program.

## What is in it

- **`voxkit.common`**: grid arithmetic and small shared types.
  - Point ↔ grid index conversions: `get_grid_index_from_point`, `get_grid_index_from_origin_point`, `get_center_point_from_grid_index` and `get_origin_point_from_grid_index`.
  - Block, local and global voxel index arithmetic: `get_global_voxel_index_from_block_and_voxel_index`, `get_block_index_from_global_voxel_index`, `get_local_from_global_voxel_index` and `get_block_and_voxel_index_from_global_voxel_index`. The local-index functions need a power-of-two `voxels_per_side`; otherwise they raise `ValueError`.
  - `signum`, `is_power_of_two`, `log_odds_from_probability` and `probability_from_log_odds`.
  - `Color`, an RGBA colour with 8-bit channels. It provides `Color.blend_two_colors` and `Color.named` (for example `"red"` or `"teal"`).
- **`voxkit.voxel`**: the voxel types `TsdfVoxel`, `EsdfVoxel`, `OccupancyVoxel` and `IntensityVoxel` (dataclasses).
  - `get_voxel_type` returns a voxel type's serialization name.
  - `is_same_voxel` compares two voxels. It supports TSDF, ESDF and occupancy voxels.
  - `merge_voxel_a_into_voxel_b` merges one voxel into another in place. For TSDF voxels it takes a weighted average of the distance and colour.
- **`voxkit.block_hash`**: `any_index_hash` and `long_index_hash`, which give 32-bit hashes of integer 3-D indices.
- **`voxkit.transformation`**: `QuatTransformation`, a unit quaternion `(w, x, y, z)` plus a translation.
  - It supports composition with `*`, `inverse`, `transform`, `transform_vectorized`, `transform4`, `inverse_transform`, `inverse_transform4`, and `log`/`exp` of SO(3)×R³.
  - It can be built with `from_matrix`, `construct_and_renormalize_rotation` or `random`.
  - The module also provides `interpolate_componentwise` (slerp plus linear interpolation) and `transform_pointcloud`.
- **`voxkit.transform2d`**: `Transformation2D`, an angle plus a 2-D translation, with the same kinds of operations.
- **`voxkit.neighbors`**: neighbourhoods of a voxel.
  - The `Connectivity` enum (6, 18, 26) and the `OFFSETS` / `DISTANCES` tables.
  - `neighbors_from_global_index`.
  - Block-boundary-aware lookups: `neighbor_from_block_and_voxel_index_and_direction` and `neighbors_from_block_and_voxel_index`.
  - `offset_between_voxels`.
- **`voxkit.approx_hash`**: fixed-size containers indexed by masked hashes. Both give false positives and false negatives by design.
  - `ApproxHashArray(unmasked_bits, factory)`.
  - `ApproxHashSet(unmasked_bits, full_reset_threshold)`, with a cheap offset-based `reset`.
- **`voxkit.evaluation`**: per-voxel comparison of a ground-truth voxel with a test voxel.
  - `compute_voxel_error` returns a `VoxelEvaluationResult` and the signed error.
  - `VoxelEvaluationMode` chooses which voxels behind a surface are ignored.
  - `VoxelEvaluationDetails` holds summary numbers and a text report.
  - `is_observed_voxel`, `get_voxel_sdf`, `set_voxel_sdf` and `set_voxel_weight`.
- **`voxkit.timing`**: timing support.
  - `Timing`, a registry of named timers with total, mean, min, max, rolling variance and rate (`hz`) per timer.
  - `Timer`, which starts on construction and also works as a context manager.
  - `DummyTimer`, which records nothing.
  - `Accumulator`.
  - `seconds_to_time_string`.
  - A shared default registry, `TIMING`.
- **`voxkit.stream_io`**: varint-prefixed message streams.
  - `encode_varint32` and `decode_varint32`.
  - `write_message_count` and `read_message_count`.
  - `write_message` and `read_message`. These work with any object that has `SerializeToString` and `ParseFromString` methods.
  - Read errors raise `ValueError`.
- **`voxkit.marching_cubes`**: the marching-cubes tables `TRIANGLE_TABLE` and `EDGE_INDEX_PAIRS`, and `triangles_for_configuration`.
- **`voxkit.mesh_ply`**: `PlyMesh` (vertices with optional normals, colours and triangle indices). `format_mesh_ply` returns its ASCII PLY text and `write_mesh_ply` writes it to a file.

## What it does not do

- There are no layers, blocks or maps holding voxels, and no storage of them.
- There is nothing that integrates point clouds into a map or builds an ESDF.
- There is no layer-wide RMSE evaluation. `voxkit.evaluation` works one voxel pair at a time.
- Surfaces are not extracted. `voxkit.marching_cubes` provides only the lookup tables.
- No message schema is defined. `voxkit.stream_io` frames messages that you supply.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Converting between points and grid indices:

```python
import numpy as np
from voxkit.common import get_grid_index_from_point, get_center_point_from_grid_index

idx = get_grid_index_from_point(np.array([0.25, -0.1, 1.0]), 1.0 / 0.2)
center = get_center_point_from_grid_index(idx, 0.2)
```

Transforming points:

```python
import numpy as np
from voxkit.transformation import QuatTransformation

t = QuatTransformation.from_matrix(np.eye(4))
p = t.transform(np.array([1.0, 2.0, 3.0]))
back = t.inverse().transform(p)
```

Comparing two voxels:

```python
from voxkit.evaluation import VoxelEvaluationMode, compute_voxel_error
from voxkit.voxel import TsdfVoxel

result, error = compute_voxel_error(
    TsdfVoxel(distance=0.1, weight=1.0),
    TsdfVoxel(distance=0.15, weight=1.0),
    VoxelEvaluationMode.EVALUATE_ALL_VOXELS,
)
```

Timing a section of code:

```python
from voxkit.timing import Timer, Timing

timing = Timing()
with Timer("integrate", timing=timing):
    ...
print(timing.report())
```

Writing a mesh to PLY:

```python
from voxkit.mesh_ply import PlyMesh, write_mesh_ply

mesh = PlyMesh(vertices=[(0, 0, 0), (1, 0, 0), (0, 1, 0)], indices=[0, 1, 2])
write_mesh_ply("triangle.ply", mesh)
```