"""Voxel grid utilities: indexing, voxel types, transformations, neighbourhoods,
evaluation, timing, message streams and PLY mesh output."""

__version__ = "0.1.0"

__all__ = [
    "common",
    "voxel",
    "block_hash",
    "transformation",
    "transform2d",
    "neighbors",
    "approx_hash",
    "evaluation",
    "timing",
    "stream_io",
    "marching_cubes",
    "mesh_ply",
]