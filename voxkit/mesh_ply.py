"""Writing triangle meshes as ASCII PLY files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Sequence

from voxkit.common import Color


@dataclass
class PlyMesh:
    """A mesh of vertices with optional per-vertex normals and colours.

    ``indices`` holds three vertex indices per triangle.
    """

    vertices: list[Sequence[float]] = field(default_factory=list)
    normals: list[Sequence[float]] = field(default_factory=list)
    colors: list[Color | Sequence[int]] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)

    @property
    def has_normals(self) -> bool:
        """True if the mesh carries normals."""
        return bool(self.normals)

    @property
    def has_colors(self) -> bool:
        """True if the mesh carries colours."""
        return bool(self.colors)

    @property
    def has_triangles(self) -> bool:
        """True if the mesh carries triangle indices."""
        return bool(self.indices)

    def __len__(self) -> int:
        return len(self.vertices)


def _number(value: float) -> str:
    return f"{float(value):g}"


def _validate(mesh: PlyMesh) -> None:
    num_vertices = len(mesh.vertices)
    if mesh.has_normals and len(mesh.normals) != num_vertices:
        raise ValueError(
            f"mesh has {len(mesh.normals)} normals for {num_vertices} vertices"
        )
    if mesh.has_colors and len(mesh.colors) != num_vertices:
        raise ValueError(
            f"mesh has {len(mesh.colors)} colors for {num_vertices} vertices"
        )
    if len(mesh.indices) % 3:
        raise ValueError(
            f"triangle indices must come in threes, got {len(mesh.indices)}"
        )


def format_mesh_ply(mesh: PlyMesh) -> str:
    """The ASCII PLY text of ``mesh``."""
    _validate(mesh)
    lines = [
        "ply",
        "format ascii 1.0",
        f"element vertex {len(mesh.vertices)}",
        "property float x",
        "property float y",
        "property float z",
    ]
    if mesh.has_normals:
        lines += [
            "property float normal_x",
            "property float normal_y",
            "property float normal_z",
        ]
    if mesh.has_colors:
        lines += [
            "property uchar red",
            "property uchar green",
            "property uchar blue",
            "property uchar alpha",
        ]
    if mesh.has_triangles:
        lines.append(f"element face {len(mesh.indices) // 3}")
        # "vertex_indices" rather than "vertex_index" for wider reader support.
        lines.append("property list uchar int vertex_indices")
    lines.append("end_header")

    for vert_idx, vertex in enumerate(mesh.vertices):
        fields = [_number(c) for c in vertex]
        if mesh.has_normals:
            fields += [_number(c) for c in mesh.normals[vert_idx]]
        if mesh.has_colors:
            color = mesh.colors[vert_idx]
            if not isinstance(color, Color):
                color = Color(*color)
            fields += [str(c) for c in color]
        lines.append(" ".join(fields))

    indices = mesh.indices
    for start in range(0, len(indices), 3):
        triangle = indices[start:start + 3]
        lines.append("3 " + "".join(f"{int(i)} " for i in triangle))

    return "\n".join(lines) + "\n"


def write_mesh_ply(path: str | os.PathLike[str], mesh: PlyMesh) -> None:
    """Write ``mesh`` as an ASCII PLY file at ``path``."""
    text = format_mesh_ply(mesh)
    with open(path, "w", encoding="ascii", newline="\n") as stream:
        stream.write(text)