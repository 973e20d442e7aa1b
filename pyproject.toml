[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voxkit"
version = "0.1.0"
description = "Voxel grid utilities: indexing, voxel types, rigid transformations, neighbourhoods, evaluation, timing and PLY mesh output"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["voxel", "tsdf", "esdf", "mapping", "marching cubes", "ply", "robotics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["voxkit"]

[tool.pytest.ini_options]
addopts = "-ra"
