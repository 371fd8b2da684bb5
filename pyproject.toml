[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "btrfs-simple-snapshot"
version = "0.1.5"
description = "Create and manage Btrfs snapshots automatically"
requires-python = ">=3.10"
dependencies = []
keywords = ["btrfs", "snapshot", "backup", "subvolume", "cleanup"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Backup",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
btrfs-simple-snapshot = "btrfs_simple_snapshot.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["btrfs_simple_snapshot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
