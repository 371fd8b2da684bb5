import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from btrfs_simple_snapshot.errors import FailedToSpawnCmd, SubvolumeError
from btrfs_simple_snapshot.snapshot import btrfs_snapshot


def _recorder(returncode=0, stderr=b""):
    calls = []

    def run(cmd, **kwargs):
        calls.append(list(cmd))
        return subprocess.CompletedProcess(cmd, returncode, b"", stderr)

    return calls, run


def test_readonly_snapshot_command():
    calls, run = _recorder()
    with patch("subprocess.run", side_effect=run):
        result = btrfs_snapshot(Path("/mnt/@home"), Path("/mnt/.snapshots/@home-x"), True)
    assert result is None
    assert calls == [
        ["btrfs", "subvolume", "snapshot", "-r", "/mnt/@home", "/mnt/.snapshots/@home-x"]
    ]


def test_writable_snapshot_command_has_no_readonly_flag():
    calls, run = _recorder()
    with patch("subprocess.run", side_effect=run):
        result = btrfs_snapshot("/mnt/@", "/mnt/.snapshots/@-x", False)
    assert result is None
    assert calls == [["btrfs", "subvolume", "snapshot", "/mnt/@", "/mnt/.snapshots/@-x"]]
    assert "-r" not in calls[0]


def test_failed_command_raises_subvolume_error():
    calls, run = _recorder(returncode=1, stderr=b"ERROR: cannot snapshot")
    with patch("subprocess.run", side_effect=run):
        with pytest.raises(SubvolumeError):
            btrfs_snapshot("/mnt/@", "/mnt/.snapshots/@-x", True)
    assert len(calls) == 1


def test_missing_binary_raises_spawn_error():
    with patch("subprocess.run", side_effect=FileNotFoundError("btrfs")):
        with pytest.raises(FailedToSpawnCmd) as info:
            btrfs_snapshot("/mnt/@", "/mnt/.snapshots/@-x")
    assert isinstance(info.value.error, FileNotFoundError)
    assert str(info.value).startswith("Failed to run btrfs command.")