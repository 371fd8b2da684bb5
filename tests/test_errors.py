from pathlib import Path

import pytest

from btrfs_simple_snapshot.errors import (
    ApplicationError,
    CreationTimeParseFailed,
    FailedToSpawnCmd,
    InvalidSnapshotDir,
    MountPointNotDir,
    NoCleaningArg,
    PrefixInferenceFailed,
    SnapshotAlreadyExists,
    SnapshotDirCreateFail,
    SubvolumeDeletionFailed,
    SubvolumeError,
    SubvolumeInfoParseFailed,
    TimeOutOfRange,
)


def test_mount_point_not_dir_message():
    err = MountPointNotDir(Path("/mnt/data"))
    assert str(err) == 'The given mount point "/mnt/data" is not a directory'
    assert err.path == Path("/mnt/data")


def test_failed_to_spawn_cmd_includes_cause():
    cause = FileNotFoundError("btrfs missing")
    err = FailedToSpawnCmd(cause)
    assert str(err) == "Failed to run btrfs command. btrfs missing"
    assert err.error is cause


@pytest.mark.parametrize(
    "cls, text",
    [
        (SubvolumeError, "Failed to query the given subvolume"),
        (
            PrefixInferenceFailed,
            "Could not infer snapshot prefix, specify it with --prefix <PREFIX>",
        ),
        (SubvolumeDeletionFailed, "Failed to delete older subvolume"),
        (
            NoCleaningArg,
            "Atleast one of --keep-count or --keep-since is required for cleaning",
        ),
        (TimeOutOfRange, "Time interval too big to work with"),
    ],
)
def test_fixed_messages(cls, text):
    assert str(cls()) == text


def test_subvolume_info_parse_failed_message():
    err = SubvolumeInfoParseFailed("`name` must be initialized")
    assert str(err) == "Failed to parse subvolume information\n`name` must be initialized"


def test_creation_time_parse_failed_message():
    err = CreationTimeParseFailed("bad input", "yesterday")
    assert str(err) == 'Failed to parse subvolume creation time "yesterday" : bad input'
    assert err.text == "yesterday"


def test_snapshot_dir_create_fail_message():
    err = SnapshotDirCreateFail(PermissionError("denied"))
    assert str(err) == "Failed to create snapshot directory\ndenied"


def test_invalid_snapshot_dir_message():
    err = InvalidSnapshotDir(Path("/mnt/.snapshots"))
    assert str(err) == "The specified snapshot path /mnt/.snapshots is not a directory!"


def test_snapshot_already_exists_message():
    err = SnapshotAlreadyExists(Path("home-2024"))
    assert str(err) == "File with same name home-2024 already exists"


def test_all_errors_share_base_class():
    with pytest.raises(ApplicationError) as first:
        raise TimeOutOfRange()
    assert str(first.value) == "Time interval too big to work with"

    with pytest.raises(ApplicationError) as second:
        raise MountPointNotDir(Path("/x"))
    assert str(second.value) == 'The given mount point "/x" is not a directory'
    assert second.value.path == Path("/x")