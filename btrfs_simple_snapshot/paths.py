"""Path checks and naming helpers for snapshots."""

from __future__ import annotations

import logging
from datetime import datetime
from os import PathLike
from pathlib import Path

from .errors import (
    InvalidSnapshotDir,
    MountPointNotDir,
    PrefixInferenceFailed,
    SnapshotDirCreateFail,
)
from .subvolume import Subvolume, get_subvol

log = logging.getLogger(__name__)


def verify_mount_path(mount_point: str | PathLike[str]) -> None:
    """Raise MountPointNotDir unless the mount point is a directory."""
    log.debug("Verifying mount point")
    if not Path(mount_point).is_dir():
        raise MountPointNotDir(mount_point)


def verify_snapshot_path(snapshot_path: str | PathLike[str]) -> None:
    """Make sure the snapshot directory exists, creating it if missing."""
    log.debug("Verifying snapshot path")
    path = Path(snapshot_path)
    if not path.exists():
        log.warning("Snapshot directory does not exists, creating it")
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SnapshotDirCreateFail(exc) from exc
    elif not path.is_dir():
        raise InvalidSnapshotDir(snapshot_path)
    else:
        log.info("Snapshot directory already exists")


def infer_prefix(subvol_path: str | PathLike[str]) -> Path:
    """Use the subvolume's own name as the snapshot name prefix."""
    name = Path(subvol_path).name
    if not name or name == "..":
        raise PrefixInferenceFailed()
    return Path(name)


def make_absolute(mount_point: str | PathLike[str], path: str | PathLike[str]) -> Path:
    """Resolve ``path`` against the mount point; absolute paths are kept."""
    result = Path(mount_point) / path
    log.info("Path %r -> %r (base %r)", str(path), str(result), str(mount_point))
    return result


def get_subvol_wrapped(path: str | PathLike[str]) -> Subvolume:
    """Query a subvolume and log a summary of what was found."""
    log.debug("Fetching subvolume properties")
    subvol = get_subvol(path)
    log.debug(
        "The specified subvolume %s with UUID %s created on %s has %d snapshots",
        subvol.name,
        subvol.uuid,
        subvol.creation_time,
        len(subvol.snapshots),
    )
    if subvol.snapshots:
        log.info("Subvolume snapshots: %s", [str(s) for s in subvol.snapshots])
    return subvol


def snapshot_filename(
    prefix: str | PathLike[str], suffix_format: str, now: datetime
) -> Path:
    """Build a snapshot name from a prefix and a formatted date suffix."""
    suffix = now.strftime(suffix_format).replace("/", "-")
    log.info("Current datetime: %s\nSnapshot suffix: %r", now, suffix)
    name = str(prefix)
    if suffix:
        name = f"{name}-{suffix}"
    return Path(name)