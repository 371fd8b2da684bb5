"""Removal of old snapshots according to retention rules."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from os import PathLike
from pathlib import Path

from .errors import (
    ApplicationError,
    FailedToSpawnCmd,
    NoCleaningArg,
    SubvolumeDeletionFailed,
    TimeOutOfRange,
)
from .paths import get_subvol_wrapped, make_absolute, verify_mount_path
from .subvolume import Subvolume, get_subvol

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleaningOptions:
    """Retention rules: how many snapshots to keep and for how long."""

    keep_count: int | None = None
    keep_since: timedelta | None = None

    @property
    def requested(self) -> bool:
        """True when at least one rule is set."""
        return self.keep_count is not None or self.keep_since is not None


def remove_snapshot(subvolume: Subvolume, path: str | PathLike[str]) -> None:
    """Delete one snapshot with ``btrfs subvolume delete``."""
    log.info("Removing snapshot %r", subvolume.name)
    try:
        result = subprocess.run(
            ["btrfs", "subvolume", "delete", str(path)], capture_output=True
        )
    except OSError as exc:
        raise FailedToSpawnCmd(exc) from exc

    stdout = result.stdout.decode("utf-8", errors="replace")
    if stdout:
        log.info("%s", stdout.strip())

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")
        if stderr:
            log.error("%s", stderr.strip())
        log.error("Clean job failed for snapshot %s", subvolume.name)
        raise SubvolumeDeletionFailed()
    log.info("Successfully removed snapshot %s", subvolume.name)


def cleaning_job(
    snapshots: Iterable[tuple[Path, Subvolume]],
    options: CleaningOptions,
    now: datetime,
) -> None:
    """Delete the snapshots that fall outside the retention rules.

    Snapshots are ordered newest first. With only ``keep_count`` the newest
    that many are kept. With ``keep_since`` every snapshot younger than the
    interval is kept, and at least ``keep_count`` are kept if it is given;
    nothing is removed when there are no more than ``keep_count`` snapshots.
    """
    log.debug("Initiating clean job")
    ordered = sorted(snapshots, key=lambda item: item[1].creation_time, reverse=True)

    if options.keep_since is None:
        if options.keep_count is None:
            raise NoCleaningArg()
        first_deleted = options.keep_count
    else:
        limit = 0
        if options.keep_count is not None:
            limit = options.keep_count
            if len(ordered) <= limit:
                log.info("Number of snapshots is within given limit, no cleaning required")
                return
        try:
            delete_before = now - options.keep_since
        except OverflowError as exc:
            raise TimeOutOfRange() from exc
        young = next(
            (
                index
                for index, (_, subvol) in enumerate(ordered)
                if subvol.creation_time < delete_before
            ),
            len(ordered),
        )
        first_deleted = max(young, limit)

    for path, subvol in ordered[first_deleted:]:
        remove_snapshot(subvol, path)


def collect_snapshots(
    subvolume: Subvolume,
    mount_point: str | PathLike[str],
    snapshot_path: str | PathLike[str],
) -> list[tuple[Path, Subvolume]]:
    """Resolve a subvolume's snapshots that live under ``snapshot_path``.

    Snapshots that cannot be queried are skipped.
    """
    base = Path(snapshot_path)
    found = []
    for relative in subvolume.snapshots:
        path = Path(mount_point) / relative
        if not path.is_relative_to(base):
            continue
        try:
            found.append((path, get_subvol(path)))
        except ApplicationError:
            continue
    return found


def handle_clean(
    mount_point: str | PathLike[str],
    subvol_path: str | PathLike[str],
    snapshot_path: str | PathLike[str],
    options: CleaningOptions,
) -> None:
    """Clean the snapshots of a subvolume kept under ``snapshot_path``."""
    verify_mount_path(mount_point)
    now = datetime.now()
    subvol_path = make_absolute(mount_point, subvol_path)
    snapshot_path = make_absolute(mount_point, snapshot_path)
    subvol = get_subvol_wrapped(subvol_path)
    snapshots = collect_snapshots(subvol, mount_point, snapshot_path)
    cleaning_job(snapshots, options, now)