"""Creation of Btrfs snapshots."""

from __future__ import annotations

import logging
import subprocess
from os import PathLike

from .errors import FailedToSpawnCmd, SubvolumeError

log = logging.getLogger(__name__)


def btrfs_snapshot(
    subvol_path: str | PathLike[str],
    snapshot_file: str | PathLike[str],
    readonly: bool = False,
) -> None:
    """Snapshot ``subvol_path`` into ``snapshot_file`` with ``btrfs subvolume snapshot``."""
    command = ["btrfs", "subvolume", "snapshot"]
    if readonly:
        command.append("-r")
    command += [str(subvol_path), str(snapshot_file)]

    try:
        result = subprocess.run(command, capture_output=True)
    except OSError as exc:
        raise FailedToSpawnCmd(exc) from exc

    stdout = result.stdout.decode("utf-8", errors="replace")
    if stdout:
        log.info("%s", stdout.strip())

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")
        if stderr:
            log.error("%s", stderr.strip())
        raise SubvolumeError()