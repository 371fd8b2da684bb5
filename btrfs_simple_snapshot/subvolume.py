"""Querying and parsing of Btrfs subvolume properties."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from os import PathLike
from pathlib import Path

from .errors import (
    CreationTimeParseFailed,
    FailedToSpawnCmd,
    SubvolumeError,
    SubvolumeInfoParseFailed,
)

log = logging.getLogger(__name__)

_CREATION_TIME_FORMAT = "%Y-%m-%d %H:%M:%S %z"


@dataclass
class Subvolume:
    """Properties of a subvolume as reported by ``btrfs subvolume show``."""

    name: str
    uuid: str
    creation_time: datetime
    snapshots: list[Path] = field(default_factory=list)


def _parse_creation_time(text: str) -> datetime:
    try:
        parsed = datetime.strptime(text, _CREATION_TIME_FORMAT)
    except ValueError as exc:
        raise CreationTimeParseFailed(str(exc), text) from exc
    # The wall-clock time is kept as written; the offset is dropped.
    time = parsed.replace(tzinfo=None)
    log.info("Subvolume creation time: %s", time)
    return time


def parse_subvolume_info(info: str) -> Subvolume:
    """Build a Subvolume from the text printed by ``btrfs subvolume show``."""
    fields: dict[str, object] = {}
    snapshots: list[Path] = []
    capturing = False
    for line in info.splitlines():
        data = line.strip()
        prop, sep, value = data.partition(":")
        if sep:
            prop = prop.strip()
            if prop == "Name":
                fields["name"] = value.strip()
            elif prop == "UUID":
                fields["uuid"] = value.strip()
            elif prop == "Creation time":
                fields["creation_time"] = _parse_creation_time(value.strip())
            elif "Snapshot" in prop:
                log.debug("Snapshot column encountered!")
                capturing = True
            elif capturing:
                capturing = False
                log.debug("Snapshot column supposedly ended")
        elif capturing:
            log.info("Found snapshot %s", data)
            snapshots.append(Path(data))

    for required in ("name", "uuid", "creation_time"):
        if required not in fields:
            raise SubvolumeInfoParseFailed(f"`{required}` must be initialized")

    return Subvolume(
        name=fields["name"],  # type: ignore[arg-type]
        uuid=fields["uuid"],  # type: ignore[arg-type]
        creation_time=fields["creation_time"],  # type: ignore[arg-type]
        snapshots=snapshots,
    )


def get_subvol(subvol_path: str | PathLike[str]) -> Subvolume:
    """Run ``btrfs subvolume show`` on a path and parse its output."""
    try:
        result = subprocess.run(
            ["btrfs", "subvolume", "show", str(subvol_path)],
            capture_output=True,
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
        raise SubvolumeError()

    return parse_subvolume_info(stdout)