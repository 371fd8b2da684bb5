# btrfs-simple-snapshot

Create Btrfs snapshots of a subvolume with timestamped names, and clean out
old ones by count or by age.

The tool runs the `btrfs` command (`btrfs subvolume show`, `snapshot` and
`delete`), so `btrfs-progs` must be installed. Most operations need root.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

Subvolume and snapshot paths are taken relative to the mount point of the
Btrfs filesystem (an absolute path is used as given).

### Take a snapshot

```
btrfs-simple-snapshot snapshot /mnt/pool @home
```

This creates a snapshot such as `/mnt/pool/.snapshots/@home-2024-05-01-12.00.00`.

Options:

- `-p, --snapshot-path PATH`: directory that holds snapshots (default `.snapshots`); it is created if missing, and it is an error if it exists but is not a directory
- `-r, --readonly`: make the snapshot read-only
- `--prefix PREFIX`: snapshot name prefix (default: the subvolume's name)
- `-f, --suffix-format FORMAT`: strftime format for the date suffix (default `%Y-%m-%d-%H.%M.%S`); `/` is replaced with `-`, and an empty suffix leaves the name as the bare prefix
- `-c, --keep-count N` and `-s, --keep-since DURATION`: clean old snapshots right after taking the new one, with the same rules as `clean`

The command fails if a file with the snapshot's name already exists.

### Clean old snapshots

```
btrfs-simple-snapshot clean /mnt/pool @home --keep-count 10
btrfs-simple-snapshot clean /mnt/pool @home --keep-since "2w 3d"
```

At least one of `--keep-count` or `--keep-since` is required. Only snapshots
of the subvolume that lie under the snapshot path (`-p`, default `.snapshots`)
are considered; snapshots that cannot be queried are skipped.

Snapshots are ordered newest first by creation time:

- with `--keep-count` alone, the newest N are kept and the rest deleted;
- with `--keep-since`, every snapshot younger than the interval is kept, even
  if there are more of them than `--keep-count`;
- with both, at least the newest N are kept as well, and nothing is deleted
  when there are no more than N snapshots.

`--keep-since` accepts durations such as `5d`, `6h 30m`, `1y`, `5M 1w`. Units
include `s`, `m`/`min`, `h`, `d`, `w`, `M`/`month` (30.44 days) and
`y`/`year` (365.25 days), as well as `ms`, `us` and `ns`.

### Shell completions

```
btrfs-simple-snapshot completions bash > /etc/bash_completion.d/btrfs-simple-snapshot
```

Supported shells: `bash`, `elvish`, `fish`, `powershell`, `zsh`.

### Other options

- `--verbose` (on any command): log each step to standard error; without it
  only errors are shown
- `-V, --version`: print the version

The command exits with status 1 when an operation fails.

## Use from Python

The building blocks can be used directly:

- `btrfs_simple_snapshot.duration.parse_duration(text)` returns a `timedelta`
- `btrfs_simple_snapshot.subvolume.parse_subvolume_info(text)` parses the
  output of `btrfs subvolume show` into a `Subvolume` (name, uuid,
  creation_time, snapshots); `get_subvol(path)` runs the command and parses it
- `btrfs_simple_snapshot.clean.cleaning_job(snapshots, CleaningOptions(...), now)`
  applies the retention rules to `(path, Subvolume)` pairs
- errors are subclasses of `btrfs_simple_snapshot.errors.ApplicationError`

## What it does not do

The tool takes and cleans snapshots only when it is run; it has no scheduler
of its own. Run it from cron or a systemd timer for regular snapshots.