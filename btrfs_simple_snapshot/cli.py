"""Command-line interface: snapshot, clean and shell completions."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from .clean import CleaningOptions, cleaning_job, collect_snapshots, handle_clean
from .duration import parse_duration
from .errors import ApplicationError, SnapshotAlreadyExists
from .paths import (
    get_subvol_wrapped,
    infer_prefix,
    make_absolute,
    snapshot_filename,
    verify_mount_path,
    verify_snapshot_path,
)
from .snapshot import btrfs_snapshot

log = logging.getLogger(__name__)

PROG = "btrfs-simple-snapshot"
SHELLS = ("bash", "elvish", "fish", "powershell", "zsh")
_VERSION = "0.1.5"
_HANDLER_NAME = "btrfs-simple-snapshot-console"
_VERBOSE_HELP = "Verbose output logging"
_COMMON = ["--verbose", "-h", "--help"]
_CLEANING_FLAGS = ["-c", "--keep-count", "-s", "--keep-since"]

# Words offered for completion, keyed by the subcommand already typed.
_WORDS = {
    "": ["completions", "snapshot", "clean", *_COMMON, "-V", "--version"],
    "completions": [*SHELLS, *_COMMON],
    "snapshot": [
        "-p", "--snapshot-path", "-r", "--readonly", "--prefix",
        "-f", "--suffix-format", *_CLEANING_FLAGS, *_COMMON,
    ],
    "clean": [*_CLEANING_FLAGS, "-p", "--snapshot-path", *_COMMON],
}
_COMMANDS = [name for name in _WORDS if name]


def _keep_count(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"count must not be negative: {text!r}")
    return value


def _keep_since(text: str):
    try:
        return parse_duration(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _add_subvolume_args(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("mount_point", type=Path, help="Mount point of btrfs filesystem")
    sub.add_argument(
        "subvol_path", type=Path, help="Path to subvolume to snapshot (relative to mount point)"
    )


def _add_cleaning_args(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "-c", "--keep-count", type=_keep_count, help="Minimum number of snapshots to preserve"
    )
    sub.add_argument(
        "-s",
        "--keep-since",
        type=_keep_since,
        help="Minimum age of snapshots to preserve; younger snapshots are never removed "
        "(takes precedence over --keep-count). Example: 5d, 6h 30m, 1y, 5M 1w",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog=PROG, description="Create and manage Btrfs snapshots automatically"
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {_VERSION}")
    parser.add_argument("--verbose", action="store_true", help=_VERBOSE_HELP)
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    def add(name: str, text: str) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, help=text, description=text)
        sub.add_argument(
            "--verbose", action="store_true", default=argparse.SUPPRESS, help=_VERBOSE_HELP
        )
        return sub

    completions = add("completions", "Generate shell completions file")
    completions.add_argument(
        "shell_completion", choices=SHELLS, help="Compatible shell for completions file"
    )

    snapshot = add("snapshot", "Create snapshots of subvolumes and optionally invoke cleaning")
    _add_subvolume_args(snapshot)
    snapshot.add_argument(
        "-p", "--snapshot-path", type=Path, default=Path(".snapshots"),
        help="Path in which snapshots are stored (relative to mount point)",
    )
    snapshot.add_argument("-r", "--readonly", action="store_true", help="Make snapshot readonly")
    snapshot.add_argument(
        "--prefix", type=Path, help="Prefix for snapshot name (defaults to subvolume name)"
    )
    snapshot.add_argument(
        "-f", "--suffix-format", default="%Y-%m-%d-%H.%M.%S",
        help="Datetime suffix format for snapshot name",
    )
    _add_cleaning_args(snapshot)

    clean = add(
        "clean",
        "Invoke the cleaning task of given subvolume snapshots; at least one of "
        "--keep-count or --keep-since must be provided",
    )
    _add_subvolume_args(clean)
    _add_cleaning_args(clean)
    clean.add_argument(
        "-p", "--snapshot-path", type=Path, default=Path(".snapshots"),
        help="Limit clean task only to mentioned path (relative to mount point)",
    )
    return parser


def _quoted(words, sep: str = " ") -> str:
    return sep.join(f"'{word}'" for word in words)


def _bash_script() -> str:
    func = "_" + PROG.replace("-", "_")
    cases = "\n".join(f'        {k or chr(34) * 2}) opts="{" ".join(v)}" ;;' for k, v in _WORDS.items())
    return (
        f"{func}() {{\n"
        '    local cur="${COMP_WORDS[COMP_CWORD]}" cmd="" word opts\n'
        '    for word in "${COMP_WORDS[@]:1:COMP_CWORD-1}"; do\n'
        f'        case "$word" in {"|".join(_COMMANDS)}) cmd="$word"; break ;; esac\n'
        "    done\n"
        f'    case "$cmd" in\n{cases}\n    esac\n'
        '    COMPREPLY=( $(compgen -W "$opts" -- "$cur") )\n'
        "}\n"
        f"complete -o default -F {func} {PROG}\n"
    )


def _fish_script() -> str:
    lines = [f'complete -c {PROG} -n "__fish_use_subcommand" -f -a "{" ".join(_WORDS[""])}"']
    lines += [
        f'complete -c {PROG} -n "__fish_seen_subcommand_from {name}" -a "{" ".join(_WORDS[name])}"'
        for name in _COMMANDS
    ]
    return "\n".join(lines) + "\n"


def _zsh_script() -> str:
    func = "_" + PROG.replace("-", "_")
    cases = "\n".join(
        f"        {name}) compadd -- {' '.join(_WORDS[name])}; _files ;;" for name in _COMMANDS
    )
    return (
        f"#compdef {PROG}\n\n{func}() {{\n"
        f"    if (( CURRENT == 2 )); then compadd -- {' '.join(_WORDS[''])}; return; fi\n"
        f'    case "$words[2]" in\n{cases}\n    esac\n}}\n\n{func} "$@"\n'
    )


def _powershell_script() -> str:
    cases = "\n".join(f"        '{k}' {{ @({_quoted(v, ', ')}) }}" for k, v in _WORDS.items())
    return (
        f"Register-ArgumentCompleter -Native -CommandName '{PROG}' -ScriptBlock {{\n"
        "    param($wordToComplete, $commandAst, $cursorPosition)\n"
        "    $command = ''\n"
        "    foreach ($element in ($commandAst.CommandElements | Select-Object -Skip 1)) {\n"
        f"        if (@({_quoted(_COMMANDS, ', ')}) -contains $element.ToString()) "
        "{ $command = $element.ToString(); break }\n"
        "    }\n"
        f"    $candidates = switch ($command) {{\n{cases}\n    }}\n"
        '    $candidates | Where-Object { $_ -like "$wordToComplete*" } | ForEach-Object {\n'
        "        [System.Management.Automation.CompletionResult]::new($_, $_, 'ParameterValue', $_)\n"
        "    }\n}\n"
    )


def _elvish_script() -> str:
    entries = " ".join(f"&'{k}'=[{_quoted(v)}]" for k, v in _WORDS.items())
    return (
        f"set edit:completion:arg-completer[{PROG}] = {{|@words|\n"
        "    var command = ''\n"
        "    for word $words[1..] {\n"
        f"        if (has-value [{' '.join(_COMMANDS)}] $word) {{ set command = $word; break }}\n"
        "    }\n"
        f"    var candidates = [{entries}]\n"
        "    put $@candidates[$command]\n}\n"
    )


_GENERATORS = {
    "bash": _bash_script,
    "elvish": _elvish_script,
    "fish": _fish_script,
    "powershell": _powershell_script,
    "zsh": _zsh_script,
}


def completion_script(shell: str) -> str:
    """Return the completion script for one of the supported shells."""
    try:
        generator = _GENERATORS[shell]
    except KeyError:
        raise ValueError(f"unsupported shell {shell!r}") from None
    return generator()


def handle_snapshot(args: argparse.Namespace) -> None:
    """Create a snapshot as described by parsed ``snapshot`` arguments."""
    mount_point = Path(args.mount_point)
    subvol_path = make_absolute(mount_point, args.subvol_path)
    snapshot_path = make_absolute(mount_point, args.snapshot_path)

    if args.prefix is not None:
        prefix = Path(args.prefix)
    else:
        prefix = infer_prefix(subvol_path)
        log.info("Snapshot prefix inferred: %r", str(prefix))

    verify_mount_path(mount_point)
    verify_snapshot_path(snapshot_path)

    subvol = get_subvol_wrapped(subvol_path)

    now = datetime.now().astimezone()
    filename = snapshot_filename(prefix, args.suffix_format, now)
    snapshot_file = snapshot_path / filename
    log.info("Snapshot file: %r\nPath: %r", str(filename), str(snapshot_file))

    if snapshot_file.exists():
        raise SnapshotAlreadyExists(filename)

    btrfs_snapshot(subvol_path, snapshot_file, args.readonly)

    log.debug("Initiating removal of old snapshots")
    snapshots = collect_snapshots(subvol, mount_point, snapshot_path)

    options = CleaningOptions(args.keep_count, args.keep_since)
    if options.requested:
        cleaning_job(snapshots, options, now.replace(tzinfo=None))

    log.info("Program finished successfully")


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("btrfs_simple_snapshot")
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.ERROR)
    logger.propagate = False


def main(argv: list[str] | None = None) -> int:
    """Run the command line; returns the process exit status."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "completions":
        sys.stdout.write(completion_script(args.shell_completion))
        return 0

    try:
        if args.command == "snapshot":
            handle_snapshot(args)
        else:
            handle_clean(
                args.mount_point,
                args.subvol_path,
                args.snapshot_path,
                CleaningOptions(args.keep_count, args.keep_since),
            )
    except ApplicationError as exc:
        log.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())