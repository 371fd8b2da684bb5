"""Errors raised while creating, inspecting and cleaning snapshots."""

from __future__ import annotations


class ApplicationError(Exception):
    """Base class for every failure the tool reports.

    Subclasses name the values they carry in ``fields``; these are stored as
    attributes and substituted into ``message``.
    """

    message = "Application error"
    fields: tuple[str, ...] = ()

    def __init__(self, *values: object) -> None:
        if self.fields:
            if len(values) != len(self.fields):
                raise TypeError(f"{type(self).__name__} expects {', '.join(self.fields)}")
            params = dict(zip(self.fields, values))
            self.__dict__.update(params)
            text = self.message.format(**params)
        elif len(values) > 1:
            raise TypeError(f"{type(self).__name__} takes at most one message")
        else:
            text = str(values[0]) if values and values[0] is not None else self.message
        super().__init__(text)


class MountPointNotDir(ApplicationError):
    """The mount point given on the command line is not a directory."""

    message = 'The given mount point "{path}" is not a directory'
    fields = ("path",)


class FailedToSpawnCmd(ApplicationError):
    """The btrfs command could not be started."""

    message = "Failed to run btrfs command. {error}"
    fields = ("error",)


class SubvolumeError(ApplicationError):
    """The btrfs command reported a failure."""

    message = "Failed to query the given subvolume"


class PrefixInferenceFailed(ApplicationError):
    """No snapshot prefix was given and none could be derived."""

    message = "Could not infer snapshot prefix, specify it with --prefix <PREFIX>"


class SubvolumeInfoParseFailed(ApplicationError):
    """The output of `btrfs subvolume show` lacked a required field."""

    message = "Failed to parse subvolume information\n{detail}"
    fields = ("detail",)


class SubvolumeDeletionFailed(ApplicationError):
    """Removing an old snapshot failed."""

    message = "Failed to delete older subvolume"


class CreationTimeParseFailed(ApplicationError):
    """The creation time of a subvolume could not be parsed."""

    message = 'Failed to parse subvolume creation time "{text}" : {reason}'
    fields = ("reason", "text")


class SnapshotDirCreateFail(ApplicationError):
    """The snapshot directory could not be created."""

    message = "Failed to create snapshot directory\n{error}"
    fields = ("error",)


class InvalidSnapshotDir(ApplicationError):
    """The snapshot path exists but is not a directory."""

    message = "The specified snapshot path {path} is not a directory!"
    fields = ("path",)


class SnapshotAlreadyExists(ApplicationError):
    """A file with the snapshot's name already exists."""

    message = "File with same name {path} already exists"
    fields = ("path",)


class NoCleaningArg(ApplicationError):
    """Cleaning was requested without any retention rule."""

    message = "Atleast one of --keep-count or --keep-since is required for cleaning"


class TimeOutOfRange(ApplicationError):
    """A retention interval does not fit into the date range."""

    message = "Time interval too big to work with"