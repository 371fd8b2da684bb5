"""Create Btrfs snapshots with timestamped names and clean out old ones."""

__version__ = "0.1.5"