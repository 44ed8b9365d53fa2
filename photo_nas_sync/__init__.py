"""Sync a local media directory to a NAS over rsync and SSH."""

__version__ = "0.1.0"
