"""Command-line interface for photo-nas-sync."""
