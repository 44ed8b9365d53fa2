"""rsync invocation for photo-nas-sync.

Usage:
    from photo_nas_sync.sync import run_sync

    result = run_sync(config, log)
    if result.succeeded:
        ...
"""

from .models import SyncResult
from .rsync import (
    RsyncNotFoundError,
    SshpassNotFoundError,
    SyncToolError,
    build_command,
    run_sync,
)

__all__ = [
    "SyncResult",
    "SyncToolError",
    "RsyncNotFoundError",
    "SshpassNotFoundError",
    "build_command",
    "run_sync",
]
