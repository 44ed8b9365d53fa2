"""Data models for sync results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a single rsync invocation.

    Attributes:
        command: The argument list that was executed.
        returncode: Exit status of the process (sshpass or rsync).
    """

    command: list[str]
    returncode: int

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0
