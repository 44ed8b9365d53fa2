"""Timestamped, colored log lines for the terminal.

Every line starts with the wall-clock time and a one-letter level label:

    14:02:11.348 I Using password file: ./password-file
    14:02:11.349 W Test mode! No actual changes to the files would be made.

Colors are applied with typer.style and can be switched off, which is
what tests do to capture plain text.
"""

from collections.abc import Callable
from datetime import datetime
from functools import partial

import typer

# Receives one fully formatted line, without trailing newline
Writer = Callable[[str], None]

_echo_err = partial(typer.echo, err=True)


def format_elapsed(seconds: float) -> str:
    """Format a duration as HH:MM:SS.

    Hours are not wrapped at 24, so a 25 hour run prints 25:00:00.
    """
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


class Logger:
    """Writes leveled log lines through a writer callable.

    Example:
        log = Logger(debug=True)
        log.debug("SSH_PORT: 22")
        log.warn("Script canceled with CTRL+C")

        lines = []
        log = Logger(writer=lines.append, err_writer=lines.append, color=False)
    """

    def __init__(
        self,
        writer: Writer = typer.echo,
        err_writer: Writer = _echo_err,
        *,
        color: bool = True,
        debug: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the logger.

        Args:
            writer: Callable receiving each formatted line.
            err_writer: Callable receiving error and failure lines, stderr
                        by default.
            color: Apply ANSI styles. typer.echo still strips them when
                   stdout is not a terminal.
            debug: Emit debug() lines; they are dropped otherwise.
            clock: Source of the timestamp, replaceable in tests.
        """
        self._writer = writer
        self._err_writer = err_writer
        self._color = color
        self._clock = clock
        self.debug_enabled = debug

    def _style(self, text: str, **styles) -> str:
        if not self._color:
            return text
        return typer.style(text, **styles)

    def _log(self, *parts: str, err: bool = False) -> None:
        timestamp = self._clock().strftime("%H:%M:%S.%f")[:-3]
        writer = self._err_writer if err else self._writer
        writer(" ".join((timestamp, *parts)))

    def debug(self, message: str) -> None:
        if not self.debug_enabled:
            return
        self._log(
            self._style("D", fg=typer.colors.WHITE, dim=True),
            self._style(message, fg=typer.colors.WHITE, dim=True),
        )

    def info(self, message: str) -> None:
        self._log(self._style("I", fg=typer.colors.WHITE, bold=True), message)

    def warn(self, message: str) -> None:
        self._log(
            self._style("W", fg=typer.colors.YELLOW, bold=True),
            self._style(message, fg=typer.colors.YELLOW),
        )

    def error(self, message: str) -> None:
        self._log(
            self._style("E", fg=typer.colors.RED, bold=True),
            self._style(message, fg=typer.colors.RED),
            err=True,
        )

    def success(self, message: str) -> None:
        """Log an unlabelled green line."""
        self._log(self._style(message, fg=typer.colors.GREEN))

    def failure(self, message: str) -> None:
        """Log an unlabelled red line."""
        self._log(self._style(message, fg=typer.colors.RED), err=True)
