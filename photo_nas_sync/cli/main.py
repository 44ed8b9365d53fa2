"""Main CLI entry point for photo-nas-sync."""

import sys
import time
from typing import NoReturn

import typer
from typing_extensions import Annotated

from photo_nas_sync import __version__
from photo_nas_sync.config import (
    ConfigError,
    MissingOutputLocationError,
    load_config,
    resolve_config,
)
from photo_nas_sync.config.schema import SyncConfig, SyncOptions
from photo_nas_sync.console import Logger, format_elapsed
from photo_nas_sync.sync import SyncResult, SyncToolError, run_sync

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

# Elapsed time in the final status line is measured from here
_STARTED_AT = time.monotonic()


def _exception_base(name: str) -> type[Exception]:
    """Find a click exception class through typer.

    typer ships click's exceptions either re-exported or vendored, so the
    usage error bases are looked up on the class typer itself exports.
    """
    return next(cls for cls in typer.BadParameter.__mro__ if cls.__name__ == name)


# Bases of NoSuchOption, BadParameter, MissingParameter and friends
UsageError = _exception_base("UsageError")
CLIError = _exception_base("ClickException")

app = typer.Typer(
    name="photo-nas-sync",
    help="Sync desired directory with its NAS counterpart (rsync).",
    add_completion=False,
)


def _elapsed() -> str:
    return format_elapsed(time.monotonic() - _STARTED_AT)


def report_failure(log: Logger) -> int:
    """Log the final failure line and return the failure exit code.

    Every failure path ends here: bad arguments, missing output location,
    rsync errors and Ctrl+C.
    """
    log.failure(f"Script FAILED ({_elapsed()})")
    return EXIT_FAILURE


def exit_failure(log: Logger) -> NoReturn:
    raise typer.Exit(report_failure(log))


def exit_success(log: Logger) -> NoReturn:
    log.success(f"Script SUCCEEDED ({_elapsed()})")
    raise typer.Exit(EXIT_SUCCESS)


def report_canceled(log: Logger) -> int:
    """Handle Ctrl+C by going through the normal failure path."""
    log.warn("Script canceled with CTRL+C")
    return report_failure(log)


def exit_canceled(log: Logger) -> NoReturn:
    raise typer.Exit(report_canceled(log))


def report(result: SyncResult, log: Logger) -> NoReturn:
    """Exit with 0 if rsync succeeded, 1 otherwise."""
    if result.succeeded:
        exit_success(log)
    exit_failure(log)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"photo-nas-sync version {__version__}")
        raise typer.Exit()


def _resolve(ctx: typer.Context, options: SyncOptions, log: Logger) -> SyncConfig:
    """Build the SyncConfig, exiting through the failure path if invalid."""
    try:
        return resolve_config(options, load_config().get("defaults"), log)
    except MissingOutputLocationError as e:
        log.error(f"{e} Exit.")
        typer.echo(ctx.get_help())
        exit_failure(log)
    except ConfigError as e:
        log.error(str(e))
        exit_failure(log)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def sync(
    ctx: typer.Context,
    input: Annotated[
        str | None,
        typer.Option(
            "--input",
            "-i",
            metavar="LOCATION",
            help="Input location to copy all media files from. Default is the current directory.",
        ),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            metavar="LOCATION",
            help="Output location to store all media files to. Required.",
        ),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option(
            "--port",
            "-p",
            min=1,
            max=65535,
            metavar="PORT",
            help="SSH port to use. Default is 22.",
        ),
    ] = None,
    password_file: Annotated[
        str | None,
        typer.Option(
            "--password-file",
            "-f",
            metavar="FILE",
            help="File with user SSH password. Default is ./password-file.",
        ),
    ] = None,
    test: Annotated[
        bool,
        typer.Option(
            "--test",
            "-t",
            help="Test mode. No actual changes to the files would be made, planned changes are only printed.",
        ),
    ] = False,
    debug: Annotated[
        bool, typer.Option("--debug", "-d", help="Debug mode. Print all debug information.")
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version information.",
        ),
    ] = None,
):
    """Sync desired directory with its NAS counterpart (rsync).

    Runs rsync over SSH between the input and output locations. Files on
    the NAS that are newer than the local copy are left untouched.
    """
    log = Logger(debug=debug)
    options = SyncOptions(
        port=port,
        password_file=password_file,
        input=input,
        output=output,
        test=test,
        debug=debug,
    )

    try:
        config = _resolve(ctx, options, log)

        if config.test:
            log.warn("Test mode! No actual changes to the files would be made.")

        result = run_sync(config, log)
    except KeyboardInterrupt:
        exit_canceled(log)
    except SyncToolError as e:
        log.error(str(e))
        exit_failure(log)

    report(result, log)


def main(args: list[str] | None = None) -> NoReturn:
    """Entry point for the CLI.

    click reports usage errors with exit status 2; they are routed through
    the failure path here so that every failure exits with 1.
    """
    log = Logger()

    try:
        exit_code = app(args=args, prog_name="photo-nas-sync", standalone_mode=False)
    except UsageError as e:
        log.error(f"Unsupported script arguments: {e.format_message()}")
        if e.ctx is not None:
            typer.echo(e.ctx.get_help())
        exit_code = report_failure(log)
    except CLIError as e:
        log.error(e.format_message())
        exit_code = report_failure(log)
    except typer.Abort:
        # Ctrl+C outside of the sync command, e.g. while parsing
        exit_code = report_canceled(log)

    sys.exit(exit_code or EXIT_SUCCESS)


if __name__ == "__main__":
    main()
