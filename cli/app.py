from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from cli.config import InvalidDelimiterError, load_config
from cli.render import echo_error, render_report
from logging_config import configure_logging
from sources.base import SensorSourceError
from sources.factory import build_source

APP_NAME = "tmpsnread"
VERSION = "1.0.0"
COPYRIGHT_YEAR = "2015"
AUTHOR_NAME = "Ljubomir Kurij"
AUTHOR_MAIL = "<kurijlj@gmail.com>"

logger = logging.getLogger(__name__)


class Backend(str, Enum):
    libsensors = "libsensors"
    hwmon = "hwmon"


app = typer.Typer(
    help=(
        "Print temperature sensors data as delimited text.\n\n"
        "Reads temperature sensors data and prints it as comma separated values."
    ),
    epilog=f"Report bugs to: {AUTHOR_MAIL}",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


def version_text() -> str:
    return (
        f"{APP_NAME} {VERSION} Copyright (C) {COPYRIGHT_YEAR} {AUTHOR_NAME}.\n"
        "License GPLv3+: GNU GPL version 3 or later <http://gnu.org/licenses/gpl.html>\n"
        "This is free software: you are free to change and redistribute it.\n"
        "There is NO WARRANTY, to the extent permitted by law.\n"
    )


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(version_text())
    raise typer.Exit()


def _try_help(prog_name: str) -> None:
    typer.echo(f"Try '{prog_name} --help' for more information.\n", err=True)


@app.command()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Print version information and then exit.",
    ),
    fahrenheit: bool = typer.Option(
        False,
        "--fahrenheit",
        "-f",
        help="Show temperatures in degrees Fahrenheit.",
    ),
    delimiter: Optional[str] = typer.Option(
        None,
        "--delimiter",
        "-d",
        metavar="DELIM",
        help="Use DELIM instead of semicolon for field delimiter.",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config-file",
        "-c",
        metavar="CONFIG_FILE",
        help="Specify a libsensors config file.",
    ),
    backend: Optional[Backend] = typer.Option(
        None,
        "--backend",
        "-b",
        case_sensitive=False,
        help="Sensor source to read (defaults to TMPSNREAD_BACKEND env or libsensors).",
    ),
) -> None:
    """Print temperature sensors data as delimited text."""
    configure_logging()
    prog_name = ctx.find_root().info_name or APP_NAME

    try:
        config = load_config(
            delimiter=delimiter,
            fahrenheit=fahrenheit,
            config_file=config_file,
            backend=backend.value if backend is not None else None,
        )
    except InvalidDelimiterError:
        echo_error(prog_name, "the delimiter must be a single character")
        _try_help(prog_name)
        raise typer.Exit(code=1)

    if config.config_file is not None:
        try:
            with config.config_file.open("r"):
                pass
        except OSError as exc:
            logger.debug("config file not readable", exc_info=True, extra={"path": config.config_file})
            echo_error(prog_name, f"cannot open file : {config.config_file}\n")
            raise typer.Exit(code=1) from exc

    source = build_source(
        config.backend,
        config_file=config.config_file,
        hwmon_root=config.hwmon_root,
    )
    try:
        source.open()
    except SensorSourceError as exc:
        logger.debug(
            "sensor source initialization failed: %s",
            exc,
            extra={"backend": source.name, "config_file": config.config_file},
        )
        echo_error(prog_name, f"cannot initialize : {source.name}\n")
        raise typer.Exit(code=1) from exc
    ctx.call_on_close(source.close)

    render_report(source, config, prog_name)
