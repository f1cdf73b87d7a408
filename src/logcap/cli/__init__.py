"""
logcap command line.

Commands are grouped by module:
- main:    serve, doctor
- capture: start, stop, list (talk to a running server over HTTP)
"""

import typer

from logcap import __version__
from logcap.cli.capture import capture_app
from logcap.cli.main import configure_logging, load_environment, register_commands

app = typer.Typer(help="logcap - simulator and device log capture")


def _print_version(value: bool):
    if value:
        typer.echo(f"logcap {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show the version and exit",
    ),
):
    """
    Capture simulator and device logs into files you can read back later.
    """
    configure_logging(verbose)
    load_environment()


register_commands(app)
app.add_typer(capture_app, name="capture")

if __name__ == "__main__":
    app()
