"""
Top-level CLI commands: serve, doctor.
"""

import asyncio
import os
import sys

import typer

from logcap.capture.executor import execute

IS_MACOS = sys.platform == "darwin"

# name -> (argv, hint shown when the check fails)
DOCTOR_CHECKS = {
    "xcrun": (["xcrun", "--version"], "Install Xcode Command Line Tools"),
    "simctl": (["xcrun", "simctl", "help"], "Needed for simulator capture"),
    "devicectl": (
        ["xcrun", "devicectl", "--version"],
        "Needed for device capture (Xcode 15+)",
    ),
}


def configure_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    from logcap.logger import setup_logging

    log_level = "DEBUG" if verbose else "WARNING"
    setup_logging(level=log_level)

    if not verbose:
        os.environ["LOGURU_LEVEL"] = "WARNING"


def load_environment():
    """Load .env from the project and working directories, then re-read CONFIG."""
    from dotenv import load_dotenv

    from logcap.config import CONFIG, PROJECT_DIR

    load_dotenv(PROJECT_DIR / ".env")
    load_dotenv()
    CONFIG.reload()


async def run_checks(checks: dict = None) -> dict:
    """Run each doctor check and return name -> CommandResult."""
    checks = checks or DOCTOR_CHECKS
    results = {}
    for name, (argv, _hint) in checks.items():
        results[name] = await execute(argv, f"{name} check", timeout=15.0)
    return results


def register_commands(app: typer.Typer):
    """Register top-level commands onto the app."""

    @app.command()
    def serve(
        host: str = typer.Option(None, help="Host to bind to"),
        port: int = typer.Option(None, help="Port to bind to"),
        debug: bool = typer.Option(False, "--debug", help="Run in debug mode"),
    ):
        """Start the logcap server."""
        from logcap.server import main as run_server

        typer.echo("🚀 Starting logcap server...")
        try:
            run_server(host=host, port=port, debug=debug)
        except KeyboardInterrupt:
            typer.echo("\n🛑 Server stopped.")

    @app.command()
    def doctor():
        """Check that the platform capture tools are installed."""
        typer.echo("🩺 Checking capture tooling...")

        if not IS_MACOS:
            typer.echo(
                f"⚠️  Running on {sys.platform}; simulator and device capture need macOS."
            )

        results = asyncio.run(run_checks())

        all_ok = True
        for name, result in results.items():
            if result.success:
                first_line = (result.output.strip().splitlines() or ["ok"])[0]
                typer.echo(f"  ✅ {name}: {first_line}")
            else:
                all_ok = False
                hint = DOCTOR_CHECKS[name][1]
                typer.echo(f"  ❌ {name}: {result.error} ({hint})")

        if all_ok:
            typer.echo("\n✨ All checks passed.")
        else:
            typer.echo("\n⚠️  Some checks failed.")
            raise typer.Exit(code=1)
