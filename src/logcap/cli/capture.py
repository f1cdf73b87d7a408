"""
CLI subcommands for log capture sessions.

Usage:
    logcap capture start --simulator <UUID> --bundle-id <ID> [--console] [--filter F]
    logcap capture start --device <UUID> --bundle-id <ID> [--arg A ...]
    logcap capture stop <SESSION_ID> [--output FILE]
    logcap capture list
"""

from pathlib import Path
from typing import Optional

import typer

from logcap.cli._http import _http_get, _http_post

capture_app = typer.Typer(help="Start, stop and list log capture sessions")


def _parse_filter(value: str):
    """'app' / 'all' / 'swiftui' pass through; anything else is a comma list."""
    if value in ("app", "all", "swiftui"):
        return value
    return [part.strip() for part in value.split(",") if part.strip()]


@capture_app.command("start")
def capture_start(
    bundle_id: str = typer.Option(..., "--bundle-id", "-b", help="App bundle identifier"),
    simulator: Optional[str] = typer.Option(None, "--simulator", "-s", help="Simulator UUID"),
    device: Optional[str] = typer.Option(None, "--device", "-d", help="Device UUID"),
    console: bool = typer.Option(
        False, "--console", help="Relaunch the app with console output attached (simulator)"
    ),
    subsystem_filter: str = typer.Option(
        "app", "--filter", "-f", help="app, all, swiftui, or comma-separated subsystems"
    ),
    args: list[str] = typer.Option(
        None, "--arg", help="Extra launch argument for the app (repeatable)"
    ),
):
    """Start capturing logs from a simulator or device."""
    if bool(simulator) == bool(device):
        typer.echo("❌ Pass exactly one of --simulator or --device.")
        raise typer.Exit(code=1)

    if device:
        payload = {"target_kind": "device", "target_id": device}
    else:
        payload = {
            "target_kind": "simulator",
            "target_id": simulator,
            "capture_mode": "console+structured" if console else "structured-only",
        }
    payload.update(
        {
            "bundle_id": bundle_id,
            "subsystem_filter": _parse_filter(subsystem_filter),
            "launch_args": args or [],
        }
    )

    data = _http_post("/captures", payload)
    typer.echo(data.get("message") or f"Session ID: {data['session_id']}")
    typer.echo(f"\n📄 Log file: {data['log_file_path']}")


@capture_app.command("stop")
def capture_stop(
    session_id: str = typer.Argument(help="Session ID returned by 'capture start'"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the captured logs to this file"
    ),
):
    """Stop a capture session and print (or save) its logs."""
    data = _http_post(f"/captures/{session_id}/stop")

    if output:
        output.write_text(data["log_content"], encoding="utf-8")
        typer.echo(f"✅ Session {session_id} stopped. Logs written to {output}")
        return

    typer.echo(data.get("message") or data["log_content"])


@capture_app.command("list")
def capture_list():
    """List active capture sessions."""
    data = _http_get("/captures")
    sessions = data.get("sessions", [])

    if not sessions:
        typer.echo("No active capture sessions.")
        return

    typer.echo(f"📡 Active captures ({len(sessions)}):\n")
    for session in sessions:
        status_icon = "🟢" if session.get("running") else "⚪"
        typer.echo(
            f"  {status_icon} {session['session_id']}\n"
            f"     {session['target_kind']}: {session['target_id']}\n"
            f"     Bundle: {session['bundle_id']} ({session['capture_mode']})\n"
            f"     File: {session['log_file_path']}\n"
        )
