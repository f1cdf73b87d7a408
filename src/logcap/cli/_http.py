"""
Shared HTTP helpers for CLI commands that talk to the running server.
"""

import os

import typer

NOT_RUNNING = "❌ Cannot connect to logcap server. Is it running? (logcap serve)"


def get_server_url() -> str:
    """LOGCAP_SERVER_URL if set, else the configured host and port."""
    from logcap.config import CONFIG

    explicit = os.getenv("LOGCAP_SERVER_URL")
    if explicit:
        return explicit.rstrip("/")

    host = CONFIG.host
    if host in ("0.0.0.0", "::"):
        host = "localhost"
    return f"http://{host}:{CONFIG.port}"


def _error_detail(e) -> str:
    """Prefer the server's agent-facing message over the raw status line."""
    try:
        body = e.response.json()
    except ValueError:
        return str(e)
    return body.get("message") or body.get("error") or str(e)


def _request(method: str, path: str, data: dict = None, timeout: float = 10.0) -> dict:
    import httpx

    url = f"{get_server_url()}{path}"
    try:
        resp = httpx.request(method, url, json=data, timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except httpx.ConnectError:
        typer.echo(NOT_RUNNING)
        raise typer.Exit(code=1)
    except httpx.HTTPStatusError as e:
        typer.echo(f"❌ {_error_detail(e)}")
        raise typer.Exit(code=1)
    except httpx.HTTPError as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)


def _http_get(path: str) -> dict:
    """Make a GET request to the running server."""
    return _request("GET", path)


def _http_post(path: str, data: dict = None) -> dict:
    """Make a POST request to the running server."""
    return _request("POST", path, data or {}, timeout=30.0)
