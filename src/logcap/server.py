"""
Starlette-based web server for logcap.

This server provides a REST API with the following endpoints:
- /captures: Start a capture session (POST) or list active sessions (GET)
- /captures/{session_id}/stop: Stop a session and return its captured logs
- /health: Service status

One SessionRegistry and CaptureController are created per application at
startup and kept on app.state.
"""

import contextlib
import os
import sys

from dotenv import load_dotenv
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Route

from logcap.capture.controller import CaptureController
from logcap.capture.registry import SessionRegistry
from logcap.config import CONFIG, PROJECT_DIR
from logcap.logger import get_logger, setup_logging
from logcap.routes.capture_routes import list_captures, start_capture, stop_capture
from logcap.routes.health_routes import health_check

logger = get_logger(__name__)


def build_controller() -> CaptureController:
    """Create the capture controller with a fresh registry."""
    return CaptureController(SessionRegistry())


def create_app(
    controller: CaptureController | None = None,
    cors_origins: list[str] | None = None,
) -> Starlette:
    """
    Build the Starlette application.

    Args:
        controller: Pre-built controller (tests inject one with a fake
            launcher). A new one is created at startup when omitted.
        cors_origins: Browser origins allowed cross-origin access. Defaults
            to CONFIG.cors_origins; no CORS middleware is installed when empty.
    """
    origins = CONFIG.cors_origins if cors_origins is None else cors_origins
    middleware = []
    if origins:
        middleware.append(
            Middleware(
                CORSMiddleware,
                allow_origins=origins,
                allow_methods=["GET", "POST"],
                allow_headers=["Content-Type"],
            )
        )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        logger.info("Application startup - initializing capture system")
        if getattr(app.state, "capture_controller", None) is None:
            app.state.capture_controller = build_controller()
        logger.info(
            f"Capture system initialized (temp dir: "
            f"{app.state.capture_controller.store.temp_dir})"
        )
        try:
            yield
        finally:
            logger.info("Application shutdown - stopping capture processes")
            try:
                await app.state.capture_controller.shutdown()
            except Exception as e:
                logger.error(f"Error shutting down capture controller: {e}")

    app = Starlette(
        debug=os.getenv("LOG_LEVEL", "INFO").upper() == "DEBUG",
        routes=[
            Route("/health", health_check, methods=["GET"]),
            Route("/captures", list_captures, methods=["GET"]),
            Route("/captures", start_capture, methods=["POST"]),
            Route("/captures/{session_id}/stop", stop_capture, methods=["POST"]),
        ],
        middleware=middleware,
        lifespan=lifespan,
    )
    app.state.capture_controller = controller
    return app


app = create_app()


def main(host: str | None = None, port: int | None = None, debug: bool = False):
    """Run the server with uvicorn."""
    import uvicorn

    load_dotenv(PROJECT_DIR / ".env")
    CONFIG.reload()

    if debug or "--debug" in sys.argv:
        os.environ["LOG_LEVEL"] = "DEBUG"

    log_level = os.getenv("LOG_LEVEL", "INFO")
    setup_logging(level=log_level, log_file=os.getenv("LOG_FILE"))

    host = host or CONFIG.host
    port = port or CONFIG.port
    logger.info(f"Starting logcap server on http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level=log_level.lower())


if __name__ == "__main__":
    main()
