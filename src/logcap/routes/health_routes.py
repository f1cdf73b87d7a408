"""
Health check endpoint.
"""
import sys
import time
from datetime import datetime

from starlette.requests import Request
from starlette.responses import JSONResponse

start_time = time.time()


async def health_check(request: Request) -> JSONResponse:
    """
    Basic health check endpoint.

    Returns 200 if service is running.
    """
    controller = getattr(request.app.state, "capture_controller", None)
    return JSONResponse({
        "status": "healthy" if controller else "starting",
        "timestamp": datetime.now().isoformat(),
        "uptime_seconds": int(time.time() - start_time),
        "platform": sys.platform,
        "active_sessions": len(controller.registry) if controller else 0,
    })
