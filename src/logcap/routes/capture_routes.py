"""
Routes for log capture sessions.

Provides:
- POST /captures                     start a capture
- POST /captures/{session_id}/stop   stop a capture and return its content
- GET  /captures                     list active captures
"""

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from logcap.capture.errors import InvalidCaptureRequest, SessionNotFound
from logcap.capture.models import (
    CaptureErrorResponse,
    SessionInfo,
    SessionListResponse,
    StartCaptureRequest,
    StartCaptureResponse,
    StopCaptureRequest,
    StopCaptureResponse,
)
from logcap.capture.tools import start_log_capture, stop_log_capture
from logcap.logger import get_logger

logger = get_logger(__name__)

_ERROR_STATUS = {
    InvalidCaptureRequest.kind: 400,
    SessionNotFound.kind: 404,
}


def _get_controller(request: Request):
    """Get CaptureController from app state."""
    app = getattr(request, "app", None)
    if app is None:
        return None
    return getattr(app.state, "capture_controller", None)


def _not_initialized() -> JSONResponse:
    return JSONResponse({"error": "Capture system not initialized"}, status_code=503)


def _error_response(result: dict) -> JSONResponse:
    body = CaptureErrorResponse(**result)
    return JSONResponse(
        body.model_dump(mode="json"),
        status_code=_ERROR_STATUS.get(body.kind, 500),
    )


async def start_capture(request: Request) -> JSONResponse:
    """
    POST /captures — Start a capture session.

    Body: {"target_kind": "simulator", "target_id": "...", "bundle_id": "...",
           "capture_mode": "structured-only", "subsystem_filter": "app"}
    """
    controller = _get_controller(request)
    if not controller:
        return _not_initialized()

    try:
        body = await request.json()
        start_req = StartCaptureRequest(**body)
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except Exception:
        return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

    result = await start_log_capture(
        controller,
        start_req.target_kind,
        start_req.target_id,
        start_req.bundle_id,
        capture_mode=start_req.capture_mode,
        subsystem_filter=start_req.subsystem_filter,
        launch_args=start_req.launch_args,
    )
    if "error" in result:
        return _error_response(result)

    resp = StartCaptureResponse(**result)
    return JSONResponse(resp.model_dump(mode="json"))


async def stop_capture(request: Request) -> JSONResponse:
    """
    POST /captures/{session_id}/stop — Stop a capture and return its log content.

    Body (optional): {"target_kind": "device"}
    """
    controller = _get_controller(request)
    if not controller:
        return _not_initialized()

    session_id = request.path_params.get("session_id", "")

    try:
        raw = await request.body()
        stop_req = StopCaptureRequest(**(await request.json())) if raw else StopCaptureRequest()
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except Exception:
        return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

    result = await stop_log_capture(
        controller, session_id, target_kind=stop_req.target_kind
    )
    if "error" in result:
        return _error_response(result)

    resp = StopCaptureResponse(**result)
    return JSONResponse(resp.model_dump(mode="json"))


async def list_captures(request: Request) -> JSONResponse:
    """GET /captures — List active capture sessions."""
    controller = _get_controller(request)
    if not controller:
        return JSONResponse({"sessions": [], "error": "Capture system not initialized"})

    sessions = controller.list_sessions()
    resp = SessionListResponse(
        sessions=[SessionInfo(**s) for s in sessions],
        count=len(sessions),
    )
    return JSONResponse(resp.model_dump(mode="json"))
