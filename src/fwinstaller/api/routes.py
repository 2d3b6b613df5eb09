"""API route handlers for the firmware installer."""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from fwinstaller.api.models import (
    AcknowledgeRequest,
    CommandResponse,
    ConfirmRequest,
    DeleteSourceRequest,
    InstallRequest,
    ProgressResponse,
)
from fwinstaller.errors import InvalidState, SelectionError, SessionBusy
from fwinstaller.models.status import OutcomeEnum, PhaseEnum
from fwinstaller.services.controller import InstallController
from fwinstaller.services.selection import PathFileSelector

router = APIRouter(prefix="/api/v1.0")


def get_controller(request: Request) -> InstallController:
    """Controller created in the application lifespan."""
    return request.app.state.controller


def _command_result(
    controller: InstallController, code: int = 200, msg: str = "success"
) -> CommandResponse:
    snapshot = controller.session.snapshot()
    return CommandResponse(
        code=code, msg=msg, phase=snapshot.phase, progress=snapshot.progress
    )


def _error_result(controller: InstallController, exc: Exception) -> CommandResponse:
    """Map installer errors to application codes (409 state, 400 selection)."""
    if isinstance(exc, SessionBusy):
        return _command_result(controller, 409, f"Installation already in progress: {exc}")
    if isinstance(exc, InvalidState):
        return _command_result(controller, 409, str(exc))
    return _command_result(controller, 400, f"Selection failed: {exc}")


@router.get("/progress", response_model=ProgressResponse)
def get_progress(controller: InstallController = Depends(get_controller)):
    """GET /api/v1.0/progress - Poll the install session.

    Response format (installing):
        {
            "code": 200,
            "msg": "success",
            "data": {"phase": "installing", "progress": 45, ...}
        }

    Response format (failed install):
        {
            "code": 500,
            "msg": "Install failed: EXTRACTION_FAILED: ...",
            "data": {"phase": "completed", "outcome": "failure", ...}
        }
    """
    snapshot = controller.status()
    if snapshot.outcome == OutcomeEnum.FAILURE:
        msg = f"Install failed: {snapshot.error}" if snapshot.error else "Install failed"
        return ProgressResponse(code=500, msg=msg, data=snapshot)
    return ProgressResponse(code=200, msg="success", data=snapshot)


@router.post("/install", response_model=CommandResponse)
def post_install(
    request: InstallRequest, controller: InstallController = Depends(get_controller)
):
    """POST /api/v1.0/install - Select a package and start installing it.

    Returns code 200 with phase "installing" (worker launched) or "idle"
    (cancelled), 400 on selection errors, 409 if the session is busy.
    """
    try:
        controller.start(PathFileSelector(request.package_path))
    except (InvalidState, SelectionError) as e:
        return _error_result(controller, e)
    return _command_result(controller)


@router.post("/select", response_model=CommandResponse)
def post_select(controller: InstallController = Depends(get_controller)):
    """POST /api/v1.0/select - Open a selection request."""
    try:
        controller.request_selection()
    except InvalidState as e:
        return _error_result(controller, e)
    return _command_result(controller)


@router.post("/confirm", response_model=CommandResponse)
def post_confirm(
    request: ConfirmRequest, controller: InstallController = Depends(get_controller)
):
    """POST /api/v1.0/confirm - Confirm the selected package and launch the worker."""
    try:
        controller.confirm(request.package_path)
    except (InvalidState, SelectionError) as e:
        return _error_result(controller, e)
    return _command_result(controller)


@router.post("/cancel", response_model=CommandResponse)
def post_cancel(controller: InstallController = Depends(get_controller)):
    """POST /api/v1.0/cancel - Abandon the selection request."""
    try:
        controller.cancel_selection()
    except InvalidState as e:
        return _error_result(controller, e)
    return _command_result(controller)


@router.put("/delete-source", response_model=CommandResponse)
def put_delete_source(
    request: DeleteSourceRequest,
    controller: InstallController = Depends(get_controller),
):
    """PUT /api/v1.0/delete-source - Toggle deleting the package on acknowledge."""
    try:
        controller.set_delete_source(request.enabled)
    except InvalidState as e:
        return _error_result(controller, e)
    return _command_result(controller)


@router.post("/acknowledge", response_model=CommandResponse)
def post_acknowledge(
    request: Optional[AcknowledgeRequest] = None,
    controller: InstallController = Depends(get_controller),
):
    """POST /api/v1.0/acknowledge - Dismiss the result and reset to idle."""
    try:
        if (
            request is not None
            and request.delete_source is not None
            and controller.session.phase == PhaseEnum.COMPLETED
        ):
            controller.set_delete_source(request.delete_source)
        controller.acknowledge()
    except InvalidState as e:
        return _error_result(controller, e)
    return _command_result(controller)
