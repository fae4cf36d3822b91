"""Session router: login by display name, logout, current identity."""

from fastapi import APIRouter

from tutor_reports.config import Settings
from tutor_reports.dependencies import DbSession, SessionStateDep, SettingsDep, WorkflowDep
from tutor_reports.roles import resolve_viewer
from tutor_reports.schemas.session import LoginRequest, SessionResponse

router = APIRouter()


def _session_response(identity: str | None, settings: Settings) -> SessionResponse:
    if identity is None:
        return SessionResponse(logged_in=False)
    viewer = resolve_viewer(identity, settings)
    return SessionResponse(logged_in=True, identity=identity, privileged=viewer.privileged)


@router.get("/session", response_model=SessionResponse)
async def get_session(session_state: SessionStateDep, settings: SettingsDep) -> SessionResponse:
    """Current identity, if any."""
    return _session_response(session_state.identity, settings)


@router.post("/session/login", response_model=SessionResponse)
async def login(
    request: LoginRequest,
    db: DbSession,
    session_state: SessionStateDep,
    settings: SettingsDep,
) -> SessionResponse:
    """Accept a bare display name as identity. No verification is performed."""
    identity = await session_state.login(db, request.name)
    return _session_response(identity, settings)


@router.post("/session/logout", response_model=SessionResponse)
async def logout(
    db: DbSession,
    session_state: SessionStateDep,
    workflow: WorkflowDep,
) -> SessionResponse:
    """Clear the identity and drop any in-flight worksheet image."""
    await session_state.logout(db)
    workflow.reset()
    return SessionResponse(logged_in=False)
