"""
Sessions API Endpoints.

Lets the session layer drop a session's cached agent, for example after the
session switches repository or branch.
"""

from fastapi import APIRouter

from taskgate.server.schemas import SessionAgentDropped
from taskgate.server.services.deps import JobManagerDep

router = APIRouter()


@router.delete(
    "/{session_id}/agent",
    response_model=SessionAgentDropped,
    summary="Drop Session Agent",
    description="Discard the cached agent of a session so its next job starts a fresh conversation.",
)
async def drop_session_agent(session_id: str, manager: JobManagerDep):
    removed = await manager.invalidate_session(session_id)
    return SessionAgentDropped(session_id=session_id, removed=removed)
