"""
Health Check Endpoints.

This module provides basic system status endpoints (health, version)
used for monitoring and deployment verification.
"""

from fastapi import APIRouter

from taskgate import __version__
from taskgate.server.services.deps import JobManagerDep

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server and its worker.",
    response_description="Status object.",
)
async def health_check(manager: JobManagerDep):
    """
    Health check endpoint.

    Reports whether the worker loop is running and how many jobs are queued.
    """
    return {
        "status": "ok",
        "worker_running": manager.is_running,
        "queued": len(manager.queued_job_ids()),
    }


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    return {"version": __version__, "schema_version": "v1"}
