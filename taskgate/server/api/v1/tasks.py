"""
Tasks API Endpoints.

This module exposes the job engine over HTTP: submitting tasks, inspecting
jobs, and resolving approvals for jobs paused before a dangerous tool call.
"""

from typing import List

from fastapi import APIRouter, HTTPException, status

from taskgate.engine.schemas import Job, JobType
from taskgate.server.schemas import (
    ApprovalResolved,
    ApprovalSubmit,
    TaskAccepted,
    TaskCreate,
)
from taskgate.server.services.deps import JobManagerDep

router = APIRouter()


@router.post(
    "",
    response_model=TaskAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit Task",
    description="Queue a new execute_command job.",
    response_description="The queued job id and status.",
)
async def create_task(task: TaskCreate, manager: JobManagerDep):
    """
    Submit a task.

    The job starts in ``pending`` and runs when the worker reaches it.
    """
    payload = task.model_dump(exclude_none=True)
    job = await manager.create_job(JobType.execute_command.value, payload)
    return TaskAccepted(job_id=job.id, status=job.status)


@router.get(
    "",
    response_model=List[Job],
    summary="List Tasks",
    description="Retrieve every job, oldest first.",
)
async def list_tasks(manager: JobManagerDep):
    return manager.list_jobs()


@router.get(
    "/active",
    response_model=List[Job],
    summary="List Active Tasks",
    description="Retrieve jobs that are pending, running, or waiting for approval.",
)
async def list_active_tasks(manager: JobManagerDep):
    return manager.get_active_jobs()


@router.get(
    "/history",
    response_model=List[Job],
    summary="List Finished Tasks",
    description="Retrieve jobs that have completed or failed.",
)
async def list_finished_tasks(manager: JobManagerDep):
    return manager.get_completed_jobs()


@router.get(
    "/{job_id}",
    response_model=Job,
    summary="Get Task",
    description="Retrieve a job with its logs and transcript.",
    responses={404: {"description": "Job not found"}},
)
async def get_task(job_id: str, manager: JobManagerDep):
    job = manager.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.post(
    "/{job_id}/approval",
    response_model=ApprovalResolved,
    summary="Resolve Approval",
    description="Approve or reject the pending approval request of a paused job.",
    responses={404: {"description": "Approval not found or already resolved"}},
)
async def resolve_approval(job_id: str, submission: ApprovalSubmit, manager: JobManagerDep):
    """
    Resolve an approval.

    Approving moves the job to the front of the queue; rejecting fails it.
    """
    resolved = await manager.resolve_approval(job_id, submission.approval_id, submission.approved)
    if not resolved:
        raise HTTPException(status_code=404, detail="Approval not found or already resolved")
    job = manager.get_job(job_id)
    return ApprovalResolved(job_id=job_id, status=job.status)
