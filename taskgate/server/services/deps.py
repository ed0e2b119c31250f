"""
Job Manager Dependency.

Provides the singleton JobManager for API endpoints.
"""

from typing import Annotated

from fastapi import Depends

from taskgate.engine import JobManager
from taskgate.server.services.manager import get_job_manager

JobManagerDep = Annotated[JobManager, Depends(get_job_manager)]
