"""
taskgate Server Package.

A thin FastAPI boundary over the job engine.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Settings and API constants.
    services: JobManager construction and the request dependency.
    exception_handlers: Global error handling.
"""
