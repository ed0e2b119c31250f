"""Job store package.

``build_job_store`` selects an implementation from a URL:

- ``file://<path>``: ``JsonFileJobStore`` (relative paths are relative to the
  working directory).
- any other URL: ``SqlJobStore`` over SQLAlchemy's async engine.
"""

from .base import BaseJobStore, recover_interrupted
from .file import JsonFileJobStore
from .interfaces import JobStore
from .sql import SqlJobStore

FILE_URL_PREFIX = "file://"


def build_job_store(url: str) -> JobStore:
    if url.startswith(FILE_URL_PREFIX):
        return JsonFileJobStore(url[len(FILE_URL_PREFIX) :])
    return SqlJobStore.from_url(url)


__all__ = [
    "BaseJobStore",
    "JobStore",
    "JsonFileJobStore",
    "SqlJobStore",
    "build_job_store",
    "recover_interrupted",
]
