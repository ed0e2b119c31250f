"""Job store interface contract.

The job manager depends on this Protocol instead of a concrete persistence
implementation.

Contract guidelines
-------------------

- All methods are async.
- ``save_all`` rewrites the complete job set; there are no partial updates.
- ``load_all`` never returns a job in the ``running`` state. A job persisted
  as ``running`` was interrupted by an unclean shutdown and is reported as
  ``failed`` instead.
- Implementations may raise from ``save_all``; callers decide whether a
  failed write is fatal.
"""

from typing import List, Protocol, Sequence

from ..schemas.domain import Job


class JobStore(Protocol):
    """Durable load/save of the full job set."""

    async def load_all(self) -> List[Job]:
        """
        Load every persisted job, applying crash recovery.

        Returns:
            The persisted jobs, in the order they were saved.
        """
        ...

    async def save_all(self, jobs: Sequence[Job]) -> None:
        """
        Durably replace the persisted job set.

        Args:
            jobs: The complete current set of jobs.
        """
        ...
