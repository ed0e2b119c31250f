from typing import Protocol

from .schemas.domain import ChatMessage


class JobJournal(Protocol):
    """Append-only job mutations, each followed by a durable save."""

    async def add_log(self, job_id: str, message: str) -> None: ...

    async def add_message(self, job_id: str, message: ChatMessage) -> None: ...

    async def persist(self) -> None: ...
