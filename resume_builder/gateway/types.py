from typing import Protocol

from resume_builder.schemas.resume import ResumeDocument


class ResumePersistenceGateway(Protocol):
    async def fetch_by_id(self, resume_id: str) -> ResumeDocument: ...

    async def create(self, document: ResumeDocument) -> str: ...

    async def update(self, resume_id: str, document: ResumeDocument) -> None: ...

    async def list_resumes(self) -> list[ResumeDocument]: ...

    async def delete(self, resume_id: str) -> None: ...

    async def download_pdf(self, resume_id: str) -> bytes: ...
