from __future__ import annotations

import secrets
import threading

from resume_builder.core.errors import NotFoundError
from resume_builder.schemas.resume import ResumeDocument

_PDF_STUB = b"%PDF-1.4\n% resume placeholder\n%%EOF\n"


class InMemoryResumeGateway:
    """Process-local resume store used for development and tests."""

    def __init__(self, documents: dict[str, ResumeDocument] | None = None):
        self._documents: dict[str, ResumeDocument] = dict(documents or {})
        self._lock = threading.Lock()
        self.calls: list[tuple[str, str | None]] = []

    def _get(self, resume_id: str) -> ResumeDocument:
        document = self._documents.get(resume_id)
        if document is None:
            raise NotFoundError("Resume not found")
        return document

    async def fetch_by_id(self, resume_id: str) -> ResumeDocument:
        self.calls.append(("fetch_by_id", resume_id))
        with self._lock:
            return self._get(resume_id).model_copy(deep=True)

    async def create(self, document: ResumeDocument) -> str:
        self.calls.append(("create", None))
        resume_id = secrets.token_hex(12)
        with self._lock:
            self._documents[resume_id] = document.model_copy(update={"id": resume_id}, deep=True)
        return resume_id

    async def update(self, resume_id: str, document: ResumeDocument) -> None:
        self.calls.append(("update", resume_id))
        with self._lock:
            self._get(resume_id)
            self._documents[resume_id] = document.model_copy(update={"id": resume_id}, deep=True)

    async def list_resumes(self) -> list[ResumeDocument]:
        self.calls.append(("list_resumes", None))
        with self._lock:
            return [document.model_copy(deep=True) for document in self._documents.values()]

    async def delete(self, resume_id: str) -> None:
        self.calls.append(("delete", resume_id))
        with self._lock:
            self._get(resume_id)
            del self._documents[resume_id]

    async def download_pdf(self, resume_id: str) -> bytes:
        self.calls.append(("download_pdf", resume_id))
        with self._lock:
            self._get(resume_id)
        return _PDF_STUB
