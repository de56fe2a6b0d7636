from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from resume_builder.core.config import settings
from resume_builder.core.errors import GatewayError, NetworkError, NotFoundError, RemoteValidationError
from resume_builder.gateway.auth import AuthContext
from resume_builder.schemas.resume import ResumeDocument

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return default


def _raise_for_status(response: httpx.Response, default: str) -> None:
    status = response.status_code
    if status < 400:
        return
    message = _error_message(response, default)
    if status == 404:
        raise NotFoundError(message, status_code=status)
    if status in {400, 422}:
        raise RemoteValidationError(message, status_code=status)
    raise NetworkError(message, status_code=status)


def _extract_id(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    for key in ("_id", "id"):
        value = body.get(key)
        if value not in (None, ""):
            return str(value)
    for key in ("resume", "data"):
        nested = _extract_id(body.get(key))
        if nested:
            return nested
    return None


class HttpResumeGateway:
    """Talks to the remote resume API over HTTP."""

    def __init__(
        self,
        auth: AuthContext,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.auth = auth
        self.base_url = (base_url or settings.resume_api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.resume_api_timeout_s
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self.auth.headers(),
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, default_error: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("resume_api_transport_error method=%s path=%s error=%s", method, path, exc)
            raise NetworkError(default_error) from exc
        if response.status_code >= 400:
            logger.info("resume_api_error method=%s path=%s status=%s", method, path, response.status_code)
        _raise_for_status(response, default_error)
        return response

    @staticmethod
    def _json(response: httpx.Response, default_error: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise GatewayError(default_error, code="bad_response", status_code=response.status_code) from exc

    async def fetch_by_id(self, resume_id: str) -> ResumeDocument:
        default_error = "Failed to fetch resume"
        response = await self._request("GET", f"/resumes/by-id/{resume_id}", default_error)
        body = self._json(response, default_error)
        if isinstance(body, dict) and isinstance(body.get("data"), dict) and "personalDetails" not in body:
            body = body["data"]
        try:
            return ResumeDocument.model_validate(body)
        except ValidationError as exc:
            raise GatewayError(default_error, code="bad_response", status_code=response.status_code) from exc

    async def create(self, document: ResumeDocument) -> str:
        default_error = "Failed to save resume"
        payload = document.to_payload()
        payload.pop("id", None)
        response = await self._request("POST", "/resumes", default_error, json=payload)
        try:
            body = response.json()
        except ValueError:
            body = None
        resume_id = _extract_id(body)
        if not resume_id:
            logger.info("resume_api_create_without_id status=%s", response.status_code)
        return resume_id or ""

    async def update(self, resume_id: str, document: ResumeDocument) -> None:
        payload = document.to_payload()
        payload.pop("id", None)
        await self._request("PUT", f"/resumes/{resume_id}", "Failed to save resume", json=payload)

    async def list_resumes(self) -> list[ResumeDocument]:
        default_error = "Failed to fetch resumes"
        response = await self._request("GET", "/resumes/user", default_error)
        body = self._json(response, default_error)
        if isinstance(body, dict):
            body = body.get("resumes", body.get("data", []))
        if not isinstance(body, list):
            return []
        documents: list[ResumeDocument] = []
        for item in body:
            try:
                documents.append(ResumeDocument.model_validate(item))
            except ValidationError:
                logger.warning("resume_api_list_skipped_invalid_item")
        return documents

    async def delete(self, resume_id: str) -> None:
        await self._request("DELETE", f"/resumes/{resume_id}", "Failed to delete resume")

    async def download_pdf(self, resume_id: str) -> bytes:
        response = await self._request("GET", f"/resumes/{resume_id}/pdf", "Failed to download resume")
        return response.content
