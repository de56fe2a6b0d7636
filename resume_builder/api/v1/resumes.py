import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from resume_builder.core.errors import GatewayError, NotFoundError
from resume_builder.core.security import require_auth
from resume_builder.gateway.auth import AuthContext
from resume_builder.gateway.factory import get_gateway
from resume_builder.schemas.resume import ResumeDocument
from resume_builder.schemas.wizard import ResumeListResponse, ResumeSummary

router = APIRouter()
logger = logging.getLogger(__name__)


def _raise_gateway_error(exc: GatewayError) -> None:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc


def pdf_filename(document: ResumeDocument | None) -> str:
    name = document.personalDetails.name.strip() if document else ""
    # Header values must stay latin-1 safe.
    name = "".join(ch for ch in name if ch.isascii() and (ch.isalnum() or ch in " ._-"))
    name = name.strip()
    if not name:
        return "resume.pdf"
    return "_".join(name.split()) + "_resume.pdf"


def _summary(document: ResumeDocument) -> ResumeSummary:
    return ResumeSummary(
        id=document.id,
        name=document.personalDetails.name,
        email=document.personalDetails.email,
        experience_count=len(document.experience),
        education_count=len(document.education),
        certification_count=len(document.certifications),
        resume=document.to_payload(),
    )


@router.get("/resumes", response_model=ResumeListResponse)
async def list_resumes(auth: AuthContext = Depends(require_auth)):
    try:
        documents = await get_gateway(auth).list_resumes()
    except GatewayError as exc:
        logger.warning("resume_list_failed error=%s", exc)
        _raise_gateway_error(exc)
    summaries = [_summary(document) for document in documents]
    return ResumeListResponse(total=len(summaries), resumes=summaries)


@router.delete("/resumes/{resume_id}")
async def delete_resume(resume_id: str, auth: AuthContext = Depends(require_auth)):
    try:
        await get_gateway(auth).delete(resume_id)
    except GatewayError as exc:
        logger.warning("resume_delete_failed resume_id=%s error=%s", resume_id, exc)
        _raise_gateway_error(exc)
    return {"status": "deleted", "message": "Resume deleted successfully", "id": resume_id}


@router.get("/resumes/{resume_id}/pdf")
async def download_resume(resume_id: str, auth: AuthContext = Depends(require_auth)):
    gateway = get_gateway(auth)
    try:
        content = await gateway.download_pdf(resume_id)
    except GatewayError as exc:
        logger.warning("resume_download_failed resume_id=%s error=%s", resume_id, exc)
        _raise_gateway_error(exc)
    try:
        document = await gateway.fetch_by_id(resume_id)
    except GatewayError as exc:
        logger.info("resume_download_name_lookup_failed resume_id=%s error=%s", resume_id, exc)
        document = None
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(document)}"'},
    )
