from fastapi import APIRouter

from resume_builder.core.config import settings

router = APIRouter()

@router.get("/health", summary="Health Check", description="Check the health status of the resume builder service.")
async def health_check():
    return {"status": "healthy", "gateway": settings.resume_gateway}
