import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from resume_builder.api.v1.health import router as health_router
from resume_builder.api.v1.resumes import router as resumes_router
from resume_builder.api.v1.wizard import router as wizard_router
from resume_builder.core.cors import cors_allowed_origins
from resume_builder.core.rate_limit import limiter
from resume_builder.core.config import settings
from resume_builder.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="Resume Builder API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(wizard_router, prefix="/v1", tags=["Wizard"])
app.include_router(resumes_router, prefix="/v1", tags=["Resumes"])
