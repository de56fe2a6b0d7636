from resume_builder.core.config import settings
from resume_builder.gateway.auth import AuthContext
from resume_builder.gateway.http import HttpResumeGateway
from resume_builder.gateway.memory import InMemoryResumeGateway
from resume_builder.gateway.types import ResumePersistenceGateway

_shared_memory_gateway = InMemoryResumeGateway()


def get_gateway(auth: AuthContext) -> ResumePersistenceGateway:
    if settings.resume_gateway == "http":
        return HttpResumeGateway(auth)

    if settings.resume_gateway == "memory":
        return _shared_memory_gateway

    raise ValueError(f"Unsupported RESUME_GATEWAY='{settings.resume_gateway}'")
