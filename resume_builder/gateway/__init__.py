from .auth import AuthContext
from .factory import get_gateway
from .http import HttpResumeGateway
from .memory import InMemoryResumeGateway
from .types import ResumePersistenceGateway

__all__ = [
    "AuthContext",
    "HttpResumeGateway",
    "InMemoryResumeGateway",
    "ResumePersistenceGateway",
    "get_gateway",
]
