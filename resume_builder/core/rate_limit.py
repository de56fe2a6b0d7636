from __future__ import annotations

import hashlib

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from resume_builder.core.config import settings


def _caller_key(request: Request) -> str:
    # Limit per logged-in caller when a token is present, per address otherwise.
    authorization = request.headers.get("authorization", "").strip()
    if authorization:
        return "token:" + hashlib.sha256(authorization.encode("utf-8")).hexdigest()[:24]
    return get_remote_address(request)


limiter = Limiter(key_func=_caller_key, enabled=settings.rate_limit_enabled)


def rate_limit():
    if settings.rate_limit_enabled:
        return limiter.limit(settings.rate_limit)

    def decorator(func):
        return func

    return decorator
