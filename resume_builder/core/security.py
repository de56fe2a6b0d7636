from __future__ import annotations

from fastapi import Header, HTTPException, status

from resume_builder.gateway.auth import AuthContext


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def require_auth(authorization: str | None = Header(default=None)) -> AuthContext:
    auth = AuthContext()
    auth.set_token(_bearer_token(authorization))
    if not auth.authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please log in to continue.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth
