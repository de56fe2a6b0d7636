from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from resume_builder.core.config import settings
from resume_builder.gateway.auth import AuthContext
from resume_builder.wizard.controller import WizardController

logger = logging.getLogger(__name__)

_sessions: dict[str, "WizardSession"] = {}
_sessions_lock = threading.Lock()


@dataclass
class WizardSession:
    session_id: str
    auth: AuthContext
    controller: WizardController
    created_at: datetime


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _ttl() -> timedelta:
    return timedelta(minutes=max(1, int(settings.wizard_session_ttl_minutes)))


def purge_expired_sessions() -> int:
    cutoff = _utc_now() - _ttl()
    with _sessions_lock:
        expired = [
            sid
            for sid, session in _sessions.items()
            if session.controller.updated_at <= cutoff and session.controller.in_flight is None
        ]
        for sid in expired:
            del _sessions[sid]
    if expired:
        logger.info("wizard_sessions_purged count=%s", len(expired))
    return len(expired)


def create_session(auth: AuthContext, controller: WizardController) -> WizardSession:
    purge_expired_sessions()
    session = WizardSession(
        session_id=secrets.token_urlsafe(12),
        auth=auth,
        controller=controller,
        created_at=_utc_now(),
    )
    with _sessions_lock:
        _sessions[session.session_id] = session
    return session


def get_session(session_id: str) -> WizardSession | None:
    with _sessions_lock:
        return _sessions.get(session_id)


def discard_session(session_id: str) -> bool:
    with _sessions_lock:
        session = _sessions.pop(session_id, None)
    if session is not None:
        session.auth.clear_token()
    return session is not None


def clear_sessions() -> None:
    with _sessions_lock:
        _sessions.clear()
