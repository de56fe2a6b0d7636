import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from resume_builder.core.errors import (
    EntryNotFoundError,
    InvalidFieldValueError,
    OperationInProgressError,
    UnknownFieldError,
    WizardCompletedError,
)
from resume_builder.core.rate_limit import rate_limit
from resume_builder.core.security import require_auth
from resume_builder.core.session_store import WizardSession, create_session, discard_session, get_session
from resume_builder.gateway.auth import AuthContext
from resume_builder.gateway.factory import get_gateway
from resume_builder.schemas.wizard import (
    EntryAppendRequest,
    EntryAppendResponse,
    EntryRemoveResponse,
    EntryUpdateRequest,
    FieldsUpdateRequest,
    GroupName,
    StartSessionRequest,
    TransitionResponse,
    WizardSessionResponse,
)
from resume_builder.wizard.controller import WizardController

router = APIRouter()
logger = logging.getLogger(__name__)


def _session_or_404(session_id: str, auth: AuthContext) -> WizardSession:
    session = get_session(session_id)
    if session is None or session.auth.token != auth.token:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Wizard session not found or expired.")
    return session


def _view(session: WizardSession, **extra: Any) -> dict[str, Any]:
    return {"session_id": session.session_id, **session.controller.snapshot(), **extra}


_EDIT_ERRORS = (
    OperationInProgressError,
    WizardCompletedError,
    EntryNotFoundError,
    UnknownFieldError,
    InvalidFieldValueError,
)


def _raise_edit_error(exc: Exception) -> None:
    if isinstance(exc, (OperationInProgressError, WizardCompletedError)):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if isinstance(exc, EntryNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, (UnknownFieldError, InvalidFieldValueError)):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    raise exc


@router.post("/wizard/sessions", response_model=WizardSessionResponse, status_code=status.HTTP_201_CREATED)
@rate_limit()
async def start_session(request: Request, payload: StartSessionRequest, auth: AuthContext = Depends(require_auth)):
    _ = request
    controller = WizardController(get_gateway(auth), resume_id=payload.resume_id)
    session = create_session(auth, controller)
    await controller.load()
    logger.info(
        "wizard_session_started session_id=%s mode=%s load_error=%s",
        session.session_id,
        controller.mode,
        bool(controller.load_error),
    )
    return _view(session)


@router.get("/wizard/sessions/{session_id}", response_model=WizardSessionResponse)
async def read_session(session_id: str, auth: AuthContext = Depends(require_auth)):
    return _view(_session_or_404(session_id, auth))


@router.delete("/wizard/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(session_id: str, auth: AuthContext = Depends(require_auth)):
    _session_or_404(session_id, auth)
    discard_session(session_id)


@router.patch("/wizard/sessions/{session_id}/fields", response_model=WizardSessionResponse)
async def update_fields(session_id: str, payload: FieldsUpdateRequest, auth: AuthContext = Depends(require_auth)):
    session = _session_or_404(session_id, auth)
    try:
        session.controller.set_fields(payload.fields)
    except _EDIT_ERRORS as exc:
        _raise_edit_error(exc)
    return _view(session)


@router.post(
    "/wizard/sessions/{session_id}/groups/{group}/entries",
    response_model=EntryAppendResponse,
    status_code=status.HTTP_201_CREATED,
)
async def append_entry(
    session_id: str,
    group: GroupName,
    payload: EntryAppendRequest,
    auth: AuthContext = Depends(require_auth),
):
    session = _session_or_404(session_id, auth)
    try:
        key = session.controller.append_entry(group, payload.initial)
    except _EDIT_ERRORS as exc:
        _raise_edit_error(exc)
    return _view(session, key=key)


@router.patch("/wizard/sessions/{session_id}/groups/{group}/entries/{key}", response_model=WizardSessionResponse)
async def update_entry(
    session_id: str,
    group: GroupName,
    key: str,
    payload: EntryUpdateRequest,
    auth: AuthContext = Depends(require_auth),
):
    session = _session_or_404(session_id, auth)
    try:
        session.controller.update_entry(group, key, **payload.changes)
    except _EDIT_ERRORS as exc:
        _raise_edit_error(exc)
    return _view(session)


@router.delete("/wizard/sessions/{session_id}/groups/{group}/entries/{key}", response_model=EntryRemoveResponse)
async def remove_entry(session_id: str, group: GroupName, key: str, auth: AuthContext = Depends(require_auth)):
    session = _session_or_404(session_id, auth)
    try:
        removed = session.controller.remove_entry(group, key)
    except _EDIT_ERRORS as exc:
        _raise_edit_error(exc)
    return _view(session, removed=removed)


@router.post("/wizard/sessions/{session_id}/next", response_model=TransitionResponse)
async def next_step(session_id: str, auth: AuthContext = Depends(require_auth)):
    session = _session_or_404(session_id, auth)
    try:
        ok = session.controller.next()
    except _EDIT_ERRORS as exc:
        _raise_edit_error(exc)
    return _view(session, ok=ok)


@router.post("/wizard/sessions/{session_id}/back", response_model=TransitionResponse)
async def previous_step(session_id: str, auth: AuthContext = Depends(require_auth)):
    session = _session_or_404(session_id, auth)
    try:
        session.controller.back()
    except _EDIT_ERRORS as exc:
        _raise_edit_error(exc)
    return _view(session, ok=True)


@router.post("/wizard/sessions/{session_id}/submit", response_model=TransitionResponse)
async def submit_session(session_id: str, auth: AuthContext = Depends(require_auth)):
    session = _session_or_404(session_id, auth)
    try:
        ok = await session.controller.submit()
    except _EDIT_ERRORS as exc:
        _raise_edit_error(exc)
    view = _view(session, ok=ok)
    if ok:
        discard_session(session_id)
    return view
