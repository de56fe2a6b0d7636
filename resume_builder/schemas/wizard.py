from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

GroupName = Literal["experience", "education", "certifications"]
StepKey = Literal["personal_details", "skills", "experience", "education", "certifications"]
Mode = Literal["create", "edit"]
NotificationLevel = Literal["success", "error"]


class StartSessionRequest(BaseModel):
    resume_id: str | None = Field(default=None, max_length=200)


class FieldsUpdateRequest(BaseModel):
    fields: dict[str, Any] = Field(default_factory=dict)


class EntryAppendRequest(BaseModel):
    initial: dict[str, Any] = Field(default_factory=dict)


class EntryUpdateRequest(BaseModel):
    changes: dict[str, Any] = Field(default_factory=dict)


class StepInfo(BaseModel):
    key: StepKey
    label: str


class NotificationOut(BaseModel):
    message: str
    level: NotificationLevel


class WizardSessionResponse(BaseModel):
    session_id: str
    active_step: int = Field(ge=0, le=4)
    step: StepInfo
    steps: list[StepInfo]
    is_last_step: bool
    mode: Mode
    resume_id: str | None = None
    loaded: bool
    completed: bool
    in_flight: str | None = None
    errors: dict[str, str] = Field(default_factory=dict)
    load_error: str | None = None
    submit_error: str | None = None
    messages: list[NotificationOut] = Field(default_factory=list)
    resume: dict[str, Any]


class TransitionResponse(WizardSessionResponse):
    ok: bool


class EntryAppendResponse(WizardSessionResponse):
    key: str


class EntryRemoveResponse(WizardSessionResponse):
    removed: bool


class ResumeSummary(BaseModel):
    id: str | None = None
    name: str = ""
    email: str = ""
    experience_count: int = 0
    education_count: int = 0
    certification_count: int = 0
    resume: dict[str, Any]


class ResumeListResponse(BaseModel):
    total: int
    resumes: list[ResumeSummary]
