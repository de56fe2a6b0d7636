from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from resume_builder.core.errors import InvalidFieldValueError
from resume_builder.schemas.resume import (
    PRESENT,
    CertificationEntry,
    EducationEntry,
    ExperienceEntry,
    PersonalDetails,
    ResumeDocument,
)


def new_entry_key() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class PersonalDetailsForm:
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""


@dataclass(frozen=True)
class ExperienceForm:
    jobTitle: str = ""
    company: str = ""
    location: str = ""
    startDate: str = ""
    endDate: str = ""
    present: bool = False
    project: str = ""
    key: str = field(default_factory=new_entry_key, compare=False)


@dataclass(frozen=True)
class EducationForm:
    degree: str = ""
    institution: str = ""
    year: int | str = ""
    month: str = ""
    key: str = field(default_factory=new_entry_key, compare=False)


@dataclass(frozen=True)
class CertificationForm:
    name: str = ""
    provider: str = ""
    date: str = ""
    key: str = field(default_factory=new_entry_key, compare=False)


@dataclass
class ResumeForm:
    personalDetails: PersonalDetailsForm = field(default_factory=PersonalDetailsForm)
    summary: str = ""
    skills: str = ""
    experience: list[ExperienceForm] = field(default_factory=list)
    education: list[EducationForm] = field(default_factory=list)
    certifications: list[CertificationForm] = field(default_factory=list)
    id: str | None = None


def editable_fields(entry_type: type) -> tuple[str, ...]:
    return tuple(f.name for f in fields(entry_type) if f.name != "key")


def entry_record(entry: Any) -> dict[str, Any]:
    record = asdict(entry)
    record.pop("key", None)
    return record


# Wire model whose field validators own the accepted types of each form field.
WIRE_MODELS: dict[type, type[BaseModel]] = {
    PersonalDetailsForm: PersonalDetails,
    ExperienceForm: ExperienceEntry,
    EducationForm: EducationEntry,
    CertificationForm: CertificationEntry,
    ResumeForm: ResumeDocument,
}


def clean_value(form_type: type, name: str, value: Any, path: str | None = None) -> Any:
    """Coerce one incoming value the way the wire model would, or raise ``InvalidFieldValueError``."""
    wire_model = WIRE_MODELS[form_type]
    try:
        parsed = wire_model.model_validate({name: value})
    except ValidationError as exc:
        reason = exc.errors()[0].get("msg", "invalid value")
        raise InvalidFieldValueError(path or name, reason) from None
    return getattr(parsed, name)


def clean_values(form_type: type, values: Mapping[str, Any], prefix: str) -> dict[str, Any]:
    return {name: clean_value(form_type, name, value, f"{prefix}.{name}") for name, value in values.items()}


def empty_form() -> ResumeForm:
    """Defaults for a new resume: one blank experience and education entry."""
    return ResumeForm(experience=[ExperienceForm()], education=[EducationForm()])


def _experience_from_wire(entry: ExperienceEntry) -> ExperienceForm:
    return ExperienceForm(
        jobTitle=entry.jobTitle,
        company=entry.company,
        location=entry.location,
        startDate=entry.startDate,
        endDate=entry.endDate,
        present=entry.endDate == PRESENT,
        project=entry.project,
    )


def _experience_to_wire(entry: ExperienceForm) -> ExperienceEntry:
    if entry.present:
        end_date = PRESENT
    elif entry.endDate == PRESENT:
        end_date = ""
    else:
        end_date = entry.endDate
    return ExperienceEntry(
        jobTitle=entry.jobTitle,
        company=entry.company,
        location=entry.location,
        startDate=entry.startDate,
        endDate=end_date,
        present=bool(entry.present),
        project=entry.project,
    )


def from_wire(document: ResumeDocument | Mapping[str, Any]) -> ResumeForm:
    doc = document if isinstance(document, ResumeDocument) else ResumeDocument.model_validate(document)
    details = doc.personalDetails
    return ResumeForm(
        id=doc.id,
        personalDetails=PersonalDetailsForm(
            name=details.name,
            email=details.email,
            phone=details.phone,
            location=details.location,
            linkedin=details.linkedin,
            github=details.github,
        ),
        summary=doc.summary,
        skills=doc.skills,
        experience=[_experience_from_wire(item) for item in doc.experience],
        education=[
            EducationForm(degree=item.degree, institution=item.institution, year=item.year, month=item.month)
            for item in doc.education
        ],
        certifications=[
            CertificationForm(name=item.name, provider=item.provider, date=item.date)
            for item in doc.certifications
        ],
    )


def to_wire(form: ResumeForm) -> ResumeDocument:
    details = form.personalDetails
    return ResumeDocument(
        id=form.id,
        personalDetails=PersonalDetails(
            name=details.name,
            email=details.email,
            phone=details.phone,
            location=details.location,
            linkedin=details.linkedin,
            github=details.github,
        ),
        summary=form.summary,
        skills=form.skills,
        experience=[_experience_to_wire(item) for item in form.experience],
        education=[
            EducationEntry(degree=item.degree, institution=item.institution, year=item.year, month=item.month)
            for item in form.education
        ],
        certifications=[
            CertificationEntry(name=item.name, provider=item.provider, date=item.date)
            for item in form.certifications
        ],
    )
