from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

PRESENT = "present"


def _blank_if_none(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _list_if_none(value: Any) -> Any:
    return [] if value is None else value


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PersonalDetails(WireModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _blank_if_none(value)


class ExperienceEntry(WireModel):
    jobTitle: str = ""
    company: str = ""
    location: str = ""
    startDate: str = ""
    endDate: str = ""
    present: bool = False
    project: str = ""

    @field_validator("jobTitle", "company", "location", "startDate", "endDate", "project", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _blank_if_none(value)

    @field_validator("present", mode="before")
    @classmethod
    def coerce_present(cls, value: Any) -> Any:
        return False if value is None else value


class EducationEntry(WireModel):
    degree: str = ""
    institution: str = ""
    year: int | str = ""
    month: str = ""

    @field_validator("degree", "institution", "month", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _blank_if_none(value)

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, value: Any) -> Any:
        return "" if value is None else value


class CertificationEntry(WireModel):
    name: str = ""
    provider: str = ""
    date: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _blank_if_none(value)


class ResumeDocument(WireModel):
    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    personalDetails: PersonalDetails = Field(default_factory=PersonalDetails)
    summary: str = ""
    skills: str = ""
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    certifications: list[CertificationEntry] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("personalDetails", mode="before")
    @classmethod
    def coerce_personal_details(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("summary", "skills", mode="before")
    @classmethod
    def coerce_rich_text(cls, value: Any) -> Any:
        return _blank_if_none(value)

    @field_validator("experience", "education", "certifications", mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return _list_if_none(value)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
