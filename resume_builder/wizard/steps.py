from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from resume_builder.forms.rules import (
    EMAIL_RE,
    GITHUB_RE,
    LINKEDIN_RE,
    PHONE_RE,
    FieldRule,
    conditional_required,
    min_length,
    ordered_after,
    pattern,
    required,
    rich_text_non_empty,
    rule,
    valid_date,
    valid_month,
    valid_year,
    when,
)


def _not_present(record: dict[str, Any]) -> bool:
    return not record.get("present")


SCALAR_RULES: dict[str, list[FieldRule]] = {
    "personalDetails.name": [rule(required, "Full name is required")],
    "personalDetails.email": [
        rule(required, "Email is required"),
        rule(pattern, EMAIL_RE, "Invalid email address"),
    ],
    "personalDetails.phone": [
        rule(required, "Phone number is required"),
        rule(pattern, PHONE_RE, "Invalid phone number (10 digits required)"),
    ],
    "personalDetails.location": [rule(required, "Location is required")],
    "personalDetails.linkedin": [
        rule(required, "LinkedIn URL is required"),
        rule(pattern, LINKEDIN_RE, "Invalid LinkedIn URL"),
    ],
    "personalDetails.github": [
        rule(required, "GitHub URL is required"),
        rule(pattern, GITHUB_RE, "Invalid GitHub URL"),
    ],
    "summary": [
        rule(required, "Professional summary is required"),
        rule(rich_text_non_empty, "Please add a professional summary"),
    ],
    "skills": [
        rule(required, "Skills are required"),
        rule(rich_text_non_empty, "Please enter at least one skill"),
    ],
}

EXPERIENCE_RULES: dict[str, list[FieldRule]] = {
    "jobTitle": [
        rule(required, "Job title is required"),
        rule(min_length, 2, "Job title must be at least 2 characters"),
    ],
    "company": [
        rule(required, "Company name is required"),
        rule(min_length, 2, "Company name must be at least 2 characters"),
    ],
    "location": [
        rule(required, "Location is required"),
        rule(min_length, 2, "Location must be at least 2 characters"),
    ],
    "startDate": [
        rule(required, "Start date is required"),
        rule(valid_date, "Please enter a valid date"),
    ],
    "endDate": [
        conditional_required(_not_present, "End date is required if not present"),
        when(_not_present, rule(valid_date, "Please enter a valid date")),
        ordered_after("startDate", "End date must be after start date", present_field="present"),
    ],
    "project": [
        rule(required, "Project details are required"),
        rule(rich_text_non_empty, "Please add project details"),
    ],
}

EDUCATION_RULES: dict[str, list[FieldRule]] = {
    "degree": [
        rule(required, "Degree is required"),
        rule(min_length, 2, "Degree must be at least 2 characters"),
    ],
    "institution": [
        rule(required, "Institution is required"),
        rule(min_length, 2, "Institution name must be at least 2 characters"),
    ],
    "year": [
        rule(required, "Year is required"),
        rule(valid_year, "Please select a valid year"),
    ],
    "month": [
        rule(required, "Month is required"),
        rule(valid_month, "Please select a valid month"),
    ],
}

CERTIFICATION_RULES: dict[str, list[FieldRule]] = {
    "name": [rule(required, "Certification name is required")],
    "provider": [],
    "date": [rule(valid_date, "Please enter a valid date")],
}


@dataclass(frozen=True)
class WizardStep:
    key: str
    label: str
    scalar_fields: tuple[str, ...] = ()
    group: str | None = None
    # None means every entry of the group is gated.
    group_indices: tuple[int, ...] | None = None
    group_fields: tuple[str, ...] | None = None


STEPS: tuple[WizardStep, ...] = (
    WizardStep(
        key="personal_details",
        label="Personal Details",
        scalar_fields=(
            "personalDetails.name",
            "personalDetails.email",
            "personalDetails.phone",
            "personalDetails.location",
            "personalDetails.linkedin",
            "personalDetails.github",
            "summary",
        ),
    ),
    WizardStep(key="skills", label="Skills", scalar_fields=("skills",)),
    WizardStep(key="experience", label="Experience", group="experience"),
    WizardStep(key="education", label="Education", group="education"),
    WizardStep(
        key="certifications",
        label="Certifications",
        group="certifications",
        group_indices=(0,),
        group_fields=("name", "provider", "date"),
    ),
)

LAST_STEP = len(STEPS) - 1
