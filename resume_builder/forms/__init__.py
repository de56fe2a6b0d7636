from .groups import RepeatingGroupController
from .model import (
    CertificationForm,
    EducationForm,
    ExperienceForm,
    PersonalDetailsForm,
    ResumeForm,
    empty_form,
    from_wire,
    to_wire,
)

__all__ = [
    "CertificationForm",
    "EducationForm",
    "ExperienceForm",
    "PersonalDetailsForm",
    "RepeatingGroupController",
    "ResumeForm",
    "empty_form",
    "from_wire",
    "to_wire",
]
