from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Iterator, Literal

from pydantic import ValidationError

from resume_builder.core.config import settings
from resume_builder.core.errors import (
    FieldValidationError,
    GatewayError,
    LoadError,
    OperationInProgressError,
    SubmitError,
    UnknownFieldError,
    WizardCompletedError,
)
from resume_builder.forms.groups import RepeatingGroupController
from resume_builder.forms.model import (
    CertificationForm,
    EducationForm,
    ExperienceForm,
    PersonalDetailsForm,
    ResumeForm,
    clean_value,
    empty_form,
    from_wire,
    to_wire,
)
from resume_builder.forms.rules import first_error
from resume_builder.gateway.types import ResumePersistenceGateway
from resume_builder.wizard.notifications import NotificationSink, RecordingNotifier
from resume_builder.wizard.steps import (
    CERTIFICATION_RULES,
    EDUCATION_RULES,
    EXPERIENCE_RULES,
    LAST_STEP,
    SCALAR_RULES,
    STEPS,
    WizardStep,
)

logger = logging.getLogger(__name__)

Mode = Literal["create", "edit"]

GROUP_NAMES = ("experience", "education", "certifications")
SCALAR_FIELDS_PERSONAL = ("name", "email", "phone", "location", "linkedin", "github")


class WizardController:
    """State machine behind the resume authoring wizard.

    Owns the single ``ResumeForm`` of a session. Forward navigation is gated
    on the active step's fields; backward navigation never validates. Only
    ``load`` and ``submit`` talk to the gateway, and at most one of them may
    be outstanding at a time.
    """

    def __init__(
        self,
        gateway: ResumePersistenceGateway,
        *,
        resume_id: str | None = None,
        notifier: NotificationSink | None = None,
        revalidate_on_submit: bool | None = None,
    ):
        self.gateway = gateway
        self.notifier = notifier if notifier is not None else RecordingNotifier()
        self.resume_id = resume_id or None
        self.mode: Mode = "edit" if self.resume_id else "create"
        self.active_step = 0
        self.errors: dict[str, str] = {}
        self.load_error: LoadError | None = None
        self.submit_error: SubmitError | None = None
        self.in_flight: str | None = None
        self.loaded = self.mode == "create"
        self.completed = False
        self.revalidate_on_submit = (
            settings.wizard_revalidate_on_submit if revalidate_on_submit is None else revalidate_on_submit
        )
        self.updated_at = datetime.now(timezone.utc)
        self.model: ResumeForm = empty_form()
        self._bind_groups()

    # model and groups

    def _bind_groups(self) -> None:
        self.groups: dict[str, RepeatingGroupController[Any]] = {
            "experience": RepeatingGroupController(
                "experience", self.model.experience, ExperienceForm, rules=EXPERIENCE_RULES, min_entries=1
            ),
            "education": RepeatingGroupController(
                "education", self.model.education, EducationForm, rules=EDUCATION_RULES, min_entries=1
            ),
            "certifications": RepeatingGroupController(
                "certifications", self.model.certifications, CertificationForm, rules=CERTIFICATION_RULES
            ),
        }
        for group in self.groups.values():
            group.ensure_seeded()

    def _replace_model(self, model: ResumeForm) -> None:
        self.model = model
        self.errors = {}
        self._bind_groups()

    def group(self, name: str) -> RepeatingGroupController[Any]:
        try:
            return self.groups[name]
        except KeyError:
            raise UnknownFieldError(name) from None

    @property
    def experience(self) -> RepeatingGroupController[ExperienceForm]:
        return self.groups["experience"]

    @property
    def education(self) -> RepeatingGroupController[EducationForm]:
        return self.groups["education"]

    @property
    def certifications(self) -> RepeatingGroupController[CertificationForm]:
        return self.groups["certifications"]

    @property
    def step(self) -> WizardStep:
        return STEPS[self.active_step]

    @property
    def is_last_step(self) -> bool:
        return self.active_step == LAST_STEP

    def _ensure_idle(self, operation: str) -> None:
        if self.completed:
            raise WizardCompletedError(operation)
        if self.in_flight is not None:
            raise OperationInProgressError(operation)

    @contextmanager
    def _request(self, operation: str) -> Iterator[None]:
        self._ensure_idle(operation)
        self.in_flight = operation
        try:
            yield
        finally:
            self.in_flight = None
            self._touch()

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

    # field access

    def get_field(self, path: str) -> Any:
        if path in ("summary", "skills"):
            return getattr(self.model, path)
        prefix, _, name = path.partition(".")
        if prefix == "personalDetails" and name in SCALAR_FIELDS_PERSONAL:
            return getattr(self.model.personalDetails, name)
        raise UnknownFieldError(path)

    def _clean_scalar(self, path: str, value: Any) -> Any:
        if path in ("summary", "skills"):
            return clean_value(ResumeForm, path, value, path)
        prefix, _, name = path.partition(".")
        if prefix != "personalDetails" or name not in SCALAR_FIELDS_PERSONAL:
            raise UnknownFieldError(path)
        return clean_value(PersonalDetailsForm, name, value, path)

    def _assign_scalar(self, path: str, value: Any) -> None:
        if path in ("summary", "skills"):
            setattr(self.model, path, value)
        else:
            name = path.partition(".")[2]
            self.model.personalDetails = replace(self.model.personalDetails, **{name: value})
        self.errors.pop(path, None)

    def set_field(self, path: str, value: Any) -> None:
        self.set_fields({path: value})

    def set_fields(self, values: dict[str, Any]) -> None:
        """Apply several scalar edits; nothing is written unless every value is accepted."""
        self._ensure_idle("edit the resume")
        cleaned = {path: self._clean_scalar(path, value) for path, value in values.items()}
        for path, value in cleaned.items():
            self._assign_scalar(path, value)
        self._touch()

    def append_entry(self, group: str, initial: dict[str, Any] | None = None) -> str:
        self._ensure_idle("edit the resume")
        key = self.group(group).append(initial)
        self._touch()
        return key

    def update_entry(self, group: str, key: str, **changes: Any) -> None:
        self._ensure_idle("edit the resume")
        controller = self.group(group)
        index = controller.index_of(key)
        if group == "experience" and "present" in changes:
            present = clean_value(ExperienceForm, "present", changes["present"], f"experience.{index}.present")
            # Ticking "present" fills the end date, unticking clears it.
            changes["present"] = present
            changes.setdefault("endDate", "present" if present else "")
        controller.update(key, **changes)
        for name in changes:
            self.errors.pop(f"{group}.{index}.{name}", None)
        self._touch()

    def remove_entry(self, group: str, key: str) -> bool:
        self._ensure_idle("edit the resume")
        removed = self.group(group).remove(key)
        if removed:
            # Error paths are positional, so drop the group's errors.
            self.errors = {path: msg for path, msg in self.errors.items() if not path.startswith(f"{group}.")}
        self._touch()
        return removed

    # validation

    def validate_step(self, index: int | None = None) -> dict[str, str]:
        step = STEPS[self.active_step if index is None else index]
        errors: dict[str, str] = {}
        record = {"summary": self.model.summary, "skills": self.model.skills}
        for path in step.scalar_fields:
            error = first_error(self.get_field(path), record, SCALAR_RULES[path])
            if error:
                errors[path] = error
        if step.group is not None:
            errors.update(self.groups[step.group].validate(step.group_indices, step.group_fields))
        return errors

    def validate_all(self) -> dict[int, dict[str, str]]:
        results: dict[int, dict[str, str]] = {}
        for index in range(len(STEPS)):
            errors = self.validate_step(index)
            if errors:
                results[index] = errors
        return results

    def require_valid_step(self, index: int | None = None) -> None:
        errors = self.validate_step(index)
        if errors:
            raise FieldValidationError(errors)

    # transitions

    def next(self) -> bool:
        self._ensure_idle("change steps")
        errors = self.validate_step()
        self.errors = errors
        self._touch()
        if errors:
            logger.debug("wizard_step_blocked step=%s errors=%s", self.step.key, len(errors))
            return False
        if not self.is_last_step:
            self.active_step += 1
        return True

    def back(self) -> None:
        self._ensure_idle("change steps")
        self.active_step = max(0, self.active_step - 1)
        self.errors = {}
        self._touch()

    async def load(self) -> bool:
        if self.mode != "edit" or self.resume_id is None:
            self.loaded = True
            return True
        with self._request("load the resume"):
            try:
                document = await self.gateway.fetch_by_id(self.resume_id)
                model = from_wire(document)
            except (GatewayError, ValidationError) as exc:
                message = exc.message if isinstance(exc, GatewayError) else "Failed to fetch resume"
                logger.warning("wizard_load_failed resume_id=%s error=%s", self.resume_id, exc)
                self.load_error = LoadError(message)
                self.notifier.notify(message, "error")
                self.mode = "create"
                self.resume_id = None
                self._replace_model(empty_form())
                self.loaded = True
                return False
            if model.id is None:
                model.id = self.resume_id
            self._replace_model(model)
            self.load_error = None
            self.loaded = True
            logger.info("wizard_loaded resume_id=%s", self.resume_id)
            return True

    def _validate_for_submit(self) -> dict[str, str]:
        if not self.revalidate_on_submit:
            return self.validate_step()
        failing = self.validate_all()
        if not failing:
            return {}
        self.active_step = min(failing)
        return failing[self.active_step]

    async def submit(self) -> bool:
        self._ensure_idle("submit the resume")
        errors = self._validate_for_submit()
        self.errors = errors
        if errors:
            self._touch()
            return False
        document = to_wire(self.model)
        with self._request("submit the resume"):
            try:
                if self.mode == "edit" and self.resume_id:
                    await self.gateway.update(self.resume_id, document)
                    message = "Resume updated successfully"
                else:
                    self.resume_id = await self.gateway.create(document) or None
                    message = "Resume created successfully"
            except GatewayError as exc:
                message = exc.message or "Failed to save resume"
                logger.warning("wizard_submit_failed mode=%s resume_id=%s error=%s", self.mode, self.resume_id, exc)
                self.submit_error = SubmitError(message)
                self.notifier.notify(message, "error")
                return False
            self.submit_error = None
            self.completed = True
            if self.resume_id:
                self.model.id = self.resume_id
            self.notifier.notify(message, "success")
            logger.info("wizard_submitted mode=%s resume_id=%s", self.mode, self.resume_id)
            return True

    # views

    def snapshot(self) -> dict[str, Any]:
        document = to_wire(self.model).to_payload()
        for name in GROUP_NAMES:
            keys = self.groups[name].keys()
            document[name] = [{"key": key, **entry} for key, entry in zip(keys, document[name])]
        messages = getattr(self.notifier, "items", [])
        return {
            "active_step": self.active_step,
            "step": {"key": self.step.key, "label": self.step.label},
            "steps": [{"key": step.key, "label": step.label} for step in STEPS],
            "is_last_step": self.is_last_step,
            "mode": self.mode,
            "resume_id": self.resume_id,
            "loaded": self.loaded,
            "completed": self.completed,
            "in_flight": self.in_flight,
            "errors": dict(self.errors),
            "load_error": self.load_error.message if self.load_error else None,
            "submit_error": self.submit_error.message if self.submit_error else None,
            "messages": [{"message": item.message, "level": item.level} for item in messages],
            "resume": document,
        }
