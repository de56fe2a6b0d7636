from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Generic, Mapping, Sequence, TypeVar

from resume_builder.core.errors import EntryNotFoundError, UnknownFieldError
from resume_builder.forms.model import clean_values, editable_fields, entry_record
from resume_builder.forms.rules import FieldRule, first_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

EntryRules = Mapping[str, Sequence[FieldRule]]


class RepeatingGroupController(Generic[T]):
    """Manages one repeating section of the form (experience, education, ...).

    The controller works directly on the list owned by the form model; it
    keeps no copy of the entries. Entries are addressed by their ``key``,
    which is assigned once and survives reordering and removal of siblings.
    """

    def __init__(
        self,
        name: str,
        entries: list[T],
        entry_type: type[T],
        *,
        rules: EntryRules | None = None,
        min_entries: int = 0,
    ):
        self.name = name
        self._entries = entries
        self._entry_type = entry_type
        self._rules: EntryRules = rules or {}
        self.min_entries = min_entries
        self._seeded = False
        self._validation: dict[str, dict[str, str]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _field_names(self) -> tuple[str, ...]:
        return editable_fields(self._entry_type)

    def _check_fields(self, values: Mapping[str, Any]) -> None:
        allowed = set(self._field_names())
        for name in values:
            if name not in allowed:
                raise UnknownFieldError(f"{self.name}.{name}")

    def ensure_seeded(self) -> bool:
        if self._seeded:
            return False
        self._seeded = True
        if self.min_entries > 0 and not self._entries:
            self.append()
            logger.debug("group_seeded group=%s", self.name)
            return True
        return False

    def append(self, initial: Mapping[str, Any] | None = None) -> str:
        values = dict(initial or {})
        self._check_fields(values)
        values = clean_values(self._entry_type, values, self.name)
        entry = self._entry_type(**values)
        self._entries.append(entry)
        return entry.key

    def remove(self, key: str) -> bool:
        index = self.index_of(key)
        if self.min_entries and len(self._entries) <= self.min_entries:
            logger.debug("group_remove_blocked group=%s size=%s", self.name, len(self._entries))
            return False
        del self._entries[index]
        self._validation.pop(key, None)
        return True

    def update(self, key: str, **changes: Any) -> T:
        self._check_fields(changes)
        index = self.index_of(key)
        changes = clean_values(self._entry_type, changes, f"{self.name}.{index}")
        updated = replace(self._entries[index], **changes)
        self._entries[index] = updated
        self._validation.pop(key, None)
        return updated

    def get(self, key: str) -> T:
        return self._entries[self.index_of(key)]

    def index_of(self, key: str) -> int:
        for index, entry in enumerate(self._entries):
            if entry.key == key:
                return index
        raise EntryNotFoundError(self.name, key)

    def keys(self) -> list[str]:
        return [entry.key for entry in self._entries]

    def values(self) -> list[T]:
        return list(self._entries)

    def _validate_entry(self, entry: T) -> dict[str, str]:
        cached = self._validation.get(entry.key)
        if cached is not None:
            return cached
        record = entry_record(entry)
        errors: dict[str, str] = {}
        for field_name, field_rules in self._rules.items():
            error = first_error(record.get(field_name), record, field_rules)
            if error:
                errors[field_name] = error
        self._validation[entry.key] = errors
        return errors

    def validate(self, indices: Sequence[int] | None = None, fields_only: Sequence[str] | None = None) -> dict[str, str]:
        """Validate entries and return errors keyed by ``<group>.<index>.<field>``."""
        errors: dict[str, str] = {}
        positions = range(len(self._entries)) if indices is None else indices
        for index in positions:
            if index >= len(self._entries):
                continue
            entry_errors = self._validate_entry(self._entries[index])
            for field_name, message in entry_errors.items():
                if fields_only is not None and field_name not in fields_only:
                    continue
                errors[f"{self.name}.{index}.{field_name}"] = message
        return errors

    def invalidate(self, key: str | None = None) -> None:
        if key is None:
            self._validation.clear()
        else:
            self._validation.pop(key, None)

    def describe(self) -> list[dict[str, Any]]:
        return [{"key": entry.key, **entry_record(entry)} for entry in self._entries]

