"""Error taxonomy shared by the form engine, the wizard and the gateway.

Field validation failures are ordinary outcomes and are reported through the
wizard's error map; the exceptions below cover the cases a caller has to
handle explicitly.
"""

from __future__ import annotations


class ResumeBuilderError(RuntimeError):
    def __init__(self, message: str, *, code: str = "resume_builder_error"):
        super().__init__(message)
        self.message = message
        self.code = code


class FieldValidationError(ResumeBuilderError):
    def __init__(self, errors: dict[str, str]):
        first = next(iter(errors.values()), "Validation failed")
        super().__init__(first, code="field_validation_error")
        self.errors = dict(errors)


class LoadError(ResumeBuilderError):
    def __init__(self, message: str):
        super().__init__(message, code="load_error")


class SubmitError(ResumeBuilderError):
    def __init__(self, message: str):
        super().__init__(message, code="submit_error")


class TransportFault(ResumeBuilderError):
    def __init__(self, message: str, *, code: str = "transport_fault"):
        super().__init__(message, code=code)


class GatewayError(ResumeBuilderError):
    def __init__(self, message: str, *, code: str = "gateway_error", status_code: int | None = None):
        super().__init__(message, code=code)
        self.status_code = status_code


class NotFoundError(GatewayError):
    def __init__(self, message: str = "Resume not found", *, status_code: int | None = 404):
        super().__init__(message, code="not_found", status_code=status_code)


class RemoteValidationError(GatewayError):
    def __init__(self, message: str = "Resume was rejected by the server", *, status_code: int | None = 400):
        super().__init__(message, code="validation_error", status_code=status_code)


class NetworkError(GatewayError, TransportFault):
    def __init__(self, message: str = "Network error", *, status_code: int | None = None):
        GatewayError.__init__(self, message, code="network_error", status_code=status_code)


class UnknownFieldError(ResumeBuilderError, KeyError):
    def __init__(self, path: str):
        ResumeBuilderError.__init__(self, f"Unknown field '{path}'", code="unknown_field")
        self.path = path

    def __str__(self) -> str:
        return self.message


class EntryNotFoundError(ResumeBuilderError, KeyError):
    def __init__(self, group: str, key: str):
        ResumeBuilderError.__init__(self, f"No {group} entry with key '{key}'", code="entry_not_found")
        self.group = group
        self.key = key

    def __str__(self) -> str:
        return self.message


class OperationInProgressError(ResumeBuilderError):
    def __init__(self, operation: str):
        super().__init__(
            f"Cannot {operation} while a request for this resume is still in flight",
            code="operation_in_progress",
        )
        self.operation = operation


class InvalidFieldValueError(ResumeBuilderError, ValueError):
    def __init__(self, path: str, reason: str):
        ResumeBuilderError.__init__(self, f"Invalid value for '{path}': {reason}", code="invalid_field_value")
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return self.message


class WizardCompletedError(ResumeBuilderError):
    def __init__(self, operation: str):
        super().__init__(f"Cannot {operation} after the resume has been saved", code="wizard_completed")
        self.operation = operation
