"""Field-level validation errors, aggregated into one reported failure."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class FieldErrorType(str, Enum):
    REQUIRED = "Required value"
    FORBIDDEN = "Forbidden"
    INVALID = "Invalid value"


class FieldError(BaseModel):
    """One violation at a dotted field path such as ``hosts[0].interfaces``."""

    model_config = ConfigDict(frozen=True)

    path: str
    error_type: FieldErrorType
    detail: str

    def __str__(self) -> str:
        return f"{self.path}: {self.error_type.value}: {self.detail}"


def required(path: str, detail: str) -> FieldError:
    return FieldError(path=path, error_type=FieldErrorType.REQUIRED, detail=detail)


def forbidden(path: str, detail: str) -> FieldError:
    return FieldError(path=path, error_type=FieldErrorType.FORBIDDEN, detail=detail)


def invalid(path: str, detail: str) -> FieldError:
    return FieldError(path=path, error_type=FieldErrorType.INVALID, detail=detail)


class AggregateValidationError(ValueError):
    """Every violation found in one document, reported together."""

    def __init__(self, subject: str, errors: list[FieldError]) -> None:
        self.subject = subject
        self.errors = list(errors)
        joined = ", ".join(str(e) for e in self.errors)
        if len(self.errors) > 1:
            joined = f"[{joined}]"
        super().__init__(f"invalid {subject}: {joined}")


def raise_if_errors(subject: str, errors: list[FieldError]) -> None:
    if errors:
        raise AggregateValidationError(subject, errors)
