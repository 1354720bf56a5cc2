"""Error taxonomy surfaced to HTTP clients as ``{"status": "error", "message": ...}``."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

STORAGE_ERROR_MESSAGE = "Database error, please try contacting the administrator"


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class FieldIssue:
    """A single validation problem; ``field`` is ``None`` for cross-field rules."""

    field: Optional[str]
    message: str


class ValidationError(ApiError):
    status_code = 400

    def __init__(self, issues: Iterable[FieldIssue]) -> None:
        self.issues: List[FieldIssue] = list(issues)
        super().__init__("\n".join(issue.message for issue in self.issues))

    @property
    def fields(self) -> List[Optional[str]]:
        return [issue.field for issue in self.issues]


class InvalidFilter(FieldIssue):
    """Problem with one parameter of the product listing query string."""


class NotFoundError(ApiError):
    status_code = 404


class UnauthorizedError(ApiError):
    status_code = 401


class StorageError(ApiError):
    """Wraps a driver failure; the driver diagnostic stays in ``detail`` and the logs."""

    status_code = 500

    def __init__(self, detail: str = "") -> None:
        super().__init__(STORAGE_ERROR_MESSAGE)
        self.detail = detail


def issues_from_pydantic(errors: Iterable[dict]) -> List[FieldIssue]:
    """Flatten pydantic error dicts, keeping the validator's own message when it raised one."""
    issues: List[FieldIssue] = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or None
        raised = error.get("ctx", {}).get("error")
        if raised is not None:
            message = str(raised)
        elif field:
            message = f"{field}: {error.get('msg', 'Invalid value')}"
        else:
            message = error.get("msg", "Invalid value")
        issues.append(FieldIssue(field=field, message=message))
    return issues
