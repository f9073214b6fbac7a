from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Severity = Literal["error", "warning", "information"]

DEFAULT_SEVERITY_BY_CODE: dict[str, Severity] = {
    "not_found": "warning",
    "not_a_folder": "warning",
}


@dataclass
class HedgeError(Exception):
    code: str
    message: str
    detail: str | None = None
    severity: Severity = "error"

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class LoadError(HedgeError):
    """The tree description is unreachable or malformed."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(code="load_failed", message=message, detail=detail)


class NotFound(HedgeError):
    def __init__(self, path: str) -> None:
        super().__init__(code="not_found", message=f"Path not found: {path}")
        self.path = path


class NotAFolder(HedgeError):
    def __init__(self, path: str) -> None:
        super().__init__(code="not_a_folder", message=f"Not a folder: {path}")
        self.path = path


class HandlerError(HedgeError):
    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(code="handler", message=message, detail=detail)


def format_error(error: BaseException) -> tuple[str, Severity]:
    if isinstance(error, HedgeError):
        prefix = f"[{error.code}] " if error.code else ""
        severity = DEFAULT_SEVERITY_BY_CODE.get(error.code, error.severity)
        return f"{prefix}{error}", severity
    return f"{error}", "error"


def wrap_error(
    error: BaseException,
    *,
    code: str,
    message: str,
    severity: Severity = "error",
) -> HedgeError:
    if isinstance(error, HedgeError):
        return error
    detail = str(error)
    return HedgeError(code=code, message=message, detail=detail, severity=severity)
