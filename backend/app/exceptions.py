"""Custom exception classes for Repo Insights.

All exceptions follow the error format:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable message",
        "details": {}  # optional
    }
}

The insights engine itself never raises for missing or malformed
repository data; these errors cover configuration and request input.
"""

from __future__ import annotations

from typing import Any


class InsightsBaseError(Exception):
    """Base exception for Repo Insights."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class RegistryConfigError(InsightsBaseError):
    """Technology registry override could not be loaded."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="REGISTRY_CONFIG_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


class ValidationError(InsightsBaseError):
    """Input validation error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=422,
            details=details,
        )
