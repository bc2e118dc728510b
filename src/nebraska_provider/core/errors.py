"""
Error types for the Nebraska provider.

Every failure is surfaced to the caller as a diagnostic made of a short
summary and a detailed message. Nothing here is retried: a failed call
aborts the whole operation and the orchestrator decides what to do next.
"""

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """Structured diagnostic reported back to the orchestrator."""

    severity: Severity
    summary: str
    detail: str

    def __str__(self) -> str:
        return f"{self.summary}: {self.detail}"


class ProviderError(Exception):
    """Base class for all provider errors."""

    def __init__(self, summary: str, detail: str):
        super().__init__(f"{summary}: {detail}")
        self.summary = summary
        self.detail = detail

    def diagnostic(self) -> Diagnostic:
        """Convert the error into an error-severity diagnostic."""
        return Diagnostic(Severity.ERROR, self.summary, self.detail)


class ConfigurationError(ProviderError):
    """Provider configuration failed (auth mode mismatch, missing credentials)."""


class ApiRequestError(ProviderError):
    """The request never produced a response (connection, DNS, timeout)."""


class ApiResponseError(ProviderError):
    """The server answered with a non-success status code."""

    def __init__(self, step: str, status_code: int, body: str):
        super().__init__(step, f"Got invalid response code:{status_code}\n resp:{body}")
        self.status_code = status_code
        self.body = body


class NotFoundError(ProviderError):
    """A business-key lookup exhausted all pages without a match."""


class InvalidAttributeError(ProviderError):
    """An attribute value failed validation before being sent."""

    def __init__(self, attribute: str, detail: str):
        super().__init__(f"Invalid {attribute}", detail)
        self.attribute = attribute
