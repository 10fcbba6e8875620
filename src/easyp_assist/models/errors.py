"""Structured validation results reported by ``easyp validate-config``."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ValidationIssue(BaseModel):
    """A single error or warning with an optional 1-based source position."""

    model_config = ConfigDict(extra="ignore")

    code: str | None = None
    message: str
    line: int | None = None
    column: int | None = None
    severity: str | None = None


class ValidateConfigResponse(BaseModel):
    """Result of validating a config snapshot."""

    model_config = ConfigDict(extra="ignore")

    valid: bool = True
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    @property
    def issues(self) -> list[ValidationIssue]:
        return [*self.errors, *self.warnings]
