"""API request/response Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from easyp_assist.models.completion import CompletionResult, Suggestion, TextEdit
from easyp_assist.models.errors import ValidationIssue
from easyp_assist.service.presentation import Diagnostic


class CompletionRequest(BaseModel):
    """Request body for POST /completions."""

    text: str = Field(description="Full document text")
    offset: int = Field(description="Zero-based caret offset; clamped to the text")
    path: str | None = Field(
        default=None, description="File path, checked against the configured easyp config"
    )


class SuggestionDetail(BaseModel):
    value: str
    label: str
    type_hint: str | None = None
    tail_text: str | None = None

    @classmethod
    def from_suggestion(cls, suggestion: Suggestion) -> SuggestionDetail:
        return cls(
            value=suggestion.value,
            label=suggestion.label,
            type_hint=str(suggestion.type_hint) if suggestion.type_hint else None,
            tail_text=suggestion.tail_text,
        )


class CompletionResponse(BaseModel):
    """Response body for POST /completions."""

    suggestions: list[SuggestionDetail] = []
    prefix: str | None = None
    replace_start: int
    replace_end: int
    key_context_path: str | None = None
    value_path: str | None = None
    is_value_position: bool = False
    source: str = "text"

    @classmethod
    def from_result(cls, result: CompletionResult) -> CompletionResponse:
        context = result.context
        return cls(
            suggestions=[SuggestionDetail.from_suggestion(s) for s in result.suggestions],
            prefix=result.prefix,
            replace_start=result.replace_start,
            replace_end=result.replace_end,
            key_context_path=(
                str(context.key_context_path) if context.key_context_path is not None else None
            ),
            value_path=str(context.value_path) if context.value_path is not None else None,
            is_value_position=context.is_value_position,
            source=result.source,
        )


class InsertRequest(CompletionRequest):
    """Request body for POST /completions/insert."""

    suggestion: str = Field(description="Accepted suggestion value")


class InsertResponse(BaseModel):
    """Response body for POST /completions/insert."""

    start: int
    end: int
    new_text: str
    caret: int
    text: str = Field(description="Document text after applying the edit")

    @classmethod
    def from_edit(cls, edit: TextEdit, text: str) -> InsertResponse:
        return cls(
            start=edit.start,
            end=edit.end,
            new_text=edit.new_text,
            caret=edit.caret,
            text=edit.apply(text),
        )


class AutoPopupRequest(BaseModel):
    """Request body for POST /completions/auto-popup."""

    typed_char: str = Field(min_length=1, max_length=1, description="Character just typed")
    text: str
    offset: int


class AutoPopupResponse(BaseModel):
    auto_popup: bool


class ValidateRequest(BaseModel):
    """Request body for POST /validate."""

    content: str = Field(description="easyp.yaml content to validate (may be unsaved)")
    path: str | None = Field(default=None, description="File path of the edited config")


class DiagnosticDetail(BaseModel):
    """A validator issue placed in the document."""

    message: str
    severity: str
    code: str | None = None
    start: int | None = None
    end: int | None = None

    @classmethod
    def from_diagnostic(cls, diagnostic: Diagnostic) -> DiagnosticDetail:
        return cls(
            message=diagnostic.message,
            severity=str(diagnostic.severity),
            code=diagnostic.code,
            start=diagnostic.range.start if diagnostic.range else None,
            end=diagnostic.range.end if diagnostic.range else None,
        )


class ValidateResponse(BaseModel):
    """Response body for POST /validate."""

    valid: bool
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    diagnostics: list[DiagnosticDetail] = []


class ReferenceResponse(BaseModel):
    """Response for GET /reference/easyp."""

    reference: str = Field(description="easyp.yaml format reference text")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""
