"""Domain models for easyp-assist."""

from easyp_assist.models.completion import (
    CompletionResult,
    InsertPlan,
    ResolvedContext,
    Suggestion,
    TextEdit,
    ValueKind,
)
from easyp_assist.models.errors import ValidateConfigResponse, ValidationIssue
from easyp_assist.models.schema_path import ROOT, SchemaPath

__all__ = [
    "ROOT",
    "CompletionResult",
    "InsertPlan",
    "ResolvedContext",
    "SchemaPath",
    "Suggestion",
    "TextEdit",
    "ValidateConfigResponse",
    "ValidationIssue",
    "ValueKind",
]
