"""Request-scoped completion results. Built fresh per request, never persisted."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from easyp_assist.models.schema_path import SchemaPath


class ValueKind(StrEnum):
    MAP = "map"
    ARRAY = "array"
    STRING = "string"
    BOOLEAN = "boolean"
    ENUM = "enum"
    URL = "url"
    ANY = "any"


@dataclass(frozen=True)
class ResolvedContext:
    """Where the cursor sits in the logical shape of the config."""

    key_context_path: SchemaPath | None = None
    value_path: SchemaPath | None = None
    is_value_position: bool = False
    inside_sequence_item_mapping: bool = False

    @property
    def is_sequence_context(self) -> bool:
        return self.key_context_path is not None and self.key_context_path.is_sequence_item


@dataclass(frozen=True)
class Suggestion:
    """A completion candidate: a key name, a literal, or a sentinel template."""

    value: str
    label: str
    type_hint: ValueKind | None = None
    tail_text: str | None = None


@dataclass(frozen=True)
class InsertPlan:
    """Literal text to splice in and where the caret lands inside it."""

    text: str
    caret: int

    def with_leading_space(self) -> InsertPlan:
        return InsertPlan(text=f" {self.text}", caret=self.caret + 1)

    def with_dash(self) -> InsertPlan:
        return InsertPlan(text=f"- {self.text}", caret=self.caret + 2)


@dataclass(frozen=True)
class TextEdit:
    """Replace ``text[start:end]`` with ``new_text``; ``caret`` is absolute."""

    start: int
    end: int
    new_text: str
    caret: int

    def apply(self, text: str) -> str:
        return text[: self.start] + self.new_text + text[self.end :]


@dataclass
class CompletionResult:
    """Ordered suggestions plus the context they were computed for."""

    suggestions: list[Suggestion]
    context: ResolvedContext
    prefix: str | None
    replace_start: int
    replace_end: int
    source: str = "text"

    @property
    def values(self) -> list[str]:
        return [s.value for s in self.suggestions]
