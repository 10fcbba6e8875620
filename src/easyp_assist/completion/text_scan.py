"""Indentation-based resolver for partial or syntactically broken documents.

Editors call the engine mid-keystroke, when the document often does not
parse: dangling colons, empty dash lines, half-typed keys.  This resolver
rebuilds the schema path from raw text alone by scanning the lines above the
cursor and tracking which container keys are still "open" at each indent.

The scan is ``O(lines before cursor)`` and keeps all state request-local.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from easyp_assist.completion.suggestions import narrow_plugin_starters
from easyp_assist.completion.values import value_suggestions
from easyp_assist.models.completion import ResolvedContext
from easyp_assist.models.schema_path import SEQUENCE_SUFFIX, SchemaPath
from easyp_assist.schema.tables import (
    KEY_COMPLETIONS,
    expected_keys,
    is_known_container,
    scalar_item_suggestions,
)


def clamp(offset: int, text: str) -> int:
    return max(0, min(offset, len(text)))


def leading_indent(line: str) -> int:
    """Column of the first non-whitespace character (line length if blank)."""
    stripped = line.lstrip()
    return len(line) - len(stripped)


def split_lines(text: str) -> list[str]:
    return [line.rstrip("\r") for line in text.split("\n")]


def is_meaningful(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith("#")


def previous_meaningful_line(lines: list[str]) -> str | None:
    """Nearest non-blank, non-comment line, scanning upwards."""
    for line in reversed(lines):
        if is_meaningful(line):
            return line
    return None


def split_key(body: str) -> tuple[str, str] | None:
    """``(key, inline_value)`` for ``key: value`` text, ``None`` without a colon."""
    key, sep, value = body.partition(":")
    if not sep:
        return None
    return key.strip(), value.strip()


def strip_dash(trimmed: str) -> str:
    return trimmed.removeprefix("-").lstrip()


def opens_container(line: str) -> bool:
    """True for ``key:`` lines (or ``- key:`` items) with no inline value."""
    trimmed = line.lstrip()
    if ":" not in trimmed:
        return False
    body = strip_dash(trimmed) if trimmed.startswith("-") else trimmed
    parts = split_key(body)
    return parts is not None and not parts[1]


# ---------------------------------------------------------------------------
# Indent stack
# ---------------------------------------------------------------------------


@dataclass
class _Scope:
    """An open container key and the column it was declared at."""

    indent: int
    key: str
    item_indent: int | None = None  # column of the latest dash under this key

    def mark_sequence(self, dash_indent: int) -> None:
        if not self.key.endswith(SEQUENCE_SUFFIX):
            self.key = f"{self.key}{SEQUENCE_SUFFIX}"
        self.item_indent = dash_indent


def _push_line(stack: list[_Scope], line: str) -> None:
    trimmed = line.strip()
    if not trimmed or trimmed.startswith("#"):
        return

    indent = leading_indent(line)
    while stack and indent <= stack[-1].indent:
        stack.pop()

    if trimmed.startswith("-"):
        if stack:
            stack[-1].mark_sequence(indent)
        parts = split_key(strip_dash(trimmed))
        if parts is not None:
            key, inline_value = parts
            if key and not inline_value:
                # Sequence item that is itself a mapping: "- key:"
                stack.append(_Scope(indent + 1, key))
        return

    parts = split_key(trimmed)
    if parts is not None:
        key, inline_value = parts
        if key and not inline_value:
            stack.append(_Scope(indent, key))


def _should_preserve_container(current_line: str, previous_lines: list[str]) -> bool:
    """A blank line at column 0 right after ``key:`` still belongs to ``key``."""
    if current_line.strip():
        return False
    if leading_indent(current_line) != 0:
        return False
    previous = previous_meaningful_line(previous_lines)
    return previous is not None and opens_container(previous)


@dataclass
class ScanState:
    """Everything the scan learned about the cursor's line."""

    current_line: str
    previous_lines: list[str]
    scopes: list[_Scope] = field(default_factory=list)

    @property
    def trimmed(self) -> str:
        return self.current_line.lstrip()

    @property
    def is_blank(self) -> bool:
        return not self.current_line.strip()

    @property
    def starts_with_dash(self) -> bool:
        return self.trimmed.startswith("-")

    @property
    def stack_path(self) -> SchemaPath:
        return SchemaPath.from_keys([scope.key for scope in self.scopes])

    @property
    def sequence_path(self) -> SchemaPath:
        return self.stack_path.as_sequence()

    @property
    def previous_meaningful(self) -> str | None:
        return previous_meaningful_line(self.previous_lines)

    @property
    def current_key(self) -> str | None:
        """The key typed on the current line when it already has a colon."""
        if ":" not in self.trimmed:
            return None
        body = strip_dash(self.trimmed) if self.starts_with_dash else self.trimmed
        parts = split_key(body)
        if parts is None or not parts[0]:
            return None
        return parts[0]

    @property
    def inside_sequence_item_mapping(self) -> bool:
        """Cursor is on a continuation line of a ``- key: ...`` item."""
        if not self.scopes or self.starts_with_dash:
            return False
        top = self.scopes[-1]
        if top.item_indent is None:
            return False
        return leading_indent(self.current_line) > top.item_indent


def scan(text: str, offset: int) -> ScanState:
    """Build the indent stack for the line holding *offset*."""
    offset = clamp(offset, text)
    before = text[:offset]
    head, _, current_line = before.rpartition("\n")
    current_line = current_line.rstrip("\r")
    previous_lines = split_lines(head) if head else []

    stack: list[_Scope] = []
    for line in previous_lines:
        _push_line(stack, line)

    if not _should_preserve_container(current_line, previous_lines):
        current_indent = leading_indent(current_line)
        while stack and current_indent <= stack[-1].indent:
            stack.pop()

    return ScanState(current_line=current_line, previous_lines=previous_lines, scopes=stack)


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class TextScanResolver:
    """Reconstructs schema path and cursor semantics from text and offset only."""

    def suggestions(self, text: str, offset: int) -> list[str]:
        """Suggestions using nothing but the text above the cursor."""
        if not text:
            return list(KEY_COMPLETIONS[""])

        state = scan(text, offset)
        previous = state.previous_meaningful
        stack_path = state.stack_path

        if state.is_blank:
            for candidate in (stack_path, state.sequence_path):
                keys = expected_keys(candidate)
                if keys:
                    return narrow_plugin_starters(
                        candidate, list(keys), state.trimmed, previous
                    )
            return scalar_item_suggestions(state.sequence_path) or []

        key = state.current_key
        if key is not None:
            base = state.sequence_path if state.starts_with_dash else stack_path
            return value_suggestions(base.child(key))

        key_path = state.sequence_path if state.starts_with_dash else stack_path
        keys = expected_keys(key_path)
        if keys:
            return narrow_plugin_starters(key_path, list(keys), state.trimmed, previous)
        return scalar_item_suggestions(key_path) or []

    def key_context_path(self, text: str, offset: int) -> SchemaPath | None:
        """The container whose keys belong at the cursor, or ``None``."""
        if not text:
            return None
        state = scan(text, offset)
        direct = state.stack_path
        if state.is_blank and is_known_container(direct):
            return direct
        sequence = state.sequence_path
        if (state.is_blank or state.starts_with_dash) and is_known_container(sequence):
            return sequence
        return direct or None

    def value_path(self, text: str, offset: int) -> SchemaPath | None:
        """Full path of the key typed on the cursor's line, if it has a colon."""
        if not text:
            return None
        key = scan(text, offset).current_key
        if key is None:
            return None
        base = self.key_context_path(text, offset)
        if base is None:
            return SchemaPath.from_keys([key])
        return base.child(key)

    def resolve(self, text: str, offset: int) -> ResolvedContext:
        key_context = self.key_context_path(text, offset)
        if not text:
            return ResolvedContext(key_context_path=key_context)
        state = scan(text, offset)
        value_path = self.value_path(text, offset)
        if value_path is not None:
            return ResolvedContext(
                key_context_path=key_context,
                value_path=value_path,
                is_value_position=True,
            )
        return ResolvedContext(
            key_context_path=key_context,
            inside_sequence_item_mapping=state.inside_sequence_item_mapping,
        )
