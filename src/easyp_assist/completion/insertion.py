"""Turns an accepted suggestion into the exact text edit to apply."""

from __future__ import annotations

from dataclasses import dataclass

from easyp_assist.completion.suggestions import join_key
from easyp_assist.models.completion import InsertPlan, ResolvedContext, TextEdit, ValueKind
from easyp_assist.models.schema_path import SchemaPath
from easyp_assist.schema.tables import (
    ENUM_DEFAULTS,
    PLACEHOLDER_URL,
    TEMPLATE_ARRAY,
    TEMPLATE_LABELS,
    TEMPLATE_MAP,
    TEMPLATE_STRING,
    TEMPLATE_URL,
    kind_of,
)

_QUOTED_URL = f'"{PLACEHOLDER_URL}"'
_DEFAULT_ENUM = "v1alpha"


@dataclass(frozen=True)
class LineMeta:
    """Indentation and content of the line holding an offset."""

    start: int
    indent: str
    trimmed: str

    @property
    def starts_with_dash(self) -> bool:
        return self.trimmed.startswith("-")


def line_meta(text: str, offset: int) -> LineMeta:
    offset = max(0, min(offset, len(text)))
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    raw = text[start : end if end >= 0 else len(text)].rstrip("\r")
    trimmed = raw.lstrip()
    return LineMeta(start=start, indent=raw[: len(raw) - len(trimmed)], trimmed=trimmed)


def sequence_dash_start(text: str, offset: int) -> int | None:
    """Offset of a leading ``-`` typed before *offset* on its line, if nothing but a key follows."""
    offset = max(0, min(offset, len(text)))
    meta = line_meta(text, offset)
    typed = text[meta.start : offset]
    dash = typed.find("-")
    if dash < 0:
        return None
    if typed[:dash].strip():
        return None
    if ":" in typed[dash + 1 :]:
        return None
    return meta.start + dash


def _caret_in_first_quotes(text: str) -> int:
    index = text.find('""')
    return index + 1 if index >= 0 else len(text)


def key_template(
    suggestion: str,
    full_path: SchemaPath,
    context_path: SchemaPath | None,
    line_indent: str,
    line_starts_with_dash: bool,
    inside_sequence_item_mapping: bool,
) -> InsertPlan:
    """Template for writing *suggestion* as a new key."""
    sequence_entry = context_path is not None and context_path.is_sequence_item
    nested = line_indent + ("    " if sequence_entry or line_starts_with_dash else "  ")
    prefix = (
        "- "
        if sequence_entry and not line_starts_with_dash and not inside_sequence_item_mapping
        else ""
    )
    head = f"{prefix}{suggestion}:"

    match str(full_path):
        case "generate.inputs[].directory":
            text = f'{head}\n{nested}path: ""\n{nested}root: "."'
            return InsertPlan(text, _caret_in_first_quotes(text))
        case "generate.inputs[].git_repo":
            text = f'{head}\n{nested}url: ""\n{nested}sub_directory: ""\n{nested}root: ""'
            return InsertPlan(text, _caret_in_first_quotes(text))
        case "generate.plugins[].command":
            text = f"{head}\n{nested}- "
            return InsertPlan(text, len(text))

    kind = kind_of(full_path)
    if kind is ValueKind.MAP:
        text = f"{head}\n{nested}"
        return InsertPlan(text, len(text))
    if kind is ValueKind.ARRAY:
        text = f"{head}\n{nested}- "
        return InsertPlan(text, len(text))
    if kind is ValueKind.STRING:
        text = f'{head} ""'
        return InsertPlan(text, len(text) - 1)
    if kind is ValueKind.BOOLEAN:
        text = f"{head} false"
        return InsertPlan(text, len(text))
    if kind is ValueKind.ENUM:
        text = f"{head} {ENUM_DEFAULTS.get(str(full_path), _DEFAULT_ENUM)}"
        return InsertPlan(text, len(text))
    if kind is ValueKind.URL:
        text = f"{head} {_QUOTED_URL}"
        return InsertPlan(text, len(text) - 1)
    text = f"{head} "
    return InsertPlan(text, len(text))


def value_template(
    suggestion: str,
    value_path: SchemaPath | None,
    line_indent: str,
    line_starts_with_dash: bool,
    sequence_context: bool,
) -> InsertPlan:
    """Template for writing *suggestion* as the value of the key on this line."""
    nested = line_indent + ("    " if line_starts_with_dash or sequence_context else "  ")
    if suggestion == TEMPLATE_MAP:
        text = f"\n{nested}"
        return InsertPlan(text, len(text))
    if suggestion == TEMPLATE_ARRAY:
        text = f"\n{nested}- "
        return InsertPlan(text, len(text))
    if suggestion == TEMPLATE_STRING:
        return InsertPlan('""', 1)
    if suggestion == TEMPLATE_URL:
        return InsertPlan(_QUOTED_URL, len(_QUOTED_URL) - 1)

    kind = kind_of(value_path) if value_path is not None else None
    if kind is ValueKind.MAP:
        text = f"\n{nested}"
    elif kind is ValueKind.ARRAY:
        text = f"\n{nested}- "
    elif kind is ValueKind.STRING:
        return InsertPlan('""', 1)
    elif kind is ValueKind.URL:
        return InsertPlan(_QUOTED_URL, len(_QUOTED_URL) - 1)
    elif kind is ValueKind.BOOLEAN and suggestion not in ("true", "false"):
        text = "false"
    else:
        text = suggestion
    return InsertPlan(text, len(text))


class InsertionRenderer:
    """Builds the replacement for ``text[start:end]`` when a suggestion is accepted."""

    def render(
        self,
        text: str,
        start: int,
        end: int,
        suggestion: str,
        context: ResolvedContext,
    ) -> TextEdit:
        end = max(0, min(end, len(text)))
        start = max(0, min(start, end))
        meta = line_meta(text, start)
        sequence_context = context.is_sequence_context
        replace_from = start
        line_starts_with_dash = meta.starts_with_dash

        if not context.is_value_position and sequence_context and line_starts_with_dash:
            # A dash typed on a fresh item line is replaced by the templated "- key:" line.
            dash = sequence_dash_start(text, end)
            if dash is not None:
                replace_from = dash
                line_starts_with_dash = False

        if context.is_value_position:
            plan = value_template(
                suggestion,
                context.value_path,
                meta.indent,
                meta.starts_with_dash,
                sequence_context,
            )
        elif suggestion in TEMPLATE_LABELS:
            # Sentinels at a key position stand for a bare scalar sequence item.
            plan = value_template(
                suggestion,
                context.key_context_path,
                meta.indent,
                line_starts_with_dash,
                sequence_context,
            )
            if not line_starts_with_dash:
                plan = plan.with_dash()
        else:
            plan = key_template(
                suggestion,
                join_key(context.key_context_path, suggestion),
                context.key_context_path,
                meta.indent,
                line_starts_with_dash,
                context.inside_sequence_item_mapping,
            )

        if (
            not context.is_value_position
            and replace_from > 0
            and text[replace_from - 1] == "-"
            and (replace_from == 1 or text[replace_from - 2].isspace())
            and not plan.text.startswith(" ")
        ):
            plan = plan.with_leading_space()

        return TextEdit(
            start=replace_from,
            end=end,
            new_text=plan.text,
            caret=replace_from + plan.caret,
        )
