"""Key-position suggestions, narrowing rules and display hints."""

from __future__ import annotations

from collections.abc import Iterable

from easyp_assist.models.completion import Suggestion, ValueKind
from easyp_assist.models.schema_path import SchemaPath
from easyp_assist.schema.tables import (
    ENUM_DEFAULTS,
    PLUGIN_SEQUENCE_PATH,
    PLUGIN_STARTER_KEYS,
    TEMPLATE_ARRAY,
    TEMPLATE_LABELS,
    TEMPLATE_MAP,
    TEMPLATE_STRING,
    TEMPLATE_URL,
    URL_TAIL_TEXT,
    expected_keys,
    kind_of,
)

_TEMPLATE_KINDS = {
    TEMPLATE_ARRAY: ValueKind.ARRAY,
    TEMPLATE_MAP: ValueKind.MAP,
    TEMPLATE_STRING: ValueKind.STRING,
    TEMPLATE_URL: ValueKind.URL,
}


def narrow_plugin_starters(
    context_path: SchemaPath | str | None,
    suggestions: list[str],
    current_line: str,
    previous_meaningful_line: str | None,
) -> list[str]:
    """Right after ``plugins:``, offer only the keys that begin a plugin item.

    Known limitation: this matches the previous line's trailing text.  It does
    not check whether a starter key was already entered in the current item.
    """
    if context_path is None or str(context_path) != PLUGIN_SEQUENCE_PATH:
        return suggestions
    previous = (previous_meaningful_line or "").lstrip()
    if current_line.strip() or not previous.endswith("plugins:"):
        return suggestions
    return [s for s in suggestions if s in PLUGIN_STARTER_KEYS]


def key_suggestions(
    context_path: SchemaPath | str | None,
    existing_keys: Iterable[str] = (),
    current_line: str = "",
    previous_meaningful_line: str | None = None,
) -> list[str]:
    """Expected keys at *context_path* minus siblings already present."""
    existing = set(existing_keys)
    remaining = [key for key in expected_keys(context_path) if key not in existing]
    return narrow_plugin_starters(
        context_path, remaining, current_line, previous_meaningful_line
    )


def join_key(context_path: SchemaPath | str | None, key: str) -> SchemaPath:
    """Full path of *key* written under *context_path*."""
    if context_path is None:
        return SchemaPath.of(key) if key else SchemaPath()
    base = context_path if isinstance(context_path, SchemaPath) else SchemaPath.parse(context_path)
    return base.child(key)


def type_hint_for_key(context_path: SchemaPath | str | None, key: str) -> ValueKind | None:
    return kind_of(join_key(context_path, key))


def type_hint_for_value(suggestion: str, value_path: SchemaPath | str | None) -> ValueKind | None:
    if suggestion in ENUM_DEFAULTS.values():
        return ValueKind.ENUM
    if suggestion in ("true", "false"):
        return ValueKind.BOOLEAN
    if suggestion in _TEMPLATE_KINDS:
        return _TEMPLATE_KINDS[suggestion]
    if value_path is None:
        return None
    return kind_of(value_path)


def build_suggestion(
    value: str,
    *,
    value_position: bool,
    key_context_path: SchemaPath | None,
    value_path: SchemaPath | None,
) -> Suggestion:
    """Attach the display label, type hint and tail text to a raw candidate."""
    if value_position or value in _TEMPLATE_KINDS:
        hint = type_hint_for_value(value, value_path)
    else:
        hint = type_hint_for_key(key_context_path, value)
    return Suggestion(
        value=value,
        label=TEMPLATE_LABELS.get(value, value),
        type_hint=hint,
        tail_text=URL_TAIL_TEXT if value == TEMPLATE_URL else None,
    )
