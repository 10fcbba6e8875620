"""Value-position suggestions derived from the value-kind tables."""

from __future__ import annotations

from easyp_assist.models.schema_path import SchemaPath
from easyp_assist.schema.tables import (
    ANY_VALUE_PATHS,
    BOOLEAN_VALUE_PATHS,
    ENUM_DEFAULTS,
    MAP_VALUE_PATHS,
    SEQUENCE_VALUE_PATHS,
    STRING_VALUE_PATHS,
    TEMPLATE_ARRAY,
    TEMPLATE_MAP,
    TEMPLATE_STRING,
    TEMPLATE_URL,
    URL_VALUE_PATHS,
)


def value_suggestions(path: SchemaPath | str | None) -> list[str]:
    """Candidates for the value at *path*, in fixed order without duplicates."""
    key = "" if path is None else str(path)
    variants: dict[str, None] = {}

    def add(*values: str) -> None:
        for value in values:
            variants.setdefault(value, None)

    if key in ENUM_DEFAULTS:
        add(ENUM_DEFAULTS[key])
    if key in BOOLEAN_VALUE_PATHS:
        add("true", "false")
    if key in SEQUENCE_VALUE_PATHS:
        add(TEMPLATE_ARRAY)
    if key in MAP_VALUE_PATHS:
        add(TEMPLATE_MAP)
    if key in STRING_VALUE_PATHS:
        add(TEMPLATE_STRING)
    if key in URL_VALUE_PATHS:
        add(TEMPLATE_URL)
    if key in ANY_VALUE_PATHS:
        add(TEMPLATE_STRING, "true", "0", TEMPLATE_ARRAY, TEMPLATE_MAP)
    return list(variants)
