"""Static easyp config schema tables."""

from easyp_assist.schema.tables import (
    KEY_COMPLETIONS,
    TEMPLATE_ARRAY,
    TEMPLATE_MAP,
    TEMPLATE_STRING,
    TEMPLATE_URL,
    expected_keys,
    is_known_container,
    kind_of,
)

__all__ = [
    "KEY_COMPLETIONS",
    "TEMPLATE_ARRAY",
    "TEMPLATE_MAP",
    "TEMPLATE_STRING",
    "TEMPLATE_URL",
    "expected_keys",
    "is_known_container",
    "kind_of",
]
