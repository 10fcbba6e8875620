"""Static schema of the easyp config: container children and value kinds.

All tables are keyed by the canonical dotted path string (see
:class:`~easyp_assist.models.schema_path.SchemaPath`) and are immutable, so
they can be shared across concurrent requests.
"""

from __future__ import annotations

from types import MappingProxyType

from easyp_assist.models.completion import ValueKind
from easyp_assist.models.schema_path import SchemaPath

# ---------------------------------------------------------------------------
# Sentinel value templates
# ---------------------------------------------------------------------------

TEMPLATE_ARRAY = "<array>"
TEMPLATE_MAP = "<map>"
TEMPLATE_STRING = "<string>"
TEMPLATE_URL = "<url>"

TEMPLATE_LABELS = MappingProxyType(
    {
        TEMPLATE_ARRAY: "array",
        TEMPLATE_MAP: "map",
        TEMPLATE_STRING: "string",
        TEMPLATE_URL: "url",
    }
)

PLACEHOLDER_URL = "https://github.com/org/repo.git"
URL_TAIL_TEXT = " https://..."

# ---------------------------------------------------------------------------
# Container children
# ---------------------------------------------------------------------------

KEY_COMPLETIONS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "": ("version", "lint", "deps", "generate", "breaking"),
        "lint": (
            "use",
            "enum_zero_value_suffix",
            "service_suffix",
            "ignore",
            "except",
            "allow_comment_ignores",
            "ignore_only",
        ),
        "breaking": ("ignore", "against_git_ref"),
        "generate": ("inputs", "plugins", "managed"),
        "generate.inputs[]": ("directory", "git_repo"),
        "generate.inputs[].directory": ("path", "root"),
        "generate.inputs[].git_repo": ("url", "sub_directory", "root"),
        "generate.plugins[]": (
            "name",
            "remote",
            "path",
            "command",
            "out",
            "opts",
            "with_imports",
        ),
        "generate.managed": ("enabled", "disable", "override"),
        "generate.managed.disable[]": ("module", "path", "file_option", "field_option", "field"),
        "generate.managed.override[]": (
            "file_option",
            "field_option",
            "value",
            "module",
            "path",
            "field",
        ),
    }
)

# ---------------------------------------------------------------------------
# Value kinds
# ---------------------------------------------------------------------------

BOOLEAN_VALUE_PATHS = frozenset(
    {
        "lint.allow_comment_ignores",
        "generate.plugins[].with_imports",
        "generate.managed.enabled",
    }
)

URL_VALUE_PATHS = frozenset({"generate.inputs[].git_repo.url"})

STRING_VALUE_PATHS = frozenset(
    {
        "lint.enum_zero_value_suffix",
        "lint.service_suffix",
        "breaking.against_git_ref",
        "generate.inputs[].directory.path",
        "generate.inputs[].directory.root",
        "generate.inputs[].git_repo.sub_directory",
        "generate.inputs[].git_repo.root",
        "generate.plugins[].name",
        "generate.plugins[].remote",
        "generate.plugins[].path",
        "generate.plugins[].out",
        "generate.managed.disable[].module",
        "generate.managed.disable[].path",
        "generate.managed.disable[].file_option",
        "generate.managed.disable[].field_option",
        "generate.managed.disable[].field",
        "generate.managed.override[].file_option",
        "generate.managed.override[].field_option",
        "generate.managed.override[].module",
        "generate.managed.override[].path",
        "generate.managed.override[].field",
    }
)

SEQUENCE_VALUE_PATHS = frozenset(
    {
        "deps",
        "lint.use",
        "lint.ignore",
        "lint.except",
        "breaking.ignore",
        "generate.inputs",
        "generate.plugins",
        "generate.plugins[].command",
        "generate.managed.disable",
        "generate.managed.override",
    }
)

MAP_VALUE_PATHS = frozenset(
    {
        "lint",
        "lint.ignore_only",
        "breaking",
        "generate",
        "generate.managed",
        "generate.inputs[].directory",
        "generate.inputs[].git_repo",
        "generate.plugins[].opts",
    }
)

ANY_VALUE_PATHS = frozenset({"generate.managed.override[].value"})

# Sequences whose items are bare strings rather than mappings.
SCALAR_SEQUENCE_ITEM_PATHS = frozenset(
    {
        "deps[]",
        "lint.use[]",
        "lint.ignore[]",
        "lint.except[]",
        "breaking.ignore[]",
        "generate.plugins[].command[]",
    }
)

# Mutually exclusive keys that begin a new plugin item.
PLUGIN_SEQUENCE_PATH = "generate.plugins[]"
PLUGIN_STARTER_KEYS = frozenset({"remote", "path", "command", "name"})

ENUM_DEFAULTS = MappingProxyType({"version": "v1alpha"})

_EXCLUSIVE_SETS: dict[str, frozenset[str]] = {
    "boolean": BOOLEAN_VALUE_PATHS,
    "url": URL_VALUE_PATHS,
    "string": STRING_VALUE_PATHS,
    "array": SEQUENCE_VALUE_PATHS,
    "map": MAP_VALUE_PATHS,
}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def _key(path: SchemaPath | str | None) -> str:
    return "" if path is None else str(path)


def expected_keys(path: SchemaPath | str | None) -> tuple[str, ...]:
    """Child keys expected under *path*, or ``()`` for unknown paths."""
    return KEY_COMPLETIONS.get(_key(path), ())


def is_known_container(path: SchemaPath | str | None) -> bool:
    return _key(path) in KEY_COMPLETIONS


def kind_of(path: SchemaPath | str | None) -> ValueKind | None:
    """Classify the value at *path*; ``None`` when the schema does not know it."""
    key = _key(path)
    if key in ENUM_DEFAULTS:
        return ValueKind.ENUM
    if key in BOOLEAN_VALUE_PATHS:
        return ValueKind.BOOLEAN
    if key in URL_VALUE_PATHS:
        return ValueKind.URL
    if key in STRING_VALUE_PATHS:
        return ValueKind.STRING
    if key in SEQUENCE_VALUE_PATHS:
        return ValueKind.ARRAY
    if key in MAP_VALUE_PATHS:
        return ValueKind.MAP
    if key in ANY_VALUE_PATHS:
        return ValueKind.ANY
    return None


def scalar_item_suggestions(path: SchemaPath | str | None) -> list[str] | None:
    """The string template for sequences of bare strings, else ``None``."""
    key = _key(path)
    if not key or key not in SCALAR_SEQUENCE_ITEM_PATHS:
        return None
    return [TEMPLATE_STRING]


def check_disjoint() -> dict[str, list[str]]:
    """Return paths that appear in more than one exclusive value-kind set."""
    seen: dict[str, list[str]] = {}
    for kind, paths in _EXCLUSIVE_SETS.items():
        for path in paths:
            seen.setdefault(path, []).append(kind)
    return {path: kinds for path, kinds in sorted(seen.items()) if len(kinds) > 1}
