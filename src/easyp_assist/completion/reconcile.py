"""Choosing between the tree-derived and the text-scan key context.

Structured parses are reliable for committed syntax but fall back to the
nearest enclosing valid node on the line being edited, which is often too
shallow.  The text scan is weaker in general and wins precisely there.
"""

from __future__ import annotations

from easyp_assist.models.schema_path import ROOT, SchemaPath
from easyp_assist.schema.tables import is_known_container


def prefer_text_scan(text_path: SchemaPath | None, tree_path: SchemaPath | None) -> bool:
    """True when the text-scan path should override the tree path."""
    if not text_path:
        return False
    if is_known_container(text_path):
        return True
    if not tree_path:
        return True
    return text_path.is_more_specific_than(tree_path)


def choose_key_context(
    text_path: SchemaPath | None, tree_path: SchemaPath | None
) -> SchemaPath:
    """The authoritative key context path for a completion request."""
    if text_path is not None and prefer_text_scan(text_path, tree_path):
        return text_path
    if tree_path and is_known_container(tree_path):
        return tree_path
    if text_path:
        return text_path
    return tree_path if tree_path is not None else ROOT
