"""Completion engine: one entry point over both context resolvers.

For every request the engine

1. runs the indentation-based text scan, which always succeeds;
2. parses the document with a completion hint spliced in at the caret and,
   when that parse succeeds, asks the tree resolver for its view;
3. reconciles the two key-context paths and looks the winner up in the
   schema tables.

Nothing is cached between calls, so one engine instance can serve
concurrent requests.
"""

from __future__ import annotations

import logging

from easyp_assist.completion.insertion import InsertionRenderer
from easyp_assist.completion.reconcile import choose_key_context
from easyp_assist.completion.suggestions import build_suggestion, key_suggestions
from easyp_assist.completion.text_scan import TextScanResolver, clamp, scan
from easyp_assist.completion.tree import TreeContext, TreeResolver
from easyp_assist.completion.trigger import should_auto_popup
from easyp_assist.completion.values import value_suggestions
from easyp_assist.models.completion import CompletionResult, ResolvedContext, TextEdit
from easyp_assist.parser.loader import COMPLETION_HINT, TrackedLoader
from easyp_assist.schema.tables import expected_keys, scalar_item_suggestions

logger = logging.getLogger("easyp_assist.completion")

_PREFIX_STOP = frozenset(" \t\r\n:-")


def completion_prefix(text: str, offset: int) -> str | None:
    """Characters typed before *offset* back to whitespace, ``:`` or ``-``."""
    offset = clamp(offset, text)
    start = offset
    while start > 0 and text[start - 1] not in _PREFIX_STOP:
        start -= 1
    return text[start:offset] or None


class CompletionEngine:
    """Suggestions, insert edits and auto-popup decisions for ``easyp.yaml``."""

    def __init__(self, loader: TrackedLoader | None = None) -> None:
        self._loader = loader or TrackedLoader()
        self._text_resolver = TextScanResolver()
        self._tree_resolver = TreeResolver()
        self._renderer = InsertionRenderer()

    # -- suggestions ---------------------------------------------------------

    def suggestions_from_text(self, text: str, offset: int) -> list[str]:
        """Suggestions from the text scan alone, without parsing."""
        return self._text_resolver.suggestions(text, clamp(offset, text))

    def complete(self, text: str, offset: int) -> CompletionResult:
        offset = clamp(offset, text)
        prefix = completion_prefix(text, offset)
        replace_start = offset - len(prefix) if prefix else offset

        values, context, source = self._resolve(text, offset)
        suggestions = [
            build_suggestion(
                value,
                value_position=context.is_value_position,
                key_context_path=context.key_context_path,
                value_path=context.value_path,
            )
            for value in values
        ]
        logger.debug(
            "completion offset=%d source=%s context=%s suggestions=%d",
            offset,
            source,
            context.key_context_path,
            len(suggestions),
        )
        return CompletionResult(
            suggestions=suggestions,
            context=context,
            prefix=prefix,
            replace_start=replace_start,
            replace_end=offset,
            source=source,
        )

    def _tree_context(self, text: str, offset: int) -> TreeContext | None:
        if not text:
            return None
        snapshot = self._loader.load_for_completion(text, offset)
        if snapshot is None:
            return None
        return self._tree_resolver.resolve(snapshot)

    def _text_fallback(
        self, text: str, offset: int
    ) -> tuple[list[str], ResolvedContext, str]:
        return (
            self._text_resolver.suggestions(text, offset),
            self._text_resolver.resolve(text, offset),
            "text",
        )

    def _resolve(self, text: str, offset: int) -> tuple[list[str], ResolvedContext, str]:
        tree = self._tree_context(text, offset)
        if tree is None:
            return self._text_fallback(text, offset)

        if tree.is_value_position:
            values = value_suggestions(tree.value_path)
            if not values:
                return self._text_fallback(text, offset)
            context = ResolvedContext(
                key_context_path=tree.key_context_path,
                value_path=tree.value_path,
                is_value_position=True,
            )
            return values, context, "tree"

        text_path = self._text_resolver.key_context_path(text, offset)
        key_context = choose_key_context(text_path, tree.key_context_path)
        from_tree = key_context == tree.key_context_path
        if from_tree:
            inside_item = tree.inside_sequence_item_mapping
        else:
            inside_item = scan(text, offset).inside_sequence_item_mapping
        context = ResolvedContext(
            key_context_path=key_context,
            inside_sequence_item_mapping=inside_item,
        )
        source = "tree" if from_tree else "text"

        if not expected_keys(key_context):
            scalars = scalar_item_suggestions(key_context)
            if scalars:
                return scalars, context, source
            return self._text_fallback(text, offset)

        state = scan(text, offset)
        existing = [
            key for key in tree.existing_keys if key != COMPLETION_HINT
        ] if from_tree else []
        values = key_suggestions(
            key_context, existing, state.current_line, state.previous_meaningful
        )
        if values:
            return values, context, source
        return self._text_fallback(text, offset)

    # -- insertion -----------------------------------------------------------

    def insert(self, text: str, offset: int, suggestion: str) -> TextEdit:
        """Edit that accepts *suggestion* over the prefix typed before *offset*."""
        offset = clamp(offset, text)
        prefix = completion_prefix(text, offset)
        start = offset - len(prefix) if prefix else offset
        _, context, _ = self._resolve(text, offset)
        return self._renderer.render(text, start, offset, suggestion, context)

    # -- auto popup ----------------------------------------------------------

    @staticmethod
    def should_auto_popup(typed_char: str, text: str, offset: int) -> bool:
        return should_auto_popup(typed_char, text, offset)
