"""YAML loader that turns a ruamel.yaml parse into position-aware nodes."""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError

from easyp_assist.parser.nodes import (
    DocumentTree,
    KeyValueNode,
    MappingNode,
    Node,
    ScalarNode,
    SequenceItemNode,
    SequenceNode,
    TextRange,
)

logger = logging.getLogger("easyp_assist.parser")

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 1_000_000  # 1M characters

# Placeholder spliced in at the caret so that half-typed lines still parse
# into a node at the cursor position.
COMPLETION_HINT = "__easyp_complete__"


class YAMLSafetyError(Exception):
    """Raised when YAML input violates safety constraints (e.g. oversized documents)."""


@dataclass
class CompletionSnapshot:
    """A document parsed with the completion hint spliced in at the caret."""

    tree: DocumentTree
    anchor: int  # offset of the hint inside ``tree.text``


def _line_starts(text: str) -> list[int]:
    starts = [0]
    for index, char in enumerate(text):
        if char == "\n":
            starts.append(index + 1)
    return starts


def splice_completion_hint(text: str, offset: int) -> tuple[str, int, bool]:
    """Insert the completion hint at *offset*.

    Returns the patched text, the offset the hint starts at, and whether it
    was inserted as a key (``hint:``) rather than a plain value.
    """
    offset = max(0, min(offset, len(text)))
    line_start = text.rfind("\n", 0, offset) + 1
    trimmed = text[line_start:offset].lstrip()
    body = trimmed.removeprefix("-").lstrip() if trimmed.startswith("-") else trimmed
    # Plain scalars need a space after ":" or "-" to end the indicator.
    lead = " " if trimmed.endswith((":", "-")) else ""
    key_hint = ":" not in body
    hint = f"{lead}{COMPLETION_HINT}:" if key_hint else f"{lead}{COMPLETION_HINT}"
    return text[:offset] + hint + text[offset:], offset + len(lead), key_hint


class TrackedLoader:
    """YAML loader that tracks source positions for every node.

    Uses ruamel.yaml which preserves line/column info on every parsed
    collection.  A fresh parser is created per call so one loader can serve
    concurrent requests.
    """

    # -- safety checks -------------------------------------------------------

    @staticmethod
    def _check_yaml_safety(content: str) -> None:
        if len(content) > _MAX_DOCUMENT_SIZE:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum size "
                f"({len(content):,} chars > {_MAX_DOCUMENT_SIZE:,} limit)"
            )

    # -- public loading API --------------------------------------------------

    def load(self, path: Path) -> DocumentTree:
        """Load a YAML file into a document tree."""
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_string(content)

    def load_string(self, content: str) -> DocumentTree:
        """Parse *content*; raises ``YAMLError`` or ``YAMLSafetyError``."""
        self._check_yaml_safety(content)
        yaml = YAML()
        data = yaml.load(content)
        if data is None:
            return DocumentTree(text=content, root=None)
        builder = _TreeBuilder(content)
        root = builder.build(data, 0, len(content), None)
        return DocumentTree(text=content, root=root)

    def load_for_completion(self, text: str, offset: int) -> CompletionSnapshot | None:
        """Parse *text* with the completion hint at *offset*; ``None`` if it does not parse."""
        patched, anchor, _ = splice_completion_hint(text, offset)
        try:
            tree = self.load_string(patched)
        except (YAMLError, YAMLSafetyError) as exc:
            logger.debug("completion parse failed at offset %d: %s", offset, exc)
            return None
        if tree.root is None:
            return None
        return CompletionSnapshot(tree=tree, anchor=anchor)


class _TreeBuilder:
    """Converts ruamel.yaml CommentedMap/Seq values into :mod:`nodes` variants."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._line_starts = _line_starts(text)

    def _offset(self, position: Any, default: int) -> int:
        try:
            line, col = position
        except (TypeError, ValueError):
            return default
        if line is None or col is None or line < 0 or line >= len(self._line_starts):
            return default
        return min(self._line_starts[line] + col, len(self._text))

    def _line_end(self, offset: int) -> int:
        index = bisect.bisect_right(self._line_starts, offset)
        if index < len(self._line_starts):
            return self._line_starts[index] - 1
        return len(self._text)

    @staticmethod
    def _collection_position(value: Any) -> tuple[int, int] | None:
        try:
            return value.lc.line, value.lc.col
        except AttributeError:
            return None

    def build(self, data: Any, start: int, end: int, parent: Node | None) -> Node:
        if isinstance(data, CommentedMap):
            return self._build_mapping(data, start, end, parent)
        if isinstance(data, CommentedSeq):
            return self._build_sequence(data, start, end, parent)
        return ScalarNode(range=TextRange(start, end), value=data, parent=parent)

    def _value_start(self, value: Any, position: Any, default: int, end: int) -> int:
        own = self._collection_position(value)
        offset = self._offset(own if own is not None else position, default)
        return min(max(offset, default), end)

    def _build_mapping(
        self, data: CommentedMap, start: int, end: int, parent: Node | None
    ) -> MappingNode:
        node = MappingNode(range=TextRange(start, end), parent=parent)
        keys = list(data.keys())
        key_starts: list[int] = []
        for key in keys:
            try:
                position = data.lc.key(key)
            except (AttributeError, KeyError, TypeError):
                position = None
            key_starts.append(min(max(self._offset(position, start), start), end))

        for index, key in enumerate(keys):
            kv_start = key_starts[index]
            kv_end = key_starts[index + 1] if index + 1 < len(keys) else end
            kv_end = max(kv_end, kv_start)
            colon = self._text.find(":", kv_start, self._line_end(kv_start))
            if colon >= 0:
                key_end = colon
                key_text = self._text[kv_start:colon].strip().strip("\"'")
            else:
                key_text = "" if key is None else str(key)
                key_end = min(kv_start + len(key_text), kv_end)
            entry = KeyValueNode(
                range=TextRange(kv_start, kv_end),
                key=key_text,
                key_range=TextRange(kv_start, key_end),
                parent=node,
            )
            value = data[key]
            if value is not None:
                try:
                    position = data.lc.value(key)
                except (AttributeError, KeyError, TypeError):
                    position = None
                value_start = self._value_start(value, position, min(key_end + 1, kv_end), kv_end)
                entry.value = self.build(value, value_start, kv_end, entry)
            node.entries.append(entry)
        return node

    def _build_sequence(
        self, data: CommentedSeq, start: int, end: int, parent: Node | None
    ) -> SequenceNode:
        node = SequenceNode(range=TextRange(start, end), parent=parent)
        item_starts: list[int] = []
        for index in range(len(data)):
            try:
                position = data.lc.item(index)
            except (AttributeError, KeyError, TypeError):
                position = None
            item_starts.append(min(max(self._offset(position, start), start), end))

        for index, value in enumerate(data):
            item_start = item_starts[index]
            item_end = item_starts[index + 1] if index + 1 < len(data) else end
            item_end = max(item_end, item_start)
            item = SequenceItemNode(range=TextRange(item_start, item_end), parent=node)
            if value is not None:
                value_start = self._value_start(value, None, item_start, item_end)
                item.value = self.build(value, value_start, item_end, item)
            node.items.append(item)
        return node
