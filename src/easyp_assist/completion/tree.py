"""Schema paths derived from the structured document tree."""

from __future__ import annotations

from dataclasses import dataclass, field

from easyp_assist.models.completion import ValueKind
from easyp_assist.models.schema_path import ROOT, SchemaPath
from easyp_assist.parser.loader import CompletionSnapshot
from easyp_assist.parser.nodes import (
    KeyValueNode,
    MappingNode,
    Node,
    ScalarNode,
    SequenceItemNode,
    SequenceNode,
    ancestors,
)
from easyp_assist.schema.tables import kind_of


def path_of(node: Node | None) -> SchemaPath:
    """Walk from *node* up to the document root, collecting container keys."""
    if node is None:
        return ROOT
    if isinstance(node, KeyValueNode):
        return path_of(node.parent).child(node.key_text)
    if isinstance(node, MappingNode):
        if isinstance(node.parent, (KeyValueNode, SequenceItemNode)):
            return path_of(node.parent)
        return ROOT
    if isinstance(node, SequenceItemNode):
        sequence = node.parent
        if not isinstance(sequence, SequenceNode):
            return ROOT
        owner = sequence.parent
        if not isinstance(owner, KeyValueNode):
            return ROOT
        return path_of(owner.parent).sequence_item(owner.key_text)
    if isinstance(node, SequenceNode):
        if isinstance(node.parent, KeyValueNode):
            return path_of(node.parent)
        return ROOT
    if isinstance(node, ScalarNode):
        return path_of(node.parent)
    return ROOT


def _nearest(node: Node | None, kind: type) -> Node | None:
    for candidate in ancestors(node):
        if isinstance(candidate, kind):
            return candidate
    return None


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, max(0, min(offset, len(text))))


@dataclass
class TreeContext:
    """What the structured parse says about the cursor."""

    key_context_path: SchemaPath
    value_path: SchemaPath | None = None
    is_value_position: bool = False
    inside_sequence_item_mapping: bool = False
    existing_keys: list[str] = field(default_factory=list)


class TreeResolver:
    """Resolves cursor context from a parse taken with the completion hint spliced in."""

    def resolve(self, snapshot: CompletionSnapshot) -> TreeContext | None:
        tree = snapshot.tree
        anchor = snapshot.anchor
        node = tree.node_at(anchor)
        if node is None:
            return None

        key_value = _nearest(node, KeyValueNode)
        line_text = self._line_text(tree.text, anchor)

        if isinstance(key_value, KeyValueNode) and self._is_value_position(
            tree.text, anchor, key_value, line_text
        ):
            value_path = path_of(key_value)
            return TreeContext(
                key_context_path=path_of(key_value.parent),
                value_path=value_path,
                is_value_position=True,
            )

        if isinstance(key_value, KeyValueNode) and key_value.key_range.contains_inclusive(anchor):
            mapping: Node | None = key_value.parent
        else:
            # Cursor sits below a key on a following line: the key's parent
            # mapping (or the nearest mapping) owns the position.
            mapping = key_value.parent if isinstance(key_value, KeyValueNode) else None
            if mapping is None:
                mapping = _nearest(node, MappingNode)

        item = _nearest(node, SequenceItemNode)
        if isinstance(mapping, MappingNode):
            context_path = path_of(mapping)
            existing = [
                entry.key_text
                for entry in mapping.entries
                if entry.key_text and entry is not key_value
            ]
            inside_item = isinstance(mapping.parent, SequenceItemNode) and not (
                line_text.lstrip().startswith("-")
            )
        elif isinstance(item, SequenceItemNode):
            context_path = path_of(item)
            existing = []
            inside_item = False
        else:
            context_path = ROOT
            existing = []
            inside_item = False

        return TreeContext(
            key_context_path=context_path,
            existing_keys=existing,
            inside_sequence_item_mapping=inside_item,
        )

    @staticmethod
    def _line_text(text: str, offset: int) -> str:
        start = text.rfind("\n", 0, offset) + 1
        end = text.find("\n", offset)
        return text[start : end if end >= 0 else len(text)]

    @staticmethod
    def _is_value_position(
        text: str, anchor: int, key_value: KeyValueNode, line_text: str
    ) -> bool:
        key_range = key_value.key_range
        if anchor <= key_range.end:
            return False
        same_line = _line_of(text, key_range.end) == _line_of(text, anchor)
        if key_value.value is not None:
            if not same_line:
                # Container values on following lines take nested keys/items.
                if kind_of(path_of(key_value)) in (ValueKind.MAP, ValueKind.ARRAY):
                    return False
                if line_text.lstrip().startswith("-"):
                    return False
            return key_value.value.range.contains_inclusive(anchor)
        return same_line
