"""Structured document nodes with character ranges and parent links.

A closed set of variants: mappings, key-values, sequences, sequence items
and scalars.  Trees are built once per request by
:class:`~easyp_assist.parser.loader.TrackedLoader` and are read-only once built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TextRange:
    """Half-open character range ``[start, end)``."""

    start: int
    end: int

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def contains_inclusive(self, offset: int) -> bool:
        return self.start <= offset <= self.end


@dataclass(eq=False)
class ScalarNode:
    range: TextRange
    value: Any = None
    parent: Node | None = field(default=None, repr=False)


@dataclass(eq=False)
class KeyValueNode:
    range: TextRange
    key: str
    key_range: TextRange
    value: Node | None = None
    parent: MappingNode | None = field(default=None, repr=False)

    @property
    def key_text(self) -> str:
        return self.key.strip()


@dataclass(eq=False)
class MappingNode:
    range: TextRange
    entries: list[KeyValueNode] = field(default_factory=list)
    parent: Node | None = field(default=None, repr=False)

    def keys(self) -> list[str]:
        return [entry.key_text for entry in self.entries if entry.key_text]


@dataclass(eq=False)
class SequenceItemNode:
    range: TextRange
    value: Node | None = None
    parent: SequenceNode | None = field(default=None, repr=False)


@dataclass(eq=False)
class SequenceNode:
    range: TextRange
    items: list[SequenceItemNode] = field(default_factory=list)
    parent: Node | None = field(default=None, repr=False)


# The union of all node variants.
Node = MappingNode | KeyValueNode | SequenceNode | SequenceItemNode | ScalarNode


def children(node: Node) -> list[Node]:
    if isinstance(node, MappingNode):
        return list(node.entries)
    if isinstance(node, KeyValueNode):
        return [node.value] if node.value is not None else []
    if isinstance(node, SequenceNode):
        return list(node.items)
    if isinstance(node, SequenceItemNode):
        return [node.value] if node.value is not None else []
    return []


def ancestors(node: Node | None) -> list[Node]:
    """*node* followed by its parents up to the document root."""
    chain: list[Node] = []
    while node is not None:
        chain.append(node)
        node = node.parent
    return chain


@dataclass
class DocumentTree:
    """A parsed document: the text it was built from and its root node."""

    text: str
    root: Node | None

    def node_at(self, offset: int) -> Node | None:
        """Innermost node whose range contains *offset*."""
        node = self.root
        if node is None or not node.range.contains_inclusive(offset):
            return None
        while True:
            for child in children(node):
                if child.range.contains(offset) or (
                    child.range.end == node.range.end
                    and child.range.contains_inclusive(offset)
                ):
                    node = child
                    break
            else:
                return node
