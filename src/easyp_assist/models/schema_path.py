"""Dotted schema paths such as ``generate.plugins[].opts``."""

from __future__ import annotations

from dataclasses import dataclass

SEQUENCE_SUFFIX = "[]"


@dataclass(frozen=True)
class SchemaPath:
    """An ordered chain of container keys.

    A segment suffixed with ``[]`` means "item of the sequence bound to this
    key".  The root path has no segments and renders as ``""``.
    """

    segments: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for segment in self.segments:
            if not is_valid_segment(segment):
                raise ValueError(f"Invalid schema path segment '{segment}'")

    @classmethod
    def parse(cls, text: str | None) -> SchemaPath:
        if not text:
            return ROOT
        return cls(tuple(text.split(".")))

    @classmethod
    def of(cls, *segments: str) -> SchemaPath:
        return cls(tuple(segments))

    @classmethod
    def from_keys(cls, keys: list[str] | tuple[str, ...]) -> SchemaPath:
        """Build a path from document keys, skipping ones that cannot be segments."""
        return cls(tuple(key for key in keys if is_valid_segment(key)))

    def __str__(self) -> str:
        return ".".join(self.segments)

    def __bool__(self) -> bool:
        return bool(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def is_sequence_item(self) -> bool:
        return bool(self.segments) and self.segments[-1].endswith(SEQUENCE_SUFFIX)

    def child(self, key: str) -> SchemaPath:
        """Append *key*; a blank or malformed key leaves the path unchanged."""
        key = key.strip()
        if not is_valid_segment(key):
            return self
        return SchemaPath(self.segments + (key,))

    def sequence_item(self, key: str) -> SchemaPath:
        """Append ``key[]``; a blank or malformed key leaves the path unchanged."""
        key = key.strip()
        if not key or key.endswith(SEQUENCE_SUFFIX) or not is_valid_segment(key):
            return self
        return SchemaPath(self.segments + (f"{key}{SEQUENCE_SUFFIX}",))

    def as_sequence(self) -> SchemaPath:
        """Mark the last segment as a sequence item (root stays root)."""
        if not self.segments or self.is_sequence_item:
            return self
        return SchemaPath(self.segments[:-1] + (f"{self.segments[-1]}{SEQUENCE_SUFFIX}",))

    def is_more_specific_than(self, base: SchemaPath | str) -> bool:
        """True when this path extends *base* or is nested deeper than it."""
        candidate = str(self)
        base_text = str(base)
        if candidate == base_text:
            return False
        if candidate.startswith(f"{base_text}.") or candidate.startswith(
            f"{base_text}{SEQUENCE_SUFFIX}"
        ):
            return True
        return candidate.count(".") > base_text.count(".")


def is_valid_segment(segment: str) -> bool:
    key = segment.removesuffix(SEQUENCE_SUFFIX)
    return bool(key) and not key.endswith(SEQUENCE_SUFFIX)


ROOT = SchemaPath()
