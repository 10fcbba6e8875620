"""When typing a character should open the suggestion list on its own."""

from __future__ import annotations

from easyp_assist.completion.text_scan import clamp, previous_meaningful_line, split_lines

_ALWAYS = frozenset({":", "-", "\n"})
_WHITESPACE = frozenset({" ", "\t"})


def _opens_block(line: str) -> bool:
    trimmed = line.strip()
    if trimmed.endswith(":"):
        return True
    return trimmed.startswith("-") and trimmed[1:].strip().endswith(":")


def should_auto_popup(typed_char: str, text: str, offset: int) -> bool:
    """True when *typed_char*, just typed before *offset*, should pop completions."""
    if typed_char in _ALWAYS:
        return True
    if typed_char not in _WHITESPACE or not text:
        return False

    offset = clamp(offset, text)
    head, _, line = text[:offset].rpartition("\n")
    typed = line.rstrip("\r").lstrip()
    # Hosts may report the offset either before or after the typed whitespace.
    before = typed.rstrip(" \t")
    if before.endswith(("-", ":")):
        return True
    if before:
        return False

    previous = previous_meaningful_line(split_lines(head)) if head else None
    return previous is not None and _opens_block(previous)
