"""YAML parsing with position tracking for easyp-assist."""

from easyp_assist.parser.loader import CompletionSnapshot, TrackedLoader, YAMLSafetyError
from easyp_assist.parser.nodes import DocumentTree

__all__ = [
    "CompletionSnapshot",
    "DocumentTree",
    "TrackedLoader",
    "YAMLSafetyError",
]
