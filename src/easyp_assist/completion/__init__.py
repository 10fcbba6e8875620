"""Context-aware completion for easyp configuration files."""

from easyp_assist.completion.engine import CompletionEngine, completion_prefix
from easyp_assist.completion.insertion import InsertionRenderer
from easyp_assist.completion.reconcile import choose_key_context
from easyp_assist.completion.text_scan import TextScanResolver
from easyp_assist.completion.tree import TreeResolver
from easyp_assist.completion.trigger import should_auto_popup

__all__ = [
    "CompletionEngine",
    "InsertionRenderer",
    "TextScanResolver",
    "TreeResolver",
    "choose_key_context",
    "completion_prefix",
    "should_auto_popup",
]
