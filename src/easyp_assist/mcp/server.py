"""FastMCP server exposing easyp config completion and validation as MCP tools.

Run via::

    easyp-assist-mcp                       # reads .env (default: stdio)
    MCP_TRANSPORT=http easyp-assist-mcp    # streamable HTTP on port 9000
    MCP_TRANSPORT=sse  easyp-assist-mcp    # legacy SSE on port 9000

Settings are loaded from environment variables and ``.env`` file.
"""

from __future__ import annotations

import json
import logging

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from easyp_assist import __version__
from easyp_assist.completion.engine import CompletionEngine
from easyp_assist.config_reference import EASYP_REFERENCE
from easyp_assist.service.presentation import to_diagnostics
from easyp_assist.service.validation_service import ValidationService
from easyp_assist.settings import Settings
from easyp_assist.target import is_target_config_file, resolved_config_path

# ---------------------------------------------------------------------------
# Server + shared state
# ---------------------------------------------------------------------------

logger = logging.getLogger("easyp_assist.mcp")

mcp = FastMCP("easyp-assist")
_settings: Settings | None = None
_engine: CompletionEngine | None = None
_validation_service: ValidationService | None = None


def init_state(settings: Settings) -> None:
    """Create the engine and validation service used by the tools."""
    global _settings, _engine, _validation_service  # noqa: PLW0603
    _settings = settings
    _engine = CompletionEngine()
    _validation_service = ValidationService(settings)


def _require_engine() -> CompletionEngine:
    if _engine is None:
        raise ToolError("Completion engine not initialised")
    return _engine


def _check_target(path: str | None) -> None:
    if _settings is None:
        raise ToolError("Settings not initialised")
    if path is not None and not is_target_config_file(path, _settings):
        raise ToolError(
            f"'{path}' is not the configured easyp config ({_settings.configured_path})"
        )


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@mcp.resource("easyp://reference")
def easyp_reference() -> str:
    """Full easyp.yaml format reference: lint, deps, generate, breaking."""
    return EASYP_REFERENCE


@mcp.tool
def get_config_reference() -> str:
    """Get the easyp.yaml format reference.

    Call this before writing an easyp config by hand.  Returns every
    top-level section with examples.
    """
    return EASYP_REFERENCE


# ---------------------------------------------------------------------------
# Completion tools
# ---------------------------------------------------------------------------


@mcp.tool
def complete(text: str, offset: int, path: str | None = None) -> str:
    """List completion suggestions at a caret position in an easyp.yaml document.

    Args:
        text: Full document text.
        offset: Zero-based caret offset (clamped to the text).
        path: Optional file path; rejected when it is not the configured config.
    """
    _check_target(path)
    result = _require_engine().complete(text, offset)
    context = result.context
    where = (
        f"value of '{context.value_path}'"
        if context.is_value_position
        else f"keys under '{context.key_context_path or '<root>'}'"
    )
    if not result.suggestions:
        return f"No suggestions ({where})."
    lines = [f"Suggestions for {where}:", ""]
    for suggestion in result.suggestions:
        hint = f"  [{suggestion.type_hint}]" if suggestion.type_hint else ""
        lines.append(f"  {suggestion.value}{hint}")
    return "\n".join(lines)


@mcp.tool
def insert_completion(text: str, offset: int, suggestion: str, path: str | None = None) -> str:
    """Apply an accepted suggestion and return the edit as JSON.

    The result has ``start``, ``end``, ``new_text``, ``caret`` and the full
    updated ``text``.

    Args:
        text: Full document text.
        offset: Zero-based caret offset.
        suggestion: The suggestion value to accept (as returned by ``complete``).
        path: Optional file path; rejected when it is not the configured config.
    """
    _check_target(path)
    edit = _require_engine().insert(text, offset, suggestion)
    return json.dumps(
        {
            "start": edit.start,
            "end": edit.end,
            "new_text": edit.new_text,
            "caret": edit.caret,
            "text": edit.apply(text),
        },
        indent=2,
    )


@mcp.tool
def should_auto_popup(typed_char: str, text: str, offset: int) -> bool:
    """Whether typing ``typed_char`` at ``offset`` should open the suggestion list.

    Args:
        typed_char: The single character just typed.
        text: Full document text.
        offset: Zero-based caret offset.
    """
    if len(typed_char) != 1:
        raise ToolError("typed_char must be a single character")
    return _require_engine().should_auto_popup(typed_char, text, offset)


# ---------------------------------------------------------------------------
# Validation tools
# ---------------------------------------------------------------------------


@mcp.tool
def validate_config(content: str, path: str | None = None) -> str:
    """Validate easyp.yaml content with ``easyp validate-config``.

    The content may be unsaved; it is validated from a temporary file.

    Args:
        content: The config text to validate.
        path: Optional file path; rejected when it is not the configured config.
    """
    _check_target(path)
    if _validation_service is None or _settings is None:
        raise ToolError("Validation service not initialised")
    resolved = resolved_config_path(_settings)
    target = str(resolved) if resolved is not None else (path or _settings.configured_path)
    response = _validation_service.validate(target, content)

    diagnostics = to_diagnostics(content, response)
    if not diagnostics:
        return "Config is valid." if response.valid else "Config is invalid."
    header = "Config is valid with warnings:" if response.valid else "Config is invalid:"
    lines = [header, ""]
    for diagnostic in diagnostics:
        issue_code = f" ({diagnostic.code})" if diagnostic.code else ""
        location = (
            f" @ {diagnostic.range.start}-{diagnostic.range.end}" if diagnostic.range else ""
        )
        lines.append(f"  - [{diagnostic.severity}]{issue_code} {diagnostic.message}{location}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the MCP server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "easyp-assist MCP Server v%s starting (transport=%s)",
        __version__,
        settings.mcp_transport,
    )
    init_state(settings)

    if settings.mcp_transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(
            transport=settings.mcp_transport,
            host=settings.mcp_server_host,
            port=settings.mcp_server_port,
            log_level=settings.log_level.lower(),
        )


if __name__ == "__main__":
    main()
