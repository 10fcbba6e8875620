"""Unit tests for MCP server tools: direct function calls, no transport.

FastMCP's ``@mcp.tool`` wraps functions in ``FunctionTool`` objects.  We call
the underlying function via ``.fn`` to test the business logic directly.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastmcp.exceptions import ToolError

# Import the module-level state so we can swap it between tests
import easyp_assist.mcp.server as mcp_mod
from easyp_assist.mcp.server import (
    EASYP_REFERENCE,
    complete,
    easyp_reference,
    get_config_reference,
    insert_completion,
    should_auto_popup,
    validate_config,
)
from easyp_assist.settings import Settings
from tests.conftest import SAMPLE_CONFIG_YAML, cli_calls

# Unwrap FunctionTool → raw functions
_complete = complete.fn
_insert_completion = insert_completion.fn
_should_auto_popup = should_auto_popup.fn
_validate_config = validate_config.fn
_get_config_reference = get_config_reference.fn


@pytest.fixture(autouse=True)
def _fresh_state(settings: Settings) -> None:
    """Give each test a fresh engine and validation service."""
    mcp_mod.init_state(settings)


# ---------------------------------------------------------------------------
# Completion tools
# ---------------------------------------------------------------------------


class TestComplete:
    def test_root_keys(self) -> None:
        result = _complete("", 0)
        assert result.startswith("Suggestions for keys under '<root>':")
        for key in ("version", "lint", "deps", "generate", "breaking"):
            assert f"  {key}" in result

    def test_sequence_item_keys(self) -> None:
        text = "generate:\n  inputs:\n    - "
        result = _complete(text, len(text))
        assert "keys under 'generate.inputs[]'" in result
        assert "  directory  [map]" in result
        assert "  git_repo  [map]" in result

    def test_value_position(self) -> None:
        result = _complete("version: ", 9)
        assert result.startswith("Suggestions for value of 'version':")
        assert "  v1alpha  [enum]" in result

    def test_no_suggestions(self) -> None:
        text = "custom:\n  nested:\n    "
        assert _complete(text, len(text)).startswith("No suggestions")

    def test_target_path_accepted(self, project_root: Path) -> None:
        result = _complete("", 0, path=str(project_root / "easyp.yaml"))
        assert "version" in result

    def test_other_path_rejected(self, project_root: Path) -> None:
        with pytest.raises(ToolError, match="not the configured easyp config"):
            _complete("", 0, path=str(project_root / "buf.yaml"))

    def test_uninitialised(self) -> None:
        mcp_mod._settings = None
        with pytest.raises(ToolError, match="Settings not initialised"):
            _complete("", 0)


class TestInsertCompletion:
    def test_scaffold_edit(self) -> None:
        text = "generate:\n  inputs:\n    -"
        edit = json.loads(_insert_completion(text, len(text), "directory"))
        assert edit["text"] == (
            'generate:\n  inputs:\n    - directory:\n        path: ""\n        root: "."'
        )
        assert edit["text"][edit["caret"] - 1 : edit["caret"] + 1] == '""'
        assert edit["end"] == len(text)

    def test_value_edit(self) -> None:
        edit = json.loads(_insert_completion("version: ", 9, "v1alpha"))
        assert edit["new_text"] == "v1alpha"
        assert edit["text"] == "version: v1alpha"

    def test_other_path_rejected(self) -> None:
        with pytest.raises(ToolError):
            _insert_completion("", 0, "version", path="/elsewhere/other.yaml")


class TestShouldAutoPopup:
    def test_colon(self) -> None:
        assert _should_auto_popup(":", "version", 7) is True

    def test_plain_space(self) -> None:
        assert _should_auto_popup(" ", "remote", 6) is False

    def test_multi_character_rejected(self) -> None:
        with pytest.raises(ToolError, match="single character"):
            _should_auto_popup("ab", "", 0)


# ---------------------------------------------------------------------------
# Validation tools
# ---------------------------------------------------------------------------


class TestValidateConfig:
    def test_valid(self, fake_cli: Path) -> None:
        assert _validate_config(SAMPLE_CONFIG_YAML) == "Config is valid."
        assert len(cli_calls(fake_cli)) == 1

    def test_warnings(self) -> None:
        result = _validate_config("unknown_top: 1\nversion: v1alpha\n")
        assert result.startswith("Config is valid with warnings:")
        assert '[warning] (yaml_validation) unknown key "unknown_top" @ 0-14' in result

    def test_errors(self) -> None:
        result = _validate_config("version: v1alpha\nbroken: true\n")
        assert result.startswith("Config is invalid:")
        assert "[error] (yaml_validation) directory.path is required" in result

    def test_other_path_rejected(self, fake_cli: Path, project_root: Path) -> None:
        with pytest.raises(ToolError, match="not the configured easyp config"):
            _validate_config("version: v1alpha\n", path=str(project_root / "other.yaml"))
        assert cli_calls(fake_cli) == []


# ---------------------------------------------------------------------------
# Reference
# ---------------------------------------------------------------------------


class TestReference:
    def test_reference_tool(self) -> None:
        text = _get_config_reference()
        for section in ("version", "lint", "deps", "generate", "breaking"):
            assert section in text

    def test_reference_resource(self) -> None:
        assert easyp_reference.fn() == EASYP_REFERENCE
