"""Tests for the easyp CLI bridge, validation caching and issue presentation."""

from __future__ import annotations

import time
from pathlib import Path

from easyp_assist.models.errors import ValidateConfigResponse
from easyp_assist.parser.nodes import TextRange
from easyp_assist.service.presentation import Severity, to_diagnostics, to_severity, to_text_range
from easyp_assist.service.validation_service import ValidationService, hash_content
from easyp_assist.service.validator import EasypCli, parse_validate_config_response
from easyp_assist.settings import Settings
from tests.conftest import cli_calls, write_script

RAW_RESPONSE = """
{
  "valid": false,
  "errors": [
    {
      "code": "yaml_validation",
      "message": "directory.path is required",
      "line": 7,
      "column": 9,
      "severity": "error"
    }
  ],
  "warnings": [
    {
      "code": "yaml_validation",
      "message": "unknown key \\"unknown_top\\"",
      "line": 2,
      "column": 1,
      "severity": "warn"
    }
  ]
}
"""


class TestResponseParsing:
    def test_parses_errors_and_warnings(self) -> None:
        response = parse_validate_config_response(RAW_RESPONSE)
        assert response is not None
        assert not response.valid
        assert len(response.errors) == 1
        assert len(response.warnings) == 1
        assert response.errors[0].severity == "error"
        assert response.warnings[0].severity == "warn"
        assert [issue.line for issue in response.issues] == [7, 2]

    def test_missing_lists_default_to_empty(self) -> None:
        response = parse_validate_config_response('{"valid": true}')
        assert response == ValidateConfigResponse(valid=True)

    def test_unusable_output(self) -> None:
        assert parse_validate_config_response("") is None
        assert parse_validate_config_response("panic: boom") is None
        assert parse_validate_config_response('{"errors": [{"line": 1}]}') is None


class TestPresentation:
    def test_severity_mapping(self) -> None:
        assert to_severity("error") is Severity.ERROR
        assert to_severity("warn") is Severity.WARNING
        assert to_severity("WARNING") is Severity.WARNING
        assert to_severity("info") is Severity.WEAK_WARNING
        assert to_severity(None) is Severity.WEAK_WARNING

    def test_line_and_column_map_to_range(self) -> None:
        text = "version: v1alpha\nunknown_top: 1"
        line_start = len("version: v1alpha\n")
        assert to_text_range(text, 2, 3) == TextRange(line_start + 2, len(text))

    def test_column_out_of_range_starts_at_line(self) -> None:
        text = "version: v1alpha\nunknown_top: 1"
        line_start = len("version: v1alpha\n")
        assert to_text_range(text, 2, 99) == TextRange(line_start, len(text))
        assert to_text_range(text, 1, None) == TextRange(0, len("version: v1alpha"))

    def test_invalid_line_returns_no_range(self) -> None:
        assert to_text_range("version: v1alpha", 9, 1) is None
        assert to_text_range("version: v1alpha", 0, 1) is None
        assert to_text_range("version: v1alpha\n\nlint:", 2, 1) is None

    def test_diagnostics(self) -> None:
        response = parse_validate_config_response(RAW_RESPONSE)
        assert response is not None
        diagnostics = to_diagnostics("version: v1alpha\nunknown_top: 1", response)
        assert [d.severity for d in diagnostics] == [Severity.ERROR, Severity.WARNING]
        # line 7 is past the end of the document: file-level diagnostic
        assert diagnostics[0].range is None
        assert diagnostics[1].range is not None


class TestEasypCli:
    def test_cfg_flag_precedes_subcommand(self, settings: Settings, fake_cli: Path) -> None:
        config = Path(settings.project_root or "") / "easyp.yaml"
        config.write_text("version: v1alpha\n", encoding="utf-8")
        response = EasypCli(settings).validate_config(config)
        assert response == ValidateConfigResponse(valid=True)
        assert cli_calls(fake_cli) == [f"--cfg {config} validate-config --format json"]

    def test_reports_warnings(self, settings: Settings, tmp_path: Path) -> None:
        config = tmp_path / "cfg.yaml"
        config.write_text("unknown_top: 1\nversion: v1alpha\n", encoding="utf-8")
        response = EasypCli(settings).validate_config(config)
        assert response is not None
        assert response.valid
        assert 'unknown key "unknown_top"' in response.warnings[0].message

    def test_nonzero_exit_with_report_is_parsed(self, settings: Settings, tmp_path: Path) -> None:
        config = tmp_path / "cfg.yaml"
        config.write_text("broken: true\n", encoding="utf-8")
        response = EasypCli(settings).validate_config(config)
        assert response is not None
        assert not response.valid
        assert response.errors[0].message == "directory.path is required"

    def test_missing_executable(self, tmp_path: Path) -> None:
        settings = Settings(_env_file=None, easyp_cli_path=str(tmp_path / "does-not-exist"))
        assert EasypCli(settings).validate_config(tmp_path / "easyp.yaml") is None

    def test_timeout(self, tmp_path: Path) -> None:
        slow = write_script(tmp_path / "slow-easyp", "#!/bin/sh\nexec sleep 5\n")
        settings = Settings(_env_file=None, easyp_cli_path=str(slow))
        assert EasypCli(settings).validate_config(tmp_path / "easyp.yaml", timeout=0.2) is None

    def test_garbage_output(self, tmp_path: Path) -> None:
        noisy = write_script(tmp_path / "noisy-easyp", "#!/bin/sh\necho 'not json'\nexit 2\n")
        settings = Settings(_env_file=None, easyp_cli_path=str(noisy))
        assert EasypCli(settings).validate_config(tmp_path / "easyp.yaml") is None


class TestValidationService:
    def test_uses_unsaved_snapshot(self, settings: Settings) -> None:
        service = ValidationService(settings)
        first = service.validate("easyp.yaml", "version: v1alpha\n")
        assert first.warnings == []

        time.sleep(settings.validate_debounce_ms / 1000 + 0.1)
        second = service.validate("easyp.yaml", "unknown_top: 1\nversion: v1alpha\n")
        assert any('unknown key "unknown_top"' in w.message for w in second.warnings)

    def test_changed_content_inside_debounce_window_revalidates(
        self, settings: Settings
    ) -> None:
        service = ValidationService(settings)
        first = service.validate("easyp.yaml", "unknown_top: 1\nversion: v1alpha\n")
        assert first.warnings

        second = service.validate("easyp.yaml", "version: v1alpha")
        assert second.warnings == []
        assert second.errors == []

    def test_same_content_is_cached(self, settings: Settings, fake_cli: Path) -> None:
        service = ValidationService(settings)
        content = "version: v1alpha\n"
        first = service.validate("easyp.yaml", content)
        second = service.validate("easyp.yaml", content)
        assert first is second
        assert len(cli_calls(fake_cli)) == 1

        service.clear()
        service.validate("easyp.yaml", content)
        assert len(cli_calls(fake_cli)) == 2

    def test_cache_is_per_target(self, settings: Settings, fake_cli: Path) -> None:
        service = ValidationService(settings)
        service.validate("a/easyp.yaml", "version: v1alpha\n")
        service.validate("b/easyp.yaml", "version: v1alpha\n")
        assert len(cli_calls(fake_cli)) == 2

    def test_cache_is_bounded(self, settings: Settings, fake_cli: Path) -> None:
        small = settings.model_copy(update={"validate_cache_size": 2})
        service = ValidationService(small)
        for index in range(5):
            service.validate("easyp.yaml", f"version: v1alpha\n# {index}\n")
        assert len(service._responses) == 2
        assert len(cli_calls(fake_cli)) == 5

        service.validate("easyp.yaml", "version: v1alpha\n# 3\n")
        assert len(cli_calls(fake_cli)) == 5
        service.validate("easyp.yaml", "version: v1alpha\n# 0\n")
        assert len(cli_calls(fake_cli)) == 6
        assert len(service._responses) == 2

    def test_cache_hit_keeps_entry_alive(self, settings: Settings, fake_cli: Path) -> None:
        small = settings.model_copy(update={"validate_cache_size": 2})
        service = ValidationService(small)
        first, second, third = (f"version: v1alpha\n# {name}\n" for name in "abc")
        service.validate("easyp.yaml", first)
        service.validate("easyp.yaml", second)
        service.validate("easyp.yaml", first)
        service.validate("easyp.yaml", third)
        assert len(cli_calls(fake_cli)) == 3

        service.validate("easyp.yaml", first)
        assert len(cli_calls(fake_cli)) == 3
        service.validate("easyp.yaml", second)
        assert len(cli_calls(fake_cli)) == 4

    def test_missing_cli_clears_diagnostics(self, tmp_path: Path) -> None:
        settings = Settings(_env_file=None, easyp_cli_path=str(tmp_path / "missing"))
        response = ValidationService(settings).validate("easyp.yaml", "version: v1alpha\n")
        assert response == ValidateConfigResponse(valid=True)

    def test_temp_snapshot_removed(self, settings: Settings, fake_cli: Path) -> None:
        ValidationService(settings).validate("easyp.yaml", "version: v1alpha\n")
        cfg = cli_calls(fake_cli)[0].split()[1]
        assert not Path(cfg).exists()

    def test_hash_content(self) -> None:
        assert hash_content("a") == hash_content("a")
        assert hash_content("a") != hash_content("b")
        assert len(hash_content("")) == 64
