"""Shared test fixtures for easyp-assist."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from easyp_assist.completion.engine import CompletionEngine
from easyp_assist.completion.text_scan import TextScanResolver
from easyp_assist.parser.loader import TrackedLoader
from easyp_assist.settings import Settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SAMPLE_CONFIG_YAML = """\
version: v1alpha

lint:
  use:
    - DEFAULT
  allow_comment_ignores: false

deps:
  - github.com/googleapis/googleapis
  - github.com/google/gnostic

generate:
  inputs:
    - directory:
        path: api
        root: "."
  plugins:
    - remote: "api.easyp.tech/protocolbuffers/go"
      out: internal/pb
      opts:
        paths: source_relative
    - name: go-grpc
      out: internal/pb

breaking:
  against_git_ref: main
"""

# Mimics `easyp [--cfg <path>] validate-config --format json`: reports an
# unknown-key warning when the config mentions "unknown_top", and records
# every invocation in calls.log next to the script.
FAKE_CLI_SCRIPT = """\
#!/bin/sh
set -eu
HERE="$(dirname "$0")"
echo "$@" >> "$HERE/calls.log"
CFG=""
while [ "$#" -gt 0 ]; do
  case "$1" in
    --cfg|--config)
      CFG="$2"
      shift 2
      ;;
    *)
      shift
      ;;
  esac
done

if [ -n "$CFG" ] && grep -q "unknown_top" "$CFG"; then
  cat <<'JSON'
{"valid": true, "warnings": [{"code":"yaml_validation","message":"unknown key \\"unknown_top\\"","line":1,"column":1,"severity":"warn"}]}
JSON
elif [ -n "$CFG" ] && grep -q "broken" "$CFG"; then
  cat <<'JSON'
{"valid": false, "errors": [{"code":"yaml_validation","message":"directory.path is required","line":2,"column":3,"severity":"error","extra":"ignored"}]}
JSON
  exit 1
else
  cat <<'JSON'
{"valid": true}
JSON
fi
"""


def write_script(path: Path, body: str) -> Path:
    path.write_text(body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def loader() -> TrackedLoader:
    return TrackedLoader()


@pytest.fixture
def engine(loader: TrackedLoader) -> CompletionEngine:
    return CompletionEngine(loader)


@pytest.fixture
def text_resolver() -> TextScanResolver:
    return TextScanResolver()


@pytest.fixture
def fake_cli(tmp_path: Path) -> Path:
    """An executable stand-in for the easyp CLI."""
    cli_dir = tmp_path / "bin"
    cli_dir.mkdir()
    return write_script(cli_dir / "fake-easyp", FAKE_CLI_SCRIPT)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def settings(fake_cli: Path, project_root: Path) -> Settings:
    return Settings(
        _env_file=None,
        easyp_cli_path=str(fake_cli),
        project_root=str(project_root),
        validate_timeout_seconds=5.0,
    )


def cli_calls(fake_cli: Path) -> list[str]:
    """Argument lines recorded by the fake CLI."""
    log = fake_cli.parent / "calls.log"
    if not log.exists():
        return []
    return log.read_text(encoding="utf-8").splitlines()
