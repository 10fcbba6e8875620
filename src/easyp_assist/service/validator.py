"""Bridge to the ``easyp`` command line tool."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from pydantic import ValidationError

from easyp_assist.models.errors import ValidateConfigResponse
from easyp_assist.settings import Settings

logger = logging.getLogger("easyp_assist.validator")


def parse_validate_config_response(raw: str) -> ValidateConfigResponse | None:
    """Parse ``validate-config --format json`` output; ``None`` when unusable."""
    if not raw.strip():
        return None
    try:
        return ValidateConfigResponse.model_validate_json(raw)
    except ValidationError as exc:
        logger.warning("easyp validate-config returned unparseable output: %s", exc)
        return None


class EasypCli:
    """Runs ``easyp`` subcommands and decodes their JSON output.

    Holds no state between calls; the executable, working directory and
    default config path come from :class:`Settings`.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def _command(self, config_path: str | None, *subcommand: str) -> list[str]:
        command = [self._settings.cli_executable]
        # Global flags must precede the subcommand.
        if config_path:
            command += ["--cfg", config_path]
        command += list(subcommand)
        return command

    def validate_config(
        self, config_path: str | Path | None = None, timeout: float | None = None
    ) -> ValidateConfigResponse | None:
        """Run ``easyp validate-config`` against *config_path*.

        Falls back to the configured path when *config_path* is not given.
        Returns ``None`` when the tool cannot be run or its output is not
        a validation report.
        """
        cfg = str(config_path) if config_path else (self._settings.config_path or "").strip()
        command = self._command(cfg or None, "validate-config", "--format", "json")
        timeout = self._settings.validate_timeout_seconds if timeout is None else timeout
        cwd = self._settings.project_root or None

        logger.debug("running %s (cwd=%s)", command, cwd)
        try:
            completed = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("easyp validate-config timed out after %.1fs", timeout)
            return None
        except OSError as exc:
            logger.warning("easyp validate-config could not be started: %s", exc)
            return None

        response = parse_validate_config_response(completed.stdout)
        if response is None and completed.returncode != 0:
            logger.warning(
                "easyp validate-config failed: exit=%d stderr=%s",
                completed.returncode,
                completed.stderr.strip(),
            )
        return response
