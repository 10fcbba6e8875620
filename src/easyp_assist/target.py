"""Which file on disk is the easyp config the assistant should act on."""

from __future__ import annotations

import os
from pathlib import Path

from easyp_assist.settings import Settings


def _normalize(path: Path) -> Path:
    return Path(os.path.normpath(path))


def resolved_config_path(settings: Settings, project_root: str | Path | None = None) -> Path | None:
    """Absolute, normalised config path, or ``None`` when it cannot be resolved.

    Absolute configured paths are used as is.  Relative ones resolve against
    *project_root* (falling back to ``settings.project_root``).
    """
    configured = Path(settings.configured_path)
    if configured.is_absolute():
        return _normalize(configured)
    base = project_root if project_root is not None else settings.project_root
    if not base:
        return None
    return _normalize(Path(base) / configured)


def is_target_config_file(
    path: str | Path, settings: Settings, project_root: str | Path | None = None
) -> bool:
    """True when *path* is the configured easyp config file."""
    candidate = Path(path)
    configured_name = Path(settings.configured_path).name or settings.configured_path

    resolved = resolved_config_path(settings, project_root)
    if resolved is not None:
        return _normalize(candidate.absolute()) == _normalize(resolved.absolute())

    # Name matching only applies when no project root is known.
    return candidate.name == configured_name
