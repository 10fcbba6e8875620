"""Dependency injection for FastAPI: engine and validation service singletons."""

from __future__ import annotations

from easyp_assist.completion.engine import CompletionEngine
from easyp_assist.service.validation_service import ValidationService
from easyp_assist.settings import Settings

_engine: CompletionEngine | None = None
_validation_service: ValidationService | None = None
_settings: Settings | None = None


def init_services(
    settings: Settings,
    *,
    engine: CompletionEngine | None = None,
    validation_service: ValidationService | None = None,
) -> None:
    """Set the global services (called at app startup)."""
    global _engine, _validation_service, _settings  # noqa: PLW0603
    _settings = settings
    _engine = engine or CompletionEngine()
    _validation_service = validation_service or ValidationService(settings)


def get_settings() -> Settings:
    """FastAPI ``Depends`` provider for Settings."""
    if _settings is None:
        raise RuntimeError("Settings not initialised; call init_services() first")
    return _settings


def get_engine() -> CompletionEngine:
    """FastAPI ``Depends`` provider for CompletionEngine."""
    if _engine is None:
        raise RuntimeError("CompletionEngine not initialised; call init_services() first")
    return _engine


def get_validation_service() -> ValidationService:
    """FastAPI ``Depends`` provider for ValidationService."""
    if _validation_service is None:
        raise RuntimeError("ValidationService not initialised; call init_services() first")
    return _validation_service


def reset_services() -> None:
    """Clear the global services (for tests)."""
    global _engine, _validation_service, _settings  # noqa: PLW0603
    _engine = None
    _validation_service = None
    _settings = None
