"""Validation endpoint: POST /validate."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from easyp_assist.api.deps import get_settings, get_validation_service
from easyp_assist.api.routers.completion import require_target
from easyp_assist.api.schemas import DiagnosticDetail, ValidateRequest, ValidateResponse
from easyp_assist.service.presentation import to_diagnostics
from easyp_assist.service.validation_service import ValidationService
from easyp_assist.settings import Settings
from easyp_assist.target import resolved_config_path

router = APIRouter()


# Sync handler: FastAPI runs it in the threadpool while the CLI subprocess runs.
@router.post("", response_model=ValidateResponse)
def validate(
    body: ValidateRequest,
    service: ValidationService = Depends(get_validation_service),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> ValidateResponse:
    """Validate a (possibly unsaved) config snapshot with ``easyp validate-config``."""
    require_target(body.path, settings)
    resolved = resolved_config_path(settings)
    target = str(resolved) if resolved is not None else (body.path or settings.configured_path)
    response = service.validate(target, body.content)
    return ValidateResponse(
        valid=response.valid,
        errors=response.errors,
        warnings=response.warnings,
        diagnostics=[
            DiagnosticDetail.from_diagnostic(d) for d in to_diagnostics(body.content, response)
        ],
    )
