"""Reference endpoint: GET /reference/easyp."""

from __future__ import annotations

from fastapi import APIRouter

from easyp_assist.api.schemas import ReferenceResponse
from easyp_assist.config_reference import EASYP_REFERENCE

router = APIRouter()


@router.get("/easyp", response_model=ReferenceResponse)
async def get_easyp_reference() -> ReferenceResponse:
    """Return the full easyp.yaml format reference."""
    return ReferenceResponse(reference=EASYP_REFERENCE)
