"""Completion endpoints: suggestions, insert edits and auto-popup decisions."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from easyp_assist.api.deps import get_engine, get_settings
from easyp_assist.api.schemas import (
    AutoPopupRequest,
    AutoPopupResponse,
    CompletionRequest,
    CompletionResponse,
    InsertRequest,
    InsertResponse,
)
from easyp_assist.completion.engine import CompletionEngine
from easyp_assist.settings import Settings
from easyp_assist.target import is_target_config_file

router = APIRouter()


def require_target(path: str | None, settings: Settings) -> None:
    """Raise 400 when *path* is given but is not the configured easyp config."""
    if path is not None and not is_target_config_file(path, settings):
        raise HTTPException(
            status_code=400,
            detail=f"'{path}' is not the configured easyp config ({settings.configured_path})",
        )


@router.post("", response_model=CompletionResponse)
async def complete(
    body: CompletionRequest,
    engine: CompletionEngine = Depends(get_engine),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> CompletionResponse:
    """Suggestions for the caret position."""
    require_target(body.path, settings)
    return CompletionResponse.from_result(engine.complete(body.text, body.offset))


@router.post("/insert", response_model=InsertResponse)
async def insert_completion(
    body: InsertRequest,
    engine: CompletionEngine = Depends(get_engine),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> InsertResponse:
    """The edit that accepts a suggestion at the caret."""
    require_target(body.path, settings)
    edit = engine.insert(body.text, body.offset, body.suggestion)
    return InsertResponse.from_edit(edit, body.text)


@router.post("/auto-popup", response_model=AutoPopupResponse)
async def auto_popup(
    body: AutoPopupRequest,
    engine: CompletionEngine = Depends(get_engine),  # noqa: B008
) -> AutoPopupResponse:
    """Whether typing ``typed_char`` should open the suggestion list."""
    return AutoPopupResponse(
        auto_popup=engine.should_auto_popup(body.typed_char, body.text, body.offset)
    )
