"""用户设置 API：源语言。"""

from fastapi import APIRouter, Depends, HTTPException

from insta_translate.api.deps import get_orchestrator
from insta_translate.schemas.translation import SettingsItem, SettingsUpdate
from insta_translate.services.pipeline import PipelineOrchestrator

router = APIRouter()


@router.get("/settings", response_model=SettingsItem)
async def get_settings(
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> SettingsItem:
    return SettingsItem(language=await orchestrator.get_source_language())


@router.put("/settings", response_model=SettingsItem)
async def update_settings(
    body: SettingsUpdate,
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> SettingsItem:
    try:
        saved = await orchestrator.set_source_language(body.language)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    if not saved:
        raise HTTPException(status_code=500, detail="Unable to save language")
    return SettingsItem(language=await orchestrator.get_source_language())
