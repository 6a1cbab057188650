"""历史记录 API。"""

from fastapi import APIRouter, Depends, Response

from insta_translate.api.deps import get_orchestrator
from insta_translate.schemas.translation import TranslationItem
from insta_translate.services.pipeline import PipelineOrchestrator

router = APIRouter()


@router.get("/history", response_model=list[TranslationItem])
async def list_history(
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> list[TranslationItem]:
    return await orchestrator.list_history()


@router.delete("/history/{translation_id}", status_code=204)
async def delete_history_item(
    translation_id: int,
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> Response:
    """删除一条记录，ID 不存在时同样返回 204。"""
    await orchestrator.delete_history_item(translation_id)
    return Response(status_code=204)
