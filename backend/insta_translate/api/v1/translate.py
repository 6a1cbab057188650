"""翻译 API：POST /api/v1/translate 执行一次完整流水线。"""

import asyncio
import shutil
import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from loguru import logger

from insta_translate.api.deps import Container, get_container, get_orchestrator, get_session_id
from insta_translate.errors import (
    AudioUnavailable,
    PipelineBusy,
    RunDiscarded,
    TranscriptionFailed,
    TranslationFailed,
    UnsupportedTargetLanguage,
)
from insta_translate.schemas.translation import LanguageOption, LanguagesResponse, PipelineResult
from insta_translate.services.audio import AudioArtifact
from insta_translate.services.languages import LANGUAGES, PLATFORM_ENCODINGS
from insta_translate.services.pipeline import PipelineOrchestrator

router = APIRouter()

_DEFAULT_SUFFIX = {"ios": ".wav", "android": ".webm"}


@router.post("/translate", response_model=PipelineResult)
async def translate(
    audio: UploadFile = File(...),
    target_language: str = Form(..., description="目标语言代码，不能与源语言相同"),
    platform: str = Form("ios", description="采集平台：ios | android"),
    session_id: str = Depends(get_session_id),
    container: Container = Depends(get_container),
) -> PipelineResult:
    """
    上传一段完整录音，依次转写、翻译、润色，查重后持久化并返回结果。
    持久化失败不影响返回，persistence 为 failed。
    """
    platform = platform.lower()
    if platform not in PLATFORM_ENCODINGS:
        raise HTTPException(status_code=400, detail=f"不支持的平台: {platform}")
    if container.orchestrator(session_id).busy:
        raise HTTPException(status_code=409, detail="当前会话已有进行中的翻译")

    suffix = Path(audio.filename or "").suffix or _DEFAULT_SUFFIX[platform]
    with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
        tmp_path = Path(tmp.name)
        try:
            # 分块写入临时文件，不整体读入内存
            await asyncio.to_thread(shutil.copyfileobj, audio.file, tmp)
        except Exception as e:
            logger.error(f"{e=}")
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise HTTPException(status_code=400, detail="读取音频失败") from e

    orchestrator = container.acquire(session_id)
    try:
        return await orchestrator.run(AudioArtifact(tmp_path, platform), target_language)
    except (AudioUnavailable, UnsupportedTargetLanguage) as e:
        logger.warning(f"{e=}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    except (PipelineBusy, RunDiscarded) as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except TranscriptionFailed as e:
        raise HTTPException(status_code=502, detail="Failed to transcribe the audio.") from e
    except TranslationFailed as e:
        raise HTTPException(status_code=502, detail="Failed to translate.") from e
    finally:
        container.release(session_id, orchestrator)
        tmp_path.unlink(missing_ok=True)


@router.delete("/translate")
async def cancel_translate(
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> dict:
    """取消本会话进行中的运行；迟到的结果会被丢弃。"""
    run = orchestrator.cancel()
    return {"cancelled": run is not None, "run_id": run.run_id if run else None}


@router.get("/languages", response_model=LanguagesResponse)
async def languages(
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> LanguagesResponse:
    source = await orchestrator.get_source_language()
    targets = await orchestrator.target_languages()
    return LanguagesResponse(
        source_language=source,
        languages=[LanguageOption(label=lang.label, value=lang.value) for lang in LANGUAGES],
        targets=[LanguageOption(label=lang.label, value=lang.value) for lang in targets],
    )
