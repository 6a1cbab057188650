"""翻译流水线编排：转写 -> 翻译 -> 润色 -> 查重持久化。

每个会话持有一个编排器，同一时刻只允许一个进行中的运行。阶段严格串行；
转写、翻译失败终止运行，润色、持久化失败只记录日志并降级。运行被取消后，
迟到的阶段结果一律丢弃，不再写库。
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol
from uuid import uuid4

from loguru import logger

from insta_translate.config import PipelineConfig
from insta_translate.errors import (
    PersistenceFailed,
    PipelineBusy,
    PipelineError,
    RunDiscarded,
    TranscriptionFailed,
    TranslationFailed,
    UnsupportedTargetLanguage,
)
from insta_translate.schemas.clients import RefinementRequest, TranscriptionRequest, TranslationRequest
from insta_translate.schemas.translation import PipelineResult, PersistenceStatus, TranslationItem
from insta_translate.services.ark_refinement import build_request
from insta_translate.services.audio import AudioArtifact, load_audio
from insta_translate.services.languages import Language, encoding_for, target_candidates, to_locale
from insta_translate.services.retry import RetryPolicy, call_with_retry, call_with_timeout
from insta_translate.services.settings_store import SettingsStore
from insta_translate.services.store import TranslationStore


class TranscriptionClient(Protocol):
    async def transcribe(self, request: TranscriptionRequest) -> str: ...


class TranslationClient(Protocol):
    async def translate(self, request: TranslationRequest) -> str: ...


class RefinementClient(Protocol):
    async def refine(self, request: RefinementRequest) -> str | None: ...


class Stage(str, Enum):
    IDLE = "Idle"
    TRANSCRIBING = "Transcribing"
    TRANSLATING = "Translating"
    REFINING = "Refining"
    PERSISTING = "Persisting"
    DONE = "Done"
    FAILED = "Failed"


TERMINAL_STAGES = frozenset({Stage.DONE, Stage.FAILED})


@dataclass
class PipelineRun:
    """一次运行的临时状态，仅由编排器持有，结束后丢弃。"""

    audio: AudioArtifact
    target_language: str
    source_language: str | None = None
    stage: Stage = Stage.IDLE
    transcript: str | None = None
    translation: str | None = None
    refined_translation: str | None = None
    error: Exception | None = None
    run_id: str = field(default_factory=lambda: uuid4().hex[:12])

    @property
    def finished(self) -> bool:
        return self.stage in TERMINAL_STAGES


class PipelineOrchestrator:
    def __init__(
        self,
        store: TranslationStore,
        settings_store: SettingsStore,
        transcriber: TranscriptionClient,
        translator: TranslationClient,
        refiner: RefinementClient,
        config: PipelineConfig,
    ) -> None:
        self._store = store
        self._settings = settings_store
        self._transcriber = transcriber
        self._translator = translator
        self._refiner = refiner
        self._config = config
        self._retry = RetryPolicy.from_config(config)
        self._current: PipelineRun | None = None

    @property
    def current_run(self) -> PipelineRun | None:
        return self._current

    @property
    def busy(self) -> bool:
        return self._current is not None and not self._current.finished

    async def run(self, audio: AudioArtifact, target_language: str) -> PipelineResult:
        """
        执行一次完整运行。

        :raises PipelineBusy: 本会话已有进行中的运行
        :raises ValueError: 不支持的采集平台
        :raises UnsupportedTargetLanguage: 目标语言不在候选集合（含等于源语言）
        :raises AudioUnavailable | TranscriptionFailed | TranslationFailed: 致命失败
        :raises RunDiscarded: 运行中途被 cancel()
        """
        if self.busy:
            raise PipelineBusy(f"run {self._current.run_id} is still {self._current.stage.value}")
        encoding_for(audio.platform)
        run = PipelineRun(audio=audio, target_language=target_language)
        self._current = run
        try:
            run.source_language = await asyncio.to_thread(self._settings.resolve_source_language)
            self._ensure_current(run)
            candidates = {lang.value for lang in target_candidates(run.source_language)}
            if target_language not in candidates:
                raise UnsupportedTargetLanguage(
                    f"target language {target_language!r} not available for source {run.source_language!r}"
                )
            return await self._execute(run)
        finally:
            if self._current is run:
                self._current = None

    def cancel(self) -> PipelineRun | None:
        """解除当前运行；进行中的调用照常完成，但结果会被丢弃。"""
        run = self._current
        if run is None or run.finished:
            return None
        logger.info(f"run {run.run_id} cancelled at {run.stage.value}")
        self._current = None
        return run

    async def target_languages(self) -> list[Language]:
        return target_candidates(await self.get_source_language())

    async def list_history(self) -> list[TranslationItem]:
        return await asyncio.to_thread(self._store.list_translations)

    async def delete_history_item(self, translation_id: int) -> None:
        await asyncio.to_thread(self._store.delete_translation, translation_id)

    async def get_source_language(self) -> str:
        return await asyncio.to_thread(self._settings.resolve_source_language)

    async def set_source_language(self, language: str) -> bool:
        return await asyncio.to_thread(self._settings.update_settings, language)

    def _ensure_current(self, run: PipelineRun) -> None:
        if self._current is not run:
            raise RunDiscarded(f"run {run.run_id} was cancelled, discarding {run.stage.value} result")

    def _advance(self, run: PipelineRun, stage: Stage) -> None:
        logger.debug(f"run {run.run_id}: {run.stage.value} -> {stage.value}")
        run.stage = stage

    async def _execute(self, run: PipelineRun) -> PipelineResult:
        loop = asyncio.get_running_loop()
        start = loop.time()
        try:
            self._advance(run, Stage.TRANSCRIBING)
            run.transcript = await self._transcribe(run)
            self._ensure_current(run)

            self._advance(run, Stage.TRANSLATING)
            run.translation = await self._translate(run)
            self._ensure_current(run)

            self._advance(run, Stage.REFINING)
            run.refined_translation = await self._refine(run)
            self._ensure_current(run)

            self._advance(run, Stage.PERSISTING)
            result = await self._persist(run)
        except PipelineError as e:
            run.error = e
            self._advance(run, Stage.FAILED)
            logger.warning(f"run {run.run_id} failed: {e=}")
            raise

        self._advance(run, Stage.DONE)
        elapsed = loop.time() - start
        logger.info(
            f"run {run.run_id} done {elapsed=:.2f}s {run.source_language=} "
            f"{run.target_language=} {result.persistence=}"
        )
        return result

    async def _transcribe(self, run: PipelineRun) -> str:
        content = await asyncio.to_thread(load_audio, run.audio)
        encoding = run.audio.encoding
        request = TranscriptionRequest(
            audio=content,
            encoding=encoding.encoding,
            sample_rate_hertz=encoding.sample_rate_hertz,
            language_code=to_locale(run.source_language),
        )
        try:
            text = await call_with_retry(
                lambda: self._transcriber.transcribe(request),
                timeout=self._config.transcription_timeout_sec,
                policy=self._retry,
                label="transcription",
            )
        except TranscriptionFailed:
            raise
        except Exception as e:
            raise TranscriptionFailed("failed to transcribe the audio") from e
        if not text or not text.strip():
            raise TranscriptionFailed("transcript is empty")
        return text.strip()

    async def _translate(self, run: PipelineRun) -> str:
        request = TranslationRequest(
            text=run.transcript,
            source_language=run.source_language,
            target_language=run.target_language,
        )
        try:
            text = await call_with_retry(
                lambda: self._translator.translate(request),
                timeout=self._config.translation_timeout_sec,
                policy=self._retry,
                label="translation",
            )
        except TranslationFailed:
            raise
        except Exception as e:
            raise TranslationFailed("failed to translate") from e
        if not text or not text.strip():
            raise TranslationFailed("translation is empty")
        return text

    async def _refine(self, run: PipelineRun) -> str:
        """润色失败、超时或返回空时回退到未润色译文。"""
        request = build_request(run.translation)
        try:
            refined = await call_with_timeout(
                lambda: self._refiner.refine(request),
                self._config.refinement_timeout_sec,
            )
        except Exception as e:
            logger.warning(f"run {run.run_id} refinement failed, keeping raw translation: {e=}")
            return run.translation
        if not refined or not refined.strip():
            logger.warning(f"run {run.run_id} refinement returned nothing, keeping raw translation")
            return run.translation
        return refined.strip()

    def _find_or_insert(
        self, original_text: str, language: str, translated_text: str
    ) -> tuple[TranslationItem, PersistenceStatus]:
        with self._store.dedup_lock:
            existing = self._store.find_translation(original_text, language)
            if existing is not None:
                return existing, "existing"
            record = self._store.insert_translation(original_text, language, translated_text)
            if record is None:
                raise PersistenceFailed(f"insert returned no record for {language=}")
            return record, "new"

    async def _persist(self, run: PipelineRun) -> PipelineResult:
        text = run.refined_translation
        self._ensure_current(run)
        try:
            record, status = await asyncio.to_thread(
                self._find_or_insert, run.transcript, run.target_language, text
            )
        except Exception as e:
            logger.warning(f"run {run.run_id} translation not saved: {e=}")
            return PipelineResult(
                text=text,
                language=run.target_language,
                persistence="failed",
                id=None,
                original_text=run.transcript,
            )
        return PipelineResult(
            text=record.translated_text,
            language=record.language,
            persistence=status,
            id=record.id,
            original_text=record.original_text,
        )
