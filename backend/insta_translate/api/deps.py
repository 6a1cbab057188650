"""依赖注入：进程级共享的存储与外部客户端，以及按会话划分的编排器。"""

from dataclasses import dataclass, field

from fastapi import Depends, Header, Request
from loguru import logger

from insta_translate.config import PipelineConfig, Settings
from insta_translate.services.ark_refinement import ArkRefinementClient
from insta_translate.services.google_speech import GoogleSpeechClient
from insta_translate.services.google_translate import GoogleTranslateClient
from insta_translate.services.pipeline import (
    PipelineOrchestrator,
    RefinementClient,
    TranscriptionClient,
    TranslationClient,
)
from insta_translate.services.settings_store import SettingsStore
from insta_translate.services.store import TranslationStore

DEFAULT_SESSION = "default"


@dataclass
class Container:
    store: TranslationStore
    transcriber: TranscriptionClient
    translator: TranslationClient
    refiner: RefinementClient
    pipeline_config: PipelineConfig
    sessions: dict[str, PipelineOrchestrator] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.settings_store = SettingsStore(self.store)

    def orchestrator(self, session_id: str) -> PipelineOrchestrator:
        """会话已登记则返回其编排器，否则返回不登记的临时编排器。"""
        orchestrator = self.sessions.get(session_id)
        if orchestrator is None:
            orchestrator = PipelineOrchestrator(
                self.store,
                self.settings_store,
                self.transcriber,
                self.translator,
                self.refiner,
                self.pipeline_config,
            )
        return orchestrator

    def acquire(self, session_id: str) -> PipelineOrchestrator:
        """登记会话以执行运行；只有进行中的会话占用 sessions。"""
        orchestrator = self.orchestrator(session_id)
        if session_id not in self.sessions:
            self.sessions[session_id] = orchestrator
            logger.debug(f"session acquired {session_id=}")
        return orchestrator

    def release(self, session_id: str, orchestrator: PipelineOrchestrator) -> None:
        """运行结束且会话空闲时移除登记。"""
        if self.sessions.get(session_id) is orchestrator and not orchestrator.busy:
            del self.sessions[session_id]
            logger.debug(f"session released {session_id=}")

    async def aclose(self) -> None:
        for orchestrator in self.sessions.values():
            orchestrator.cancel()
        for client in (self.transcriber, self.translator, self.refiner):
            aclose = getattr(client, "aclose", None)
            if aclose is not None:
                await aclose()
        self.store.close()


def build_container(cfg: Settings) -> Container:
    """打开数据库（建表 + 默认设置）并创建外部客户端。"""
    store = TranslationStore(cfg.database_url)
    store.initialize()
    store.seed_defaults()
    return Container(
        store=store,
        transcriber=GoogleSpeechClient(cfg.google),
        translator=GoogleTranslateClient(cfg.google),
        refiner=ArkRefinementClient(cfg.volcengine, cfg.refinement),
        pipeline_config=cfg.pipeline,
    )


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_session_id(
    x_session_id: str = Header(DEFAULT_SESSION, description="会话标识，每个会话同时只允许一个运行"),
) -> str:
    return x_session_id or DEFAULT_SESSION


def get_orchestrator(
    session_id: str = Depends(get_session_id),
    container: Container = Depends(get_container),
) -> PipelineOrchestrator:
    return container.orchestrator(session_id)
