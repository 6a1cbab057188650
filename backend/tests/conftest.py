"""
共享 pytest fixtures。

所有测试离线运行：外部服务使用 tests.fakes 中的替身，数据库为临时目录下的 SQLite 文件。
"""

import wave
from pathlib import Path

import pytest

from insta_translate.config import PipelineConfig
from insta_translate.services.audio import AudioArtifact
from insta_translate.services.pipeline import PipelineOrchestrator
from insta_translate.services.settings_store import SettingsStore
from insta_translate.services.store import TranslationStore
from tests.fakes import FakeRefiner, FakeTranscriber, FakeTranslator


def write_wav(path: Path, frames: int = 1600, rate: int = 44100) -> Path:
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(rate)
        wav.writeframes(b"\x00\x01" * frames)
    return path


@pytest.fixture
def store(tmp_path: Path):
    s = TranslationStore(f"sqlite:///{tmp_path / 'test.db'}")
    s.initialize()
    s.seed_defaults()
    yield s
    s.close()


@pytest.fixture
def settings_store(store: TranslationStore) -> SettingsStore:
    return SettingsStore(store)


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        transcription_timeout_sec=1.0,
        translation_timeout_sec=1.0,
        refinement_timeout_sec=0.2,
        max_attempts=3,
        retry_base_delay_sec=0.0,
        retry_max_delay_sec=0.0,
    )


@pytest.fixture
def wav_artifact(tmp_path: Path) -> AudioArtifact:
    return AudioArtifact(write_wav(tmp_path / "rec.wav"), "ios")


@pytest.fixture
def webm_artifact(tmp_path: Path) -> AudioArtifact:
    path = tmp_path / "rec.webm"
    path.write_bytes(b"\x1a\x45\xdf\xa3fake-webm-opus")
    return AudioArtifact(path, "android")


@pytest.fixture
def make_orchestrator(store, settings_store, pipeline_config):
    """按需替换外部服务构造编排器。"""

    def _make(transcriber=None, translator=None, refiner=None, config=None) -> PipelineOrchestrator:
        return PipelineOrchestrator(
            store,
            settings_store,
            transcriber or FakeTranscriber(),
            translator or FakeTranslator(),
            refiner or FakeRefiner(),
            config or pipeline_config,
        )

    return _make
