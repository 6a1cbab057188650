"""应用配置，YAML + pydantic-settings，环境变量优先覆盖。"""

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

BASE_DIR = Path(__file__).resolve().parent.parent

_CONFIG_PATH = BASE_DIR / "config" / "config.yaml"


class GoogleConfig(BaseModel):
    """Google Cloud 语音识别与翻译 API 凭证。"""

    api_key: str = Field(default="", description="Google Cloud API key")
    speech_url: str = Field(default="https://speech.googleapis.com/v1/speech:recognize")
    translate_url: str = Field(
        default="https://translation.googleapis.com/language/translate/v2"
    )

    @property
    def valid(self) -> bool:
        return bool(self.api_key)


class VolcengineConfig(BaseModel):
    """火山方舟 Ark 凭证，用于译文润色。"""

    ark_api_key: str = Field(default="", description="Ark API Key")
    ark_model_id: str = Field(default="", description="Ark 推理接入点 / 模型 ID")
    ark_base_url: str = Field(default="https://ark.cn-beijing.volces.com/api/v3")

    @property
    def ark_valid(self) -> bool:
        return bool(self.ark_api_key and self.ark_model_id)


class RefinementConfig(BaseModel):
    """润色请求参数。"""

    max_tokens: int = Field(default=100, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)


class PipelineConfig(BaseModel):
    """流水线各阶段超时与重试。"""

    transcription_timeout_sec: float = Field(default=30.0, gt=0)
    translation_timeout_sec: float = Field(default=15.0, gt=0)
    refinement_timeout_sec: float = Field(default=20.0, gt=0)
    max_attempts: int = Field(default=3, ge=1, description="转写/翻译总尝试次数")
    retry_base_delay_sec: float = Field(default=0.5, ge=0)
    retry_max_delay_sec: float = Field(default=5.0, ge=0)
    backoff_factor: float = Field(default=2.0, ge=1.0)


class Settings(BaseSettings):
    """应用配置，优先级：环境变量 > config.yaml > 默认值。"""

    model_config = SettingsConfigDict(extra="ignore", env_nested_delimiter="__")

    database_url: str = Field(default="sqlite:///./insta-translate.db")
    log_level: str = Field(default="INFO")
    google: GoogleConfig = Field(default_factory=GoogleConfig)
    volcengine: VolcengineConfig = Field(default_factory=VolcengineConfig)
    refinement: RefinementConfig = Field(default_factory=RefinementConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=_CONFIG_PATH, yaml_file_encoding="utf-8"),
        )


settings = Settings()
