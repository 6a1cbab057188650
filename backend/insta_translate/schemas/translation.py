"""翻译 API 与服务层 Pydantic schema。"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PersistenceStatus = Literal["new", "existing", "failed"]


class TranslationItem(BaseModel):
    """持久化的译文记录（与会话解绑的只读视图）。"""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="记录 ID")
    original_text: str = Field(..., description="转写原文")
    language: str = Field(..., description="目标语言代码")
    translated_text: str = Field(..., description="（润色后）译文")


class SettingsItem(BaseModel):
    """单行设置。"""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(1, description="固定为 1")
    language: str = Field("en", description="用户源语言代码")


class SettingsUpdate(BaseModel):
    """PUT /api/v1/settings 请求体。"""

    language: str = Field(..., min_length=1, description="新的源语言代码")


class LanguageOption(BaseModel):
    label: str
    value: str


class LanguagesResponse(BaseModel):
    """GET /api/v1/languages 响应。"""

    source_language: str = Field(..., description="当前源语言")
    languages: list[LanguageOption] = Field(..., description="全部支持语言")
    targets: list[LanguageOption] = Field(..., description="可选目标语言（已排除源语言）")


class PipelineResult(BaseModel):
    """一次流水线运行的结果，POST /api/v1/translate 响应。"""

    text: str = Field(..., description="展示给用户的最终译文")
    language: str = Field(..., description="译文语言")
    persistence: PersistenceStatus = Field(..., description="new | existing | failed")
    id: int | None = Field(None, description="记录 ID，持久化失败时为空")
    original_text: str = Field(..., description="转写原文")
