"""外部服务（转写 / 翻译 / 润色）请求 schema。"""

from pydantic import BaseModel, Field


class TranscriptionRequest(BaseModel):
    audio: str = Field(..., description="base64 音频内容")
    encoding: str = Field(..., description="编码，如 LINEAR16 / WEBM_OPUS")
    sample_rate_hertz: int = Field(..., gt=0)
    language_code: str = Field(..., description="带地区的语言代码，如 en-US")


class TranslationRequest(BaseModel):
    text: str
    source_language: str
    target_language: str
    format: str = Field("text", description="纯文本")


class RefinementRequest(BaseModel):
    instruction: str = Field(..., description="固定提示词模板")
    text: str
