"""Google Cloud Speech-to-Text 转写服务（REST v1 speech:recognize）。"""

import httpx
from loguru import logger

from insta_translate.config import GoogleConfig
from insta_translate.errors import ServiceNotConfigured, ServiceUnavailable, TranscriptionFailed
from insta_translate.schemas.clients import TranscriptionRequest

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def _join_transcript(body: dict) -> str:
    """results[].alternatives[0].transcript 按换行拼接。"""
    results = body.get("results") or []
    parts: list[str] = []
    for result in results:
        alternatives = result.get("alternatives") or []
        if alternatives and alternatives[0].get("transcript"):
            parts.append(alternatives[0]["transcript"])
    return "\n".join(parts)


class GoogleSpeechClient:
    """音频 -> 文本。"""

    def __init__(self, config: GoogleConfig, http: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self._http = http or httpx.AsyncClient()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def transcribe(self, request: TranscriptionRequest) -> str:
        if not self.config.valid:
            raise ServiceNotConfigured(
                "Google API 未配置，请设置 config/config.yaml 或环境变量 GOOGLE__API_KEY"
            )
        payload = {
            "config": {
                "encoding": request.encoding,
                "sampleRateHertz": request.sample_rate_hertz,
                "languageCode": request.language_code,
            },
            "audio": {"content": request.audio},
        }
        logger.debug(f"{request.encoding=} {request.sample_rate_hertz=} {request.language_code=}")
        try:
            response = await self._http.post(
                self.config.speech_url,
                params={"key": self.config.api_key},
                json=payload,
            )
        except httpx.TransportError as e:
            raise ServiceUnavailable(f"speech-to-text unreachable: {e!r}") from e

        if response.status_code in RETRYABLE_STATUS:
            raise ServiceUnavailable(f"speech-to-text HTTP {response.status_code}")
        if response.is_error:
            raise TranscriptionFailed(f"speech-to-text HTTP {response.status_code}: {response.text[:200]}")
        try:
            body = response.json()
        except ValueError as e:
            raise TranscriptionFailed("speech-to-text 返回非 JSON") from e

        text = _join_transcript(body).strip()
        if not text:
            raise TranscriptionFailed("未识别到语音内容")
        return text
