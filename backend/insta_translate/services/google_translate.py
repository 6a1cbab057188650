"""Google Cloud Translation v2 翻译服务。"""

import httpx
from loguru import logger

from insta_translate.config import GoogleConfig
from insta_translate.errors import ServiceNotConfigured, ServiceUnavailable, TranslationFailed
from insta_translate.schemas.clients import TranslationRequest
from insta_translate.services.google_speech import RETRYABLE_STATUS


class GoogleTranslateClient:
    """文本 + 源/目标语言 -> 译文。"""

    def __init__(self, config: GoogleConfig, http: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self._http = http or httpx.AsyncClient()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def translate(self, request: TranslationRequest) -> str:
        if not self.config.valid:
            raise ServiceNotConfigured(
                "Google API 未配置，请设置 config/config.yaml 或环境变量 GOOGLE__API_KEY"
            )
        payload = {
            "q": request.text,
            "source": request.source_language,
            "target": request.target_language,
            "format": request.format,
        }
        try:
            response = await self._http.post(
                self.config.translate_url,
                params={"key": self.config.api_key},
                json=payload,
            )
        except httpx.TransportError as e:
            raise ServiceUnavailable(f"translation unreachable: {e!r}") from e

        if response.status_code in RETRYABLE_STATUS:
            raise ServiceUnavailable(f"translation HTTP {response.status_code}")
        if response.is_error:
            raise TranslationFailed(f"translation HTTP {response.status_code}: {response.text[:200]}")
        try:
            translated = response.json()["data"]["translations"][0]["translatedText"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise TranslationFailed("translation 响应格式异常") from e

        translated = (translated or "").strip()
        if not translated:
            raise TranslationFailed("译文为空")
        logger.debug(f"{request.source_language=} {request.target_language=} {len(translated)=}")
        return translated
