"""用户源语言设置：编排器读取，设置接口更新。"""

from loguru import logger

from insta_translate.models.translation import DEFAULT_SOURCE_LANGUAGE
from insta_translate.services.languages import is_supported
from insta_translate.services.store import TranslationStore


class SettingsStore:
    def __init__(self, store: TranslationStore) -> None:
        self._store = store

    def resolve_source_language(self) -> str:
        """总是返回有效的语言代码，未设置或无效时为 "en"。"""
        language = self._store.get_settings().language
        if not is_supported(language):
            logger.warning(f"invalid stored source language {language=}, using default")
            return DEFAULT_SOURCE_LANGUAGE
        return language

    def update_settings(self, language: str) -> bool:
        if not is_supported(language):
            raise ValueError(f"unsupported language: {language!r}")
        return self._store.update_settings(language)
