"""支持语言列表、识别用 locale 映射与采集平台编码参数。"""

from typing import NamedTuple

from insta_translate.models.translation import DEFAULT_SOURCE_LANGUAGE


class Language(NamedTuple):
    label: str
    value: str


class AudioEncoding(NamedTuple):
    encoding: str
    sample_rate_hertz: int


LANGUAGES: tuple[Language, ...] = (
    Language("English", "en"),
    Language("French", "fr"),
    Language("Spanish", "es"),
    Language("German", "de"),
    Language("Chinese (Simplified)", "zh-CN"),
    Language("Japanese", "ja"),
    Language("Italian", "it"),
    Language("Portuguese", "pt"),
    Language("Russian", "ru"),
    Language("Korean", "ko"),
    Language("Hindi", "hi"),
    Language("Arabic", "ar"),
    Language("Dutch", "nl"),
    Language("Swedish", "sv"),
    Language("Norwegian", "no"),
    Language("Danish", "da"),
)

LANGUAGE_CODES = frozenset(lang.value for lang in LANGUAGES)

LOCALE_MAPPING: dict[str, str] = {
    "en": "en-US",
    "fr": "fr-FR",
    "es": "es-ES",
    "de": "de-DE",
    "zh-CN": "cmn-Hans-CN",
    "ja": "ja-JP",
    "it": "it-IT",
    "pt": "pt-PT",
    "ru": "ru-RU",
    "ko": "ko-KR",
    "hi": "hi-IN",
    "ar": "ar-SA",
    "nl": "nl-NL",
    "sv": "sv-SE",
    "no": "no-NO",
    "da": "da-DK",
}

DEFAULT_LOCALE = "en-GB"

PLATFORM_ENCODINGS: dict[str, AudioEncoding] = {
    "android": AudioEncoding("WEBM_OPUS", 16000),
    "ios": AudioEncoding("LINEAR16", 44100),
}


def is_supported(code: str | None) -> bool:
    return code in LANGUAGE_CODES


def to_locale(code: str | None) -> str:
    """语言代码 -> 识别服务 locale，未映射时回退 DEFAULT_LOCALE。"""
    return LOCALE_MAPPING.get(code or "", DEFAULT_LOCALE)


def target_candidates(source_language: str | None) -> list[Language]:
    """可选目标语言：保持顺序并排除当前源语言，避免无意义翻译。"""
    source = source_language or DEFAULT_SOURCE_LANGUAGE
    return [lang for lang in LANGUAGES if lang.value != source]


def encoding_for(platform: str) -> AudioEncoding:
    try:
        return PLATFORM_ENCODINGS[platform.lower()]
    except KeyError:
        raise ValueError(f"unsupported capture platform: {platform!r}") from None
