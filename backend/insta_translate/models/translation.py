"""译文记录与用户设置 ORM 模型，表结构与旧版本数据库保持一致。"""

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from insta_translate.database import Base  # noqa: I001

DEFAULT_SOURCE_LANGUAGE = "en"
SETTINGS_ROW_ID = 1


class TranslationRecord(Base):
    """译文记录；(original_text, language) 为软唯一键，由应用层查重保证。"""

    __tablename__ = "translations"
    __table_args__ = (
        Index("ix_translations_original_text_language", "original_text", "language"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(Text, nullable=False)
    translated_text: Mapped[str] = mapped_column(Text, nullable=False)


class SettingsRecord(Base):
    """单行设置表，id 固定为 1。"""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    language: Mapped[str | None] = mapped_column(
        Text, default=DEFAULT_SOURCE_LANGUAGE, server_default=DEFAULT_SOURCE_LANGUAGE
    )
