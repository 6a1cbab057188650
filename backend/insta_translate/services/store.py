"""本地持久化：settings（单行）与 translations（仅追加/删除）两张表。

存储层本身不保证 (original_text, language) 唯一，调用方需先 find 再 insert，
并持有 dedup_lock 使两步成为一个原子区间。读写失败在此处记录日志并转换为
空结果 / None / False，不向上抛出。
"""

import threading
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from insta_translate.database import init_db, make_engine, make_session_factory
from insta_translate.models.translation import (
    DEFAULT_SOURCE_LANGUAGE,
    SETTINGS_ROW_ID,
    SettingsRecord,
    TranslationRecord,
)
from insta_translate.schemas.translation import SettingsItem, TranslationItem


class TranslationStore:
    """进程启动时创建一次，并以引用传给各编排器。"""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.engine = make_engine(database_url)
        self._session_factory = make_session_factory(self.engine)
        self.dedup_lock = threading.Lock()

    @contextmanager
    def _session(self):
        db: Session = self._session_factory()
        try:
            yield db
        finally:
            db.close()

    def initialize(self) -> None:
        """建表，幂等，每次启动都可调用。"""
        init_db(self.engine)

    def seed_defaults(self) -> None:
        """settings 为空时写入默认行 (1, 'en')。"""
        try:
            with self._session() as db:
                count = db.scalar(select(func.count()).select_from(SettingsRecord))
                if count == 0:
                    db.add(SettingsRecord(id=SETTINGS_ROW_ID, language=DEFAULT_SOURCE_LANGUAGE))
                    db.commit()
                    logger.info(f"seeded default settings {DEFAULT_SOURCE_LANGUAGE=}")
        except SQLAlchemyError as e:
            logger.error(f"seed defaults error: {e=}")

    def find_translation(self, original_text: str, language: str) -> TranslationItem | None:
        try:
            with self._session() as db:
                row = db.scalars(
                    select(TranslationRecord)
                    .where(
                        TranslationRecord.original_text == original_text,
                        TranslationRecord.language == language,
                    )
                    .order_by(TranslationRecord.id)
                    .limit(1)
                ).first()
                return TranslationItem.model_validate(row) if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"find translation error: {e=}")
            return None

    def insert_translation(
        self, original_text: str, language: str, translated_text: str
    ) -> TranslationItem | None:
        """总是新建一行；失败时返回 None。"""
        try:
            with self._session() as db:
                record = TranslationRecord(
                    original_text=original_text,
                    language=language,
                    translated_text=translated_text,
                )
                db.add(record)
                db.commit()
                db.refresh(record)
                return TranslationItem.model_validate(record)
        except SQLAlchemyError as e:
            logger.error(f"insert translation error: {e=}")
            return None

    def list_translations(self) -> list[TranslationItem]:
        """最新的在前；无记录或出错时返回空列表。"""
        try:
            with self._session() as db:
                rows = db.scalars(
                    select(TranslationRecord).order_by(TranslationRecord.id.desc())
                ).all()
                return [TranslationItem.model_validate(r) for r in rows]
        except SQLAlchemyError as e:
            logger.error(f"list translations error: {e=}")
            return []

    def delete_translation(self, translation_id: int) -> None:
        """按 ID 删除一行；ID 不存在时什么也不做。"""
        try:
            with self._session() as db:
                db.execute(delete(TranslationRecord).where(TranslationRecord.id == translation_id))
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"delete translation error: {e=} {translation_id=}")

    def get_settings(self) -> SettingsItem:
        """返回单行设置；缺失或出错时返回内存中的默认值。"""
        try:
            with self._session() as db:
                row = db.get(SettingsRecord, SETTINGS_ROW_ID)
                if row is not None:
                    return SettingsItem(id=row.id, language=row.language or DEFAULT_SOURCE_LANGUAGE)
        except SQLAlchemyError as e:
            logger.error(f"get settings error: {e=}")
        return SettingsItem(id=SETTINGS_ROW_ID, language=DEFAULT_SOURCE_LANGUAGE)

    def update_settings(self, language: str) -> bool:
        try:
            with self._session() as db:
                result = db.execute(
                    update(SettingsRecord)
                    .where(SettingsRecord.id == SETTINGS_ROW_ID)
                    .values(language=language)
                )
                if result.rowcount == 0:
                    db.add(SettingsRecord(id=SETTINGS_ROW_ID, language=language))
                db.commit()
                return True
        except SQLAlchemyError as e:
            logger.error(f"update settings error: {e=}")
            return False

    def close(self) -> None:
        self.engine.dispose()
