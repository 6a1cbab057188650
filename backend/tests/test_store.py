"""TranslationStore 单元测试。"""

from sqlalchemy import text

from insta_translate.schemas.translation import SettingsItem
from insta_translate.services.store import TranslationStore


class TestSettings:
    def test_default_settings_after_seed(self, store: TranslationStore):
        assert store.get_settings() == SettingsItem(id=1, language="en")

    def test_initialize_and_seed_are_idempotent(self, store: TranslationStore):
        store.initialize()
        store.seed_defaults()
        store.seed_defaults()
        with store.engine.connect() as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM settings")).scalar() == 1

    def test_update_settings(self, store: TranslationStore):
        assert store.update_settings("fr") is True
        assert store.get_settings().language == "fr"

    def test_update_settings_leaves_translations_alone(self, store: TranslationStore):
        store.insert_translation("Bonjour", "en", "Hello")
        store.update_settings("de")
        assert len(store.list_translations()) == 1

    def test_missing_row_falls_back_to_default(self, store: TranslationStore):
        with store.engine.begin() as conn:
            conn.execute(text("DELETE FROM settings"))
        assert store.get_settings() == SettingsItem(id=1, language="en")

    def test_update_recreates_missing_row(self, store: TranslationStore):
        with store.engine.begin() as conn:
            conn.execute(text("DELETE FROM settings"))
        assert store.update_settings("ja") is True
        assert store.get_settings().language == "ja"


class TestTranslations:
    def test_find_absent(self, store: TranslationStore):
        assert store.find_translation("Bonjour", "en") is None

    def test_insert_then_find(self, store: TranslationStore):
        record = store.insert_translation("Bonjour", "en", "Hello")
        assert record is not None
        assert record.id > 0
        found = store.find_translation("Bonjour", "en")
        assert found == record

    def test_find_matches_both_fields(self, store: TranslationStore):
        store.insert_translation("Bonjour", "en", "Hello")
        assert store.find_translation("Bonjour", "de") is None
        assert store.find_translation("Salut", "en") is None

    def test_store_does_not_enforce_uniqueness(self, store: TranslationStore):
        first = store.insert_translation("Bonjour", "en", "Hello")
        second = store.insert_translation("Bonjour", "en", "Hello")
        assert first.id != second.id
        assert store.find_translation("Bonjour", "en").id == first.id

    def test_list_empty(self, store: TranslationStore):
        assert store.list_translations() == []

    def test_list_most_recent_first(self, store: TranslationStore):
        a = store.insert_translation("uno", "en", "one")
        b = store.insert_translation("dos", "en", "two")
        assert [r.id for r in store.list_translations()] == [b.id, a.id]

    def test_delete_missing_id_is_noop(self, store: TranslationStore):
        store.delete_translation(999)
        assert store.list_translations() == []

    def test_delete_removes_exactly_one(self, store: TranslationStore):
        a = store.insert_translation("uno", "en", "one")
        b = store.insert_translation("dos", "en", "two")
        store.delete_translation(a.id)
        assert [r.id for r in store.list_translations()] == [b.id]


class TestFailureSemantics:
    def _drop_translations(self, store: TranslationStore) -> None:
        with store.engine.begin() as conn:
            conn.execute(text("DROP TABLE translations"))

    def test_read_failures_become_empty_results(self, store: TranslationStore):
        self._drop_translations(store)
        assert store.list_translations() == []
        assert store.find_translation("Bonjour", "en") is None

    def test_write_failures_are_swallowed(self, store: TranslationStore):
        self._drop_translations(store)
        assert store.insert_translation("Bonjour", "en", "Hello") is None
        store.delete_translation(1)

    def test_settings_failure_returns_default(self, store: TranslationStore):
        with store.engine.begin() as conn:
            conn.execute(text("DROP TABLE settings"))
        assert store.get_settings() == SettingsItem(id=1, language="en")
        assert store.update_settings("fr") is False


def test_opens_database_created_by_older_release(tmp_path):
    url = f"sqlite:///{tmp_path / 'legacy.db'}"
    legacy = TranslationStore(url)
    with legacy.engine.begin() as conn:
        conn.execute(text("CREATE TABLE settings (id INTEGER PRIMARY KEY NOT NULL, language TEXT DEFAULT 'en')"))
        conn.execute(text(
            "CREATE TABLE translations (id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL, "
            "original_text TEXT NOT NULL, language TEXT NOT NULL, translated_text TEXT NOT NULL)"
        ))
        conn.execute(text("INSERT INTO settings (id, language) VALUES (1, 'fr')"))
        conn.execute(text(
            "INSERT INTO translations (original_text, language, translated_text) VALUES ('Bonjour', 'en', 'Hello')"
        ))
    legacy.close()

    store = TranslationStore(url)
    store.initialize()
    store.seed_defaults()
    try:
        assert store.get_settings().language == "fr"
        assert store.find_translation("Bonjour", "en").translated_text == "Hello"
    finally:
        store.close()
