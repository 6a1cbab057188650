"""SQLAlchemy 声明基类与引擎构造；引擎由 TranslationStore 持有，进程内只创建一次。"""

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


def _enable_wal(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def make_engine(database_url: str) -> Engine:
    """按 URL 创建引擎；SQLite 允许跨线程并开启 WAL。"""
    is_sqlite = "sqlite" in database_url
    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False} if is_sqlite else {},
    )
    if is_sqlite:
        event.listen(engine, "connect", _enable_wal)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    # 返回值在会话关闭后仍需可读
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    """创建所有表（仅 create if not exists，不做迁移）。"""
    from insta_translate.models import translation  # noqa: F401 - 注册模型

    Base.metadata.create_all(bind=engine)
