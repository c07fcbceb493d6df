from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from goalstreak.core.config import settings


class Base(DeclarativeBase):
    pass


def enable_sqlite_transactions(engine: Engine) -> None:
    """
    Let SQLAlchemy own transaction boundaries on pysqlite.

    pysqlite does not emit BEGIN before a SAVEPOINT, so the outermost
    SAVEPOINT opens the transaction and its RELEASE commits it. With the
    driver's own handling disabled and an explicit BEGIN on every
    SQLAlchemy transaction, savepoints nest inside the session transaction
    and a rollback undoes everything written since BEGIN.
    """
    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        # WAL: an open read transaction on one session never blocks another session's commit.
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")


_is_sqlite = settings.DATABASE_URL.startswith("sqlite")
_connect_args = {"check_same_thread": False} if _is_sqlite else {}

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args)
if _is_sqlite:
    enable_sqlite_transactions(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
