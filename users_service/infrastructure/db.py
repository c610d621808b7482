from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from ..config import settings


def _engine_options(url: str) -> dict:
    # SQLite: сессия открывается в одном потоке пула, а используется в другом
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    connect_args = {}
    if url.startswith("postgresql"):
        connect_args = {"client_encoding": "utf8"}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 3600,
        "connect_args": connect_args,
    }


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_options(settings.DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()


def ping(db: Session) -> None:
    db.execute(text("SELECT 1"))
