from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.config import get_settings

settings = get_settings()

_pool_options: dict[str, object] = {}
if not settings.database_url.startswith("sqlite"):
    # pool_pre_ping: verify connections before using them
    _pool_options = {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
    }

engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    future=True,
    connect_args=settings.database_connect_args,
    **_pool_options,
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
