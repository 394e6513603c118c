"""Generate database session"""

from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import settings
from src.db.schema import Base

engine = create_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Ensure all tables are created"""
    Base.metadata.create_all(bind=bind)


def get_db(session_factory: sessionmaker[Session] = SessionLocal) -> Iterator[Session]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
