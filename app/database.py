import uuid
from datetime import datetime, timezone
from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

Base = declarative_base()


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Database:
    """
    Owns the engine and session factory for one application instance.

    Built during the FastAPI lifespan and stored on `app.state.db`; request
    handlers receive sessions through `get_db`, scripts call `session()`
    directly.
    """

    def __init__(self, url: str, engine: Optional[Engine] = None):
        self.url = url
        if engine is not None:
            self.engine = engine
        elif url.startswith("sqlite"):
            # SQLite configuration for local development/testing
            self.engine = create_engine(url, connect_args={"check_same_thread": False})
        else:
            self.engine = create_engine(url, pool_pre_ping=True)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def init(self) -> None:
        """Registers all domain models and emits the schema."""
        import app.models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def ping(self) -> None:
        with self.session() as session:
            session.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Session Provider: Provides a database session per request.
    Transaction management is handled explicitly in the Service Layer.
    """
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
