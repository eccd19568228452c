from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from app.core.config import settings


Base = declarative_base()


connection_string = settings.storage.url


def build_engine(url: str) -> Engine:
    # SQLite connections are shared between the API threadpool workers
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(
        url,
        echo=settings.app.is_testing is True,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = build_engine(connection_string)
