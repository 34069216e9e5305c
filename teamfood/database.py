from collections.abc import Generator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from .config import get_settings


def build_engine(database_url: str, **engine_kwargs) -> Engine:
    if database_url.startswith("sqlite"):
        engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(database_url, echo=False, **engine_kwargs)


engine = build_engine(get_settings().database_url)


def init_db(bind: Engine | None = None) -> None:
    # table classes must be registered on the metadata before create_all
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
