from collections.abc import Generator

from sqlalchemy.future import Engine
from sqlmodel import Session, SQLModel, create_engine

from ...config import settings

# Table models register themselves on SQLModel.metadata when imported
from .options import OptionRecord  # noqa: F401
from .transients import TransientRecord  # noqa: F401


def _get_engine() -> Engine:
    database_url = settings.database_url
    connect_args: dict[str, bool] = {}
    engine_kwargs: dict[str, int | bool] = {}

    # Configure connection args based on database type
    if "sqlite" in database_url:
        connect_args["check_same_thread"] = False
    elif "postgresql" in database_url:
        engine_kwargs["pool_pre_ping"] = True
        engine_kwargs["pool_size"] = 10
        engine_kwargs["max_overflow"] = 20

    engine = create_engine(
        database_url,
        # echo=True,  # Enable for SQL debugging
        connect_args=connect_args,
        **engine_kwargs,
    )
    return engine


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


_engine: Engine | None = None


def get_main_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = _get_engine()
    return _engine


def get_session() -> Generator[Session, None, None]:
    with Session(get_main_engine()) as session:
        yield session
