from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.requests import Request

Base = declarative_base()


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(database_url: str):
    if is_sqlite(database_url):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live on a single connection.
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine) -> None:
    """Create missing directory tables."""
    from . import models  # noqa: F401  registers mappings on Base

    Base.metadata.create_all(bind=engine, checkfirst=True)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
