import logging
from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from nurul_iman.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(settings: Settings) -> Engine:
    # SQLite needs check_same_thread=False for FastAPI
    connect_args = {}
    kwargs = {}
    if settings.database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if settings.database_url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every session sees an empty db
            kwargs["poolclass"] = StaticPool
    engine = create_engine(
        settings.database_url,
        connect_args=connect_args,
        echo=False,
        **kwargs,
    )
    if engine.dialect.name == "sqlite":
        # SQLite ignores foreign keys unless enabled per connection
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine, settings: Settings) -> None:
    """Create missing tables and seed the default roles. No-op for existing rows."""
    import nurul_iman.models  # noqa: F401 - register models on Base.metadata
    from nurul_iman.models.role import Role

    Base.metadata.create_all(bind=engine)
    factory = build_session_factory(engine)
    with factory() as db:
        existing = {name for (name,) in db.query(Role.role_name).all()}
        missing = [name for name in settings.seed_role_names if name not in existing]
        for name in missing:
            db.add(Role(role_name=name))
        if missing:
            db.commit()
            logger.info("Seeded roles: %s", ", ".join(missing))


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
