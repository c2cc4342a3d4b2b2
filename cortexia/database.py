import json
import logging
import os
from datetime import date, datetime

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from cortexia.config import DATABASE_URL

logger = logging.getLogger(__name__)

# Only use connect_args if we are using SQLite
engine_args = {}
if DATABASE_URL.startswith("sqlite"):
    engine_args["connect_args"] = {"check_same_thread": False}
    # In-memory databases must share one connection across sessions
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_args["poolclass"] = StaticPool
else:
    # Production settings for PostgreSQL
    engine_args.update({
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
    })

try:
    engine = create_engine(
        DATABASE_URL,
        **engine_args,
        echo=False,
    )
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
except Exception as e:
    logger.error(f"Failed to create engine: {e}")
    raise e


class _Serializable:
    """Mixin that turns a row into the JSON shape returned by the API."""

    # Text columns that hold JSON documents
    __json_fields__: tuple = ()
    # Columns never exposed to clients
    __hidden_fields__: tuple = ()

    def to_dict(self) -> dict:
        out = {}
        for column in self.__table__.columns:
            name = column.name
            if name in self.__hidden_fields__:
                continue
            value = getattr(self, name)
            if name in self.__json_fields__:
                value = json.loads(value) if value else []
            elif isinstance(value, (datetime, date)):
                value = value.isoformat()
            out[name] = value
        return out


Base = declarative_base(cls=_Serializable)


def get_db():
    """FastAPI dependency: yields a database session and closes it after use."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create the data/ directory if needed, then create all tables."""
    if DATABASE_URL.startswith("sqlite:///") and ":memory:" not in DATABASE_URL:
        db_dir = os.path.dirname(DATABASE_URL.replace("sqlite:///", "", 1))
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    # Import all models so they register with Base.metadata
    import cortexia.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized successfully.")
