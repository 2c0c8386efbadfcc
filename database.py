import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL
url = make_url(DATABASE_URL)

logger.info("Using %s database", url.get_backend_name())

if url.get_backend_name() == "sqlite":
    # one shared connection when the database lives in memory
    engine_options = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        engine_options["poolclass"] = StaticPool
    engine = create_engine(DATABASE_URL, **engine_options)
else:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# DB Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
