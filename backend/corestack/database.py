from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import logging

from corestack.services.settings_loader import get_database_url

logger = logging.getLogger(__name__)

DATABASE_URL = get_database_url()

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

try:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    logger.info(f"Database connection initialized: {DATABASE_URL.split('@')[1] if '@' in DATABASE_URL else DATABASE_URL.split(':')[0]}")
except Exception as e:
    logger.error(f"Failed to initialize database connection: {e}")
    raise

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
