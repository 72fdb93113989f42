from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from ledger_api.core.config import settings


def _engine_options(url: str) -> dict:
    """Pool options for the configured backend (SQLite manages its own pool)"""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using them
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_recycle": 3600,  # MySQL drops idle connections after wait_timeout
    }


# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """
    Create the tables owned by this service (users, scripts_status).

    Listing tables belong to the scrapers that fill them and are never
    created here.
    """
    from ledger_api.models import User, ScriptStatus  # Import models to register them
    Base.metadata.create_all(
        bind=bind or engine,
        tables=[User.__table__, ScriptStatus.__table__],
    )
