"""
Database session configuration.

This module handles engine creation, session factories and schema
bootstrap using SQLAlchemy.
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from parcel_tracker.app.core.config import settings

# Create declarative base for models
Base = declarative_base()


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create an engine from settings.
    
    Args:
        database_url: Overrides settings.database_url when given
    
    Returns:
        SQLAlchemy engine
    """
    return create_engine(
        database_url or settings.database_url,
        echo=settings.db_echo,
        future=True,
    )


def get_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to an engine."""
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


def init_db(engine: Engine) -> None:
    """Create all tables registered on Base."""
    # Import models to ensure they are registered with Base
    from parcel_tracker.app.models.parcel import ParcelRecord  # noqa: F401
    
    Base.metadata.create_all(engine)


def drop_db(engine: Engine) -> None:
    Base.metadata.drop_all(engine)
