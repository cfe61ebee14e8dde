"""
Database Configuration Module

This module handles the database configuration and connection setup for the ERP backend.
It uses SQLAlchemy for ORM (Object-Relational Mapping) with PostgreSQL as the database.

The module includes:
- Database connection setup
- Session management
- Base model class definition
- The transaction boundary every business event runs inside
"""

from contextlib import contextmanager
import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from config import DATABASE_URL
from exceptions import PersistenceError

logger = logging.getLogger(__name__)

# Create SQLAlchemy engine
# The engine is the entry point to the SQLAlchemy ORM
engine = create_engine(DATABASE_URL, pool_pre_ping=True)

# Create SessionLocal class
# SessionLocal is a factory for creating new Session objects
# autocommit=False means we need to explicitly commit transactions
# autoflush=False means we need to explicitly flush changes to the database
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class
# Base is the declarative base class that our ORM models will inherit from
Base = declarative_base()


@contextmanager
def transaction(db: Session):
    """
    Run a block of work as one all-or-nothing unit.

    Everything flushed inside the block is committed when the block exits
    normally. Any exception rolls back every change made since the block was
    entered and is re-raised; storage failures are re-raised as PersistenceError
    so callers never see driver-specific exceptions.

    Usage:
        with transaction(db):
            order = write_sales_order(db, ...)
            write_journal_entry(db, ...)
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction rolled back after storage error: {e}")
        raise PersistenceError(str(e)) from e
    except Exception:
        db.rollback()
        raise


def run_in_transaction(db: Session, fn, *args, **kwargs):
    """Call fn(db, *args, **kwargs) inside transaction() and return its result."""
    with transaction(db):
        return fn(db, *args, **kwargs)


# Dependency to get database session
def get_db():
    """
    Dependency function that provides a database session.

    This function creates a new database session for each request and ensures
    that the session is properly closed after the request is completed.

    Yields:
        Session: A SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
