"""
Database Configuration Module

This module handles the database configuration and connection setup for the ledger service.
It uses SQLAlchemy for ORM (Object-Relational Mapping) with PostgreSQL as the database.

The module includes:
- Database connection setup
- Session management
- Base model class definition
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

import config

# SQLite needs cross-thread access for the FastAPI test client; other backends take no extra args
connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}

# Create SQLAlchemy engine
# The engine is the entry point to the SQLAlchemy ORM
engine = create_engine(config.DATABASE_URL, connect_args=connect_args)

# Create SessionLocal class
# autocommit=False means every ledger operation commits (or rolls back) explicitly
# autoflush=False means we need to explicitly flush changes to the database
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base is the declarative base class that our ORM models will inherit from
Base = declarative_base()


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
