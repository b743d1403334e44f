# database.py
"""
Engine, session factory and transaction scopes.

Every unit of work (an API request or a script) runs inside one session
whose transaction commits when the work returns and rolls back if it
raises. Services flush through the repository but never commit.
"""
import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

import config

logger = logging.getLogger(__name__)


def build_engine(url: str = config.DATABASE_URL, echo: bool = config.SQL_ECHO) -> Engine:
     """SQLite gets a thread-agnostic connection, server databases a recycled pool."""
     if url.startswith("sqlite"):
          return create_engine(url, connect_args={"check_same_thread": False}, echo=echo)
     return create_engine(
          url,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,
          pool_pre_ping=True,
          echo=echo,
     )


engine = build_engine()

SessionLocal = sessionmaker(
     bind=engine,
     autocommit=False,
     autoflush=False,
     expire_on_commit=False,
)


@contextmanager
def get_session_context() -> Generator[Session, None, None]:
     """
     One transaction outside FastAPI (scripts, maintenance jobs).

     Usage:
          with get_session_context() as db:
               InvoiceService(InvoiceRepository(db)).delete_invoice(invoice_id, principal)
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def get_session() -> Generator[Session, None, None]:
     """FastAPI dependency: one session, and one transaction, per request."""
     with get_session_context() as session:
          yield session


def init_db(bind: Engine = engine) -> None:
     """Create missing tables. Deployed databases are managed by Alembic."""
     from models import Base
     Base.metadata.create_all(bind=bind)


def check_connection(bind: Engine = engine) -> bool:
     try:
          with bind.connect() as conn:
               conn.execute(text("SELECT 1"))
          return True
     except SQLAlchemyError as e:
          logger.error("Database connection failed: %s", e)
          return False
