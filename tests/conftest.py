"""
Pytest fixtures for the invoicing backend.

Provides an in-memory SQLite database per test, user fixtures, service
factories and a FastAPI test client wired to the same database.
"""
import os

# Must be set before config/database are imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import get_session
from models import Base, User
from repositories import InvoiceRepository
from schemas.invoice import InvoiceCreate, LineItemCreate
from services.access_policy import Principal
from services.invoice_service import InvoiceService
from services.payment_service import PaymentService


@pytest.fixture(scope='function')
def engine():
     """Fresh in-memory database shared by every connection in the test."""
     engine = create_engine(
          "sqlite://",
          connect_args={"check_same_thread": False},
          poolclass=StaticPool,
     )
     Base.metadata.create_all(bind=engine)
     yield engine
     Base.metadata.drop_all(bind=engine)
     engine.dispose()


@pytest.fixture(scope='function')
def session_factory(engine):
     return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope='function')
def file_session_factory(tmp_path):
     """
     Sessions on a file database, one connection each, foreign keys enforced.

     Unlike the in-memory fixture, two sessions here are two independent
     transactions, so writers really contend for the database lock.
     """
     engine = create_engine(
          f"sqlite:///{tmp_path / 'invoices.db'}",
          connect_args={"check_same_thread": False, "timeout": 30},
     )

     @event.listens_for(engine, "connect")
     def _enable_foreign_keys(dbapi_connection, connection_record):
          cursor = dbapi_connection.cursor()
          cursor.execute("PRAGMA foreign_keys=ON")
          cursor.close()

     Base.metadata.create_all(bind=engine)
     yield sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
     engine.dispose()


@pytest.fixture(scope='function')
def db_session(session_factory):
     session = session_factory()
     yield session
     session.rollback()
     session.close()


def _make_user(db_session, email, name, is_admin=False):
     user = User(email=email, name=name, is_admin=is_admin)
     db_session.add(user)
     db_session.commit()
     return user


@pytest.fixture(scope='function')
def admin_user(db_session):
     return _make_user(db_session, "admin@example.com", "Admin", is_admin=True)


@pytest.fixture(scope='function')
def alice(db_session):
     """Issuer in most tests."""
     return _make_user(db_session, "alice@example.com", "Alice Traders")


@pytest.fixture(scope='function')
def bob(db_session):
     """Recipient in most tests."""
     return _make_user(db_session, "bob@example.com", "Bob Retail")


@pytest.fixture(scope='function')
def carol(db_session):
     """Unrelated third party."""
     return _make_user(db_session, "carol@example.com", "Carol Stores")


def principal_for(user):
     return Principal(user_id=user.id, is_admin=user.is_admin)


@pytest.fixture(scope='function')
def repository(db_session):
     return InvoiceRepository(db_session)


@pytest.fixture(scope='function')
def invoice_service(repository):
     return InvoiceService(repository)


@pytest.fixture(scope='function')
def payment_service(repository):
     return PaymentService(repository)


def sample_draft(recipient_id, **overrides):
     """The two-line invoice used throughout: 250.00 + 38.50 GST = 288.50."""
     data = {
          "recipient_id": recipient_id,
          "invoice_type": "CREDIT",
          "line_items": [
               LineItemCreate(description="Consulting", quantity=Decimal("2"), rate=Decimal("100"), gst_rate=18),
               LineItemCreate(description="Travel", quantity=Decimal("1"), rate=Decimal("50"), gst_rate=5),
          ],
     }
     data.update(overrides)
     return InvoiceCreate(**data)


@pytest.fixture(scope='function')
def sample_invoice(db_session, invoice_service, alice, bob):
     invoice = invoice_service.create_invoice(sample_draft(bob.id), principal_for(alice))
     db_session.commit()
     return invoice


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@pytest.fixture(scope='function')
def client(session_factory):
     """Test client whose requests use the test database."""
     from main import app

     def override_get_session():
          session = session_factory()
          try:
               yield session
               session.commit()
          except Exception:
               session.rollback()
               raise
          finally:
               session.close()

     app.dependency_overrides[get_session] = override_get_session
     with TestClient(app) as test_client:
          yield test_client
     app.dependency_overrides.clear()


def auth_headers(user) -> dict:
     """Authorization header carrying a token for `user`."""
     token = jwt.encode(
          {"user_id": user.id, "is_admin": user.is_admin},
          "test-secret",
          algorithm="HS256",
     )
     return {'Authorization': f'Bearer {token}'}
