"""
Races between independent transactions on a file database.

Every worker gets its own session (and so its own connection); SQLite
serializes the writers, the guarded UPDATE in the payment ledger and the
counter UPDATE in the numbering service do the rest.
"""
import re
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from sqlalchemy.dialects import mssql, postgresql

from models import Invoice, Payment, PaymentStatus, User
from repositories import InvoiceRepository
from schemas.payment import PaymentCreate
from services.errors import OverpaymentError
from services.invoice_service import InvoiceService
from services.payment_service import PaymentService
from conftest import principal_for, sample_draft


def seed_parties(session_factory):
     session = session_factory()
     alice = User(email="alice@example.com", name="Alice Traders", is_admin=False)
     bob = User(email="bob@example.com", name="Bob Retail", is_admin=False)
     session.add_all([alice, bob])
     session.commit()
     session.close()
     return alice, bob


def seed_invoice(session_factory, issuer, recipient):
     session = session_factory()
     invoice = InvoiceService(InvoiceRepository(session)).create_invoice(
          sample_draft(recipient.id), principal_for(issuer)
     )
     session.commit()
     session.close()
     return invoice


def pay(amount):
     return PaymentCreate(amount=Decimal(amount), payment_method="CASH")


class SettledByOtherSessionRepository(InvoiceRepository):
     """Runs `on_load` right after the first invoice read, before anything is written."""

     def __init__(self, db, on_load):
          super().__init__(db)
          self.on_load = on_load

     def get_invoice(self, invoice_id, **options):
          invoice = super().get_invoice(invoice_id, **options)
          if self.on_load is not None:
               on_load, self.on_load = self.on_load, None
               on_load()
          return invoice


def test_payment_racing_a_committed_payment_is_rejected(file_session_factory):
     alice, bob = seed_parties(file_session_factory)
     invoice = seed_invoice(file_session_factory, alice, bob)

     def other_session_pays_200():
          session = file_session_factory()
          PaymentService(InvoiceRepository(session)).record_payment(invoice.id, pay("200"), principal_for(bob))
          session.commit()
          session.close()

     session = file_session_factory()
     service = PaymentService(SettledByOtherSessionRepository(session, other_session_pays_200))
     with pytest.raises(OverpaymentError) as exc_info:
          service.record_payment(invoice.id, pay("200"), principal_for(alice))
     session.rollback()
     session.close()

     assert exc_info.value.amount_due == Decimal("88.50")

     check = file_session_factory()
     stored = check.query(Invoice).filter(Invoice.id == invoice.id).one()
     assert check.query(Payment).filter(Payment.invoice_id == invoice.id).count() == 1
     assert stored.amount_paid == Decimal("200.00")
     assert stored.amount_due == Decimal("88.50")
     assert stored.payment_status == PaymentStatus.PARTIAL
     check.close()


def test_concurrent_payments_never_exceed_the_total(file_session_factory):
     alice, bob = seed_parties(file_session_factory)
     invoice = seed_invoice(file_session_factory, alice, bob)

     def pay_100(_):
          session = file_session_factory()
          try:
               PaymentService(InvoiceRepository(session)).record_payment(
                    invoice.id, pay("100"), principal_for(bob)
               )
               session.commit()
               return "paid"
          except OverpaymentError:
               session.rollback()
               return "rejected"
          finally:
               session.close()

     with ThreadPoolExecutor(max_workers=6) as pool:
          outcomes = list(pool.map(pay_100, range(6)))

     assert outcomes.count("paid") == 2
     assert outcomes.count("rejected") == 4

     check = file_session_factory()
     stored = check.query(Invoice).filter(Invoice.id == invoice.id).one()
     assert stored.amount_paid == Decimal("200.00")
     assert stored.amount_due == Decimal("88.50")
     assert check.query(Payment).filter(Payment.invoice_id == invoice.id).count() == 2
     check.close()


def test_concurrently_created_invoices_get_unique_numbers(file_session_factory):
     alice, bob = seed_parties(file_session_factory)
     first = seed_invoice(file_session_factory, alice, bob)

     def create_three(_):
          session = file_session_factory()
          service = InvoiceService(InvoiceRepository(session))
          numbers = []
          try:
               for _ in range(3):
                    invoice = service.create_invoice(sample_draft(bob.id), principal_for(alice))
                    session.commit()
                    numbers.append(invoice.invoice_number)
          finally:
               session.close()
          return numbers

     with ThreadPoolExecutor(max_workers=8) as pool:
          batches = list(pool.map(create_three, range(8)))

     numbers = [first.invoice_number] + [n for batch in batches for n in batch]
     assert len(numbers) == 25
     assert len(set(numbers)) == 25
     assert all(re.fullmatch(r"INV-\d{4}-\d{6}", n) for n in numbers)
     assert sorted(int(n.rsplit("-", 1)[1]) for n in numbers) == list(range(1, 26))


def test_locked_invoice_read_renders_a_row_lock_per_dialect(repository):
     query = repository.invoice_query(1, for_update=True)

     mssql_sql = str(query.statement.compile(dialect=mssql.dialect()))
     postgres_sql = str(query.statement.compile(dialect=postgresql.dialect()))

     assert "WITH (UPDLOCK, ROWLOCK)" in mssql_sql
     assert "FOR UPDATE" in postgres_sql
     assert "UPDLOCK" not in postgres_sql
