import re
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from models import Invoice, InvoiceSequence, InvoiceType, PaymentStatus
from services.errors import ConflictError
from services.numbering_service import NumberingService, format_invoice_number
from conftest import principal_for, sample_draft


def test_format_pads_sequence_to_six_digits():
     assert format_invoice_number(2026, 42) == "INV-2026-000042"
     assert format_invoice_number(2027, 1234567) == "INV-2027-1234567"


def test_sequence_starts_at_one_and_increments(repository):
     numbering = NumberingService(repository)

     assert numbering.next_invoice_number(2026) == "INV-2026-000001"
     assert numbering.next_invoice_number(2026) == "INV-2026-000002"
     assert numbering.next_invoice_number(2026) == "INV-2026-000003"


def test_sequence_is_not_reset_for_a_new_year(repository):
     numbering = NumberingService(repository)

     assert numbering.next_invoice_number(2026) == "INV-2026-000001"
     assert numbering.next_invoice_number(2027) == "INV-2027-000002"


def test_counter_is_seeded_from_existing_invoices(db_session, repository, alice, bob):
     for n in range(1, 4):
          db_session.add(Invoice(
               invoice_number=f"LEGACY-{n}",
               issuer_id=alice.id,
               recipient_id=bob.id,
               invoice_type=InvoiceType.CASH,
               payment_status=PaymentStatus.PENDING,
               invoice_date=date(2025, 1, n),
               due_date=date(2025, 2, n),
               sub_total=Decimal("0"),
               total_gst=Decimal("0"),
               total_amount=Decimal("0"),
               amount_paid=Decimal("0"),
               amount_due=Decimal("0"),
          ))
     db_session.commit()

     numbering = NumberingService(repository)
     assert numbering.next_invoice_number(2026) == "INV-2026-000004"

     counter = db_session.query(InvoiceSequence).one()
     assert counter.last_value == 4


def test_created_invoices_get_unique_numbers(db_session, invoice_service, alice, bob):
     numbers = []
     for _ in range(25):
          invoice = invoice_service.create_invoice(sample_draft(bob.id), principal_for(alice))
          numbers.append(invoice.invoice_number)
     db_session.commit()

     assert len(set(numbers)) == 25
     assert all(re.fullmatch(r"INV-\d{4}-\d{6}", n) for n in numbers)
     assert [int(n.rsplit("-", 1)[1]) for n in numbers] == list(range(1, 26))


def test_counter_seeded_by_another_transaction_is_a_conflict(repository, monkeypatch):
     def seeded_elsewhere(name, value):
          raise IntegrityError("INSERT INTO invoice_sequences", {}, Exception("UNIQUE constraint failed"))

     monkeypatch.setattr(repository, "create_sequence", seeded_elsewhere)

     with pytest.raises(ConflictError, match="retry"):
          NumberingService(repository).next_invoice_number(2026)
