# repositories/invoice_repository.py
"""
Invoice Repository - all database access for the invoicing core.

Services receive a repository bound to the request's session instead of
reaching for a shared handle. The repository flushes but never commits;
the session owner (get_session / get_session_context) decides the
transaction boundary.
"""
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, selectinload

from models import Invoice, InvoiceLineItem, InvoiceSequence, Item, Payment, User


class InvoiceRepository:
     """Storage access for invoices, their line items, payments and numbering."""

     def __init__(self, db: Session):
          self.db = db

     def flush(self) -> None:
          self.db.flush()

     # ------------------------------------------------------------------
     # Invoices
     # ------------------------------------------------------------------

     def invoice_query(
          self,
          invoice_id: int,
          criterion=None,
          for_update: bool = False,
          with_relations: bool = False,
     ) -> Query:
          """
          Query for one invoice.

          Args:
               invoice_id: Invoice primary key
               criterion: optional extra filter (e.g. the access policy's visibility filter)
               for_update: take a row lock (SELECT ... FOR UPDATE) until the transaction ends
               with_relations: eager-load parties, line items and payments
          """
          query = self.db.query(Invoice).filter(Invoice.id == invoice_id)
          if criterion is not None:
               query = query.filter(criterion)
          if with_relations:
               query = query.options(
                    selectinload(Invoice.issuer),
                    selectinload(Invoice.recipient),
                    selectinload(Invoice.line_items),
                    selectinload(Invoice.payments),
               )
          if for_update:
               # MSSQL ignores FOR UPDATE; UPDLOCK holds the row until commit
               query = query.with_for_update().with_hint(Invoice, "WITH (UPDLOCK, ROWLOCK)", "mssql")
          return query

     def get_invoice(self, invoice_id: int, **options) -> Optional[Invoice]:
          """Load one invoice; takes the same options as invoice_query."""
          # Always reload: the row may already sit in the identity map with stale totals
          return self.invoice_query(invoice_id, **options).populate_existing().first()

     def list_invoices(self, criterion, offset: int, limit: int) -> Tuple[List[Invoice], int]:
          """Page of invoices newest first, plus the total under the same filter."""
          query = self.db.query(Invoice)
          if criterion is not None:
               query = query.filter(criterion)

          total = query.count()
          invoices = (
               query.options(
                    selectinload(Invoice.issuer),
                    selectinload(Invoice.recipient),
                    selectinload(Invoice.line_items),
                    selectinload(Invoice.payments),
               )
               .populate_existing()
               .order_by(Invoice.created_at.desc(), Invoice.id.desc())
               .offset(offset)
               .limit(limit)
               .all()
          )
          return invoices, total

     def add_invoice(self, invoice: Invoice) -> Invoice:
          """Stage an invoice with its line items and flush both in one go."""
          self.db.add(invoice)
          self.db.flush()
          return invoice

     def delete_invoice(self, invoice: Invoice) -> None:
          # Line items first so no line item ever points at a missing invoice
          self.db.query(InvoiceLineItem).filter(
               InvoiceLineItem.invoice_id == invoice.id
          ).delete(synchronize_session=False)
          self.db.expire(invoice, ["line_items"])
          self.db.delete(invoice)
          self.db.flush()

     def claim_for_payment(self, invoice: Invoice, amount: Decimal) -> bool:
          """
          Write-lock the invoice row only if `amount` still fits in its amount_due.

          The guarded UPDATE is the serialization point for payments on one
          invoice: a concurrent payer blocks on the row and re-evaluates the
          guard against the committed amount_due, on every backend. The
          invoice is refreshed afterwards either way.
          """
          claimed = (
               self.db.query(Invoice)
               .filter(Invoice.id == invoice.id, Invoice.amount_due >= amount)
               .update({Invoice.updated_at: func.now()}, synchronize_session=False)
          )
          self.db.refresh(invoice)
          return claimed > 0

     def count_invoices(self) -> int:
          return self.db.query(func.count(Invoice.id)).scalar() or 0

     # ------------------------------------------------------------------
     # Payments
     # ------------------------------------------------------------------

     def add_payment(self, payment: Payment) -> Payment:
          self.db.add(payment)
          self.db.flush()
          return payment

     def sum_payments(self, invoice_id: int) -> Decimal:
          total = (
               self.db.query(func.coalesce(func.sum(Payment.amount), 0))
               .filter(Payment.invoice_id == invoice_id)
               .scalar()
          )
          return Decimal(str(total))

     def count_payments(self, invoice_id: int) -> int:
          return (
               self.db.query(func.count(Payment.id))
               .filter(Payment.invoice_id == invoice_id)
               .scalar()
          ) or 0

     def list_payments(self, invoice_id: int) -> List[Payment]:
          return (
               self.db.query(Payment)
               .filter(Payment.invoice_id == invoice_id)
               .order_by(Payment.payment_date.asc(), Payment.id.asc())
               .all()
          )

     # ------------------------------------------------------------------
     # Users and catalog
     # ------------------------------------------------------------------

     def user_exists(self, user_id: int) -> bool:
          return self.db.query(User.id).filter(User.id == user_id).first() is not None

     def missing_item_ids(self, item_ids) -> set:
          """Catalog ids from `item_ids` that have no Item row."""
          wanted = {item_id for item_id in item_ids if item_id is not None}
          if not wanted:
               return set()
          found = {row.id for row in self.db.query(Item.id).filter(Item.id.in_(wanted))}
          return wanted - found

     # ------------------------------------------------------------------
     # Sequences
     # ------------------------------------------------------------------

     def increment_sequence(self, name: str) -> Optional[int]:
          """
          Atomically bump a named counter and return its new value.

          The UPDATE holds the row lock until commit, so concurrent callers
          queue behind each other. Returns None if the counter row is missing.
          """
          updated = (
               self.db.query(InvoiceSequence)
               .filter(InvoiceSequence.name == name)
               .update({InvoiceSequence.last_value: InvoiceSequence.last_value + 1})
          )
          if not updated:
               return None
          return (
               self.db.query(InvoiceSequence.last_value)
               .filter(InvoiceSequence.name == name)
               .scalar()
          )

     def create_sequence(self, name: str, value: int) -> int:
          """Insert a counter row. Raises IntegrityError if it already exists."""
          self.db.add(InvoiceSequence(name=name, last_value=value))
          self.db.flush()
          return value
