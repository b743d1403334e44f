# services/invoice_service.py
"""
Invoice Service - lifecycle of an invoice from creation to deletion.

Creation funnels through the GST calculator and the numbering authority,
then persists the invoice together with its line items in the caller's
transaction. Settlement state starts at PENDING and only the payment
ledger moves it forward (PENDING -> PARTIAL -> PAID).
"""
from datetime import timedelta
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

import config
from models import Invoice, InvoiceLineItem, InvoiceType, PaymentStatus
from repositories import InvoiceRepository
from time_utils import utcnow
from .access_policy import Principal, can_access_invoice, can_create_for, can_delete, visibility_filter
from .errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from .gst_calculator import calculate_invoice
from .numbering_service import NumberingService


class InvoiceService:
     """Service class for invoice-related business logic."""

     def __init__(
          self,
          repository: InvoiceRepository,
          numbering: Optional[NumberingService] = None,
          default_due_days: int = config.DEFAULT_DUE_DAYS,
          recognized_gst_rates: Iterable[int] = config.RECOGNIZED_GST_RATES,
          max_page_limit: int = config.MAX_PAGE_LIMIT,
     ):
          self.repository = repository
          self.numbering = numbering or NumberingService(repository)
          self.default_due_days = default_due_days
          self.recognized_gst_rates = frozenset(recognized_gst_rates)
          self.max_page_limit = max_page_limit

     def create_invoice(self, draft: Any, principal: Principal) -> Invoice:
          """
          Create an invoice with its line items.

          Args:
               draft: object with recipient_id, invoice_type, line_items and
                    optional issuer_id, invoice_date, due_date, notes, terms
               principal: caller; becomes the issuer unless an admin names another

          Returns:
               Created Invoice object (flushed, not committed)

          Raises:
               AuthorizationError: non-admin creating on behalf of someone else
               ValidationError: bad type, dates, recipient, line items or catalog item
               ConflictError: invoice number could not be allocated uniquely
          """
          issuer_id = getattr(draft, "issuer_id", None) or principal.user_id
          if not can_create_for(principal, issuer_id):
               raise AuthorizationError("Only administrators can create invoices on behalf of another user")

          try:
               invoice_type = InvoiceType(draft.invoice_type)
          except ValueError:
               raise ValidationError(f"Invalid invoice type {draft.invoice_type!r}")

          if not self.repository.user_exists(draft.recipient_id):
               raise ValidationError(f"Recipient with ID {draft.recipient_id} not found")
          if issuer_id != principal.user_id and not self.repository.user_exists(issuer_id):
               raise ValidationError(f"Issuer with ID {issuer_id} not found")

          now = utcnow()
          invoice_date = getattr(draft, "invoice_date", None) or now.date()
          due_date = getattr(draft, "due_date", None) or invoice_date + timedelta(days=self.default_due_days)
          if due_date < invoice_date:
               raise ValidationError("Due date cannot be before the invoice date")

          totals = calculate_invoice(draft.line_items, self.recognized_gst_rates)

          missing = self.repository.missing_item_ids(line.item_id for line in totals.lines)
          for number, line in enumerate(totals.lines, start=1):
               if line.item_id in missing:
                    raise ValidationError(f"Line {number}: item with ID {line.item_id} not found")

          invoice = Invoice(
               invoice_number=self.numbering.next_invoice_number(now.year),
               issuer_id=issuer_id,
               recipient_id=draft.recipient_id,
               invoice_type=invoice_type,
               payment_status=PaymentStatus.PENDING,
               invoice_date=invoice_date,
               due_date=due_date,
               sub_total=totals.sub_total,
               total_gst=totals.total_gst,
               total_amount=totals.total_amount,
               amount_paid=Decimal("0.00"),
               amount_due=totals.total_amount,
               notes=getattr(draft, "notes", None),
               terms=getattr(draft, "terms", None),
               line_items=[
                    InvoiceLineItem(
                         item_id=line.item_id,
                         position=position,
                         description=line.description,
                         quantity=line.quantity,
                         rate=line.rate,
                         gst_rate=line.gst_rate,
                         amount=line.amount,
                         gst_amount=line.gst_amount,
                         total_amount=line.total_amount,
                    )
                    for position, line in enumerate(totals.lines)
               ],
          )

          try:
               self.repository.add_invoice(invoice)
          except IntegrityError as e:
               if "invoice_number" not in str(e.orig):
                    raise
               raise ConflictError(f"Invoice number {invoice.invoice_number} is already taken, retry the request")

          return invoice

     def get_invoice(self, invoice_id: int, principal: Principal) -> Invoice:
          """
          Load an invoice with parties, line items and payments.

          Missing and inaccessible invoices both raise NotFoundError so that
          callers cannot discover invoices they are not party to.
          """
          invoice = self.repository.get_invoice(
               invoice_id,
               criterion=visibility_filter(principal),
               with_relations=True,
          )
          if invoice is None or not can_access_invoice(principal, invoice):
               raise NotFoundError(f"Invoice with ID {invoice_id} not found")
          return invoice

     def list_invoices(
          self,
          principal: Principal,
          page: int = 1,
          limit: int = config.DEFAULT_PAGE_LIMIT,
     ) -> Tuple[List[Invoice], int]:
          """Invoices visible to the principal, newest first, with the total count."""
          if page < 1:
               raise ValidationError("Page must be 1 or greater")
          if limit < 1 or limit > self.max_page_limit:
               raise ValidationError(f"Limit must be between 1 and {self.max_page_limit}")

          offset = (page - 1) * limit
          return self.repository.list_invoices(visibility_filter(principal), offset, limit)

     def delete_invoice(self, invoice_id: int, principal: Principal) -> None:
          """
          Delete an invoice and its line items. Admins only; refused once any
          payment has been recorded.
          """
          if not can_delete(principal):
               raise AuthorizationError("Only administrators can delete invoices")

          invoice = self.repository.get_invoice(invoice_id, for_update=True)
          if invoice is None:
               raise NotFoundError(f"Invoice with ID {invoice_id} not found")

          if self.repository.count_payments(invoice.id) > 0:
               raise ConflictError("Cannot delete an invoice that has payments")

          self.repository.delete_invoice(invoice)
