# services/payment_service.py
"""
Payment Ledger - records payments and re-derives settlement state.

Recording a payment is a critical section scoped to one invoice:
     1. load the invoice the caller can see (NotFoundError otherwise)
     2. validate amount and method
     3. claim the row with an UPDATE guarded by amount_due >= amount;
        a concurrent payer waits on the row and then re-checks the guard
     4. insert the payment
     5. recompute amount_paid as SUM(payments.amount) and derive
        amount_due and payment_status from it

Because step 5 always reads the ledger rather than adding to a running
total, the status columns can be rebuilt from the payments at any time
(see recompute_settlement). Payments on other invoices never wait on
this lock.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, List

from models import Invoice, Payment, PaymentMethod, PaymentStatus
from repositories import InvoiceRepository
from time_utils import utcnow
from .access_policy import Principal, visibility_filter
from .errors import NotFoundError, OverpaymentError, ValidationError
from .gst_calculator import quantize_money


def derive_payment_status(total_amount: Decimal, amount_paid: Decimal) -> PaymentStatus:
     """Settlement state as a pure function of the totals."""
     if amount_paid >= total_amount:
          return PaymentStatus.PAID
     if amount_paid > 0:
          return PaymentStatus.PARTIAL
     return PaymentStatus.PENDING


def _parse_amount(value: Any) -> Decimal:
     try:
          amount = value if isinstance(value, Decimal) else Decimal(str(value))
     except (InvalidOperation, TypeError, ValueError):
          raise ValidationError("Payment amount must be a number")
     if not amount.is_finite():
          raise ValidationError("Payment amount must be a finite number")
     return quantize_money(amount)


def _parse_method(value: Any) -> PaymentMethod:
     try:
          return PaymentMethod(value)
     except ValueError:
          allowed = ", ".join(m.value for m in PaymentMethod)
          raise ValidationError(f"Invalid payment method {value!r}; expected one of {allowed}")


class PaymentService:
     """Service class for the payment ledger."""

     def __init__(self, repository: InvoiceRepository):
          self.repository = repository

     def _get_visible_invoice(self, invoice_id: int, principal: Principal, for_update: bool = False) -> Invoice:
          invoice = self.repository.get_invoice(
               invoice_id,
               criterion=visibility_filter(principal),
               for_update=for_update,
          )
          if invoice is None:
               raise NotFoundError(f"Invoice with ID {invoice_id} not found")
          return invoice

     def record_payment(self, invoice_id: int, draft: Any, principal: Principal) -> Payment:
          """
          Record a payment against an invoice.

          Args:
               invoice_id: Invoice being paid
               draft: object with amount, payment_method and optional
                    payment_date, reference, notes
               principal: caller; must be able to see the invoice

          Returns:
               The persisted Payment

          Raises:
               NotFoundError: invoice missing or not visible to the principal
               ValidationError: amount <= 0 or unknown payment method
               OverpaymentError: amount exceeds the current amount_due
          """
          invoice = self._get_visible_invoice(invoice_id, principal, for_update=True)

          amount = _parse_amount(draft.amount)
          if amount <= 0:
               raise ValidationError("Payment amount must be positive")
          method = _parse_method(draft.payment_method)

          if not self.repository.claim_for_payment(invoice, amount):
               raise OverpaymentError(
                    f"Payment amount {amount} exceeds amount due {invoice.amount_due}",
                    amount_due=invoice.amount_due,
               )

          payment = Payment(
               invoice_id=invoice.id,
               amount=amount,
               payment_method=method,
               payment_date=getattr(draft, "payment_date", None) or utcnow(),
               reference=getattr(draft, "reference", None),
               notes=getattr(draft, "notes", None),
          )
          self.repository.add_payment(payment)
          self.recompute_settlement(invoice)
          return payment

     def recompute_settlement(self, invoice: Invoice) -> Invoice:
          """Re-derive amount_paid, amount_due and payment_status from the ledger."""
          amount_paid = quantize_money(self.repository.sum_payments(invoice.id))
          total_amount = quantize_money(Decimal(invoice.total_amount))

          invoice.amount_paid = amount_paid
          invoice.amount_due = total_amount - amount_paid
          invoice.payment_status = derive_payment_status(total_amount, amount_paid)
          self.repository.flush()
          return invoice

     def list_payments(self, invoice_id: int, principal: Principal) -> List[Payment]:
          invoice = self._get_visible_invoice(invoice_id, principal)
          return self.repository.list_payments(invoice.id)
