# services/__init__.py
from .errors import (
     InvoiceServiceError,
     ValidationError,
     NotFoundError,
     ConflictError,
     OverpaymentError,
     AuthorizationError,
)
from .access_policy import Principal
from .gst_calculator import calculate_invoice, LineItemDraft, InvoiceTotals
from .numbering_service import NumberingService, format_invoice_number
from .payment_service import PaymentService, derive_payment_status
from .invoice_service import InvoiceService

__all__ = [
     "InvoiceServiceError",
     "ValidationError",
     "NotFoundError",
     "ConflictError",
     "OverpaymentError",
     "AuthorizationError",
     "Principal",
     "calculate_invoice",
     "LineItemDraft",
     "InvoiceTotals",
     "NumberingService",
     "format_invoice_number",
     "PaymentService",
     "derive_payment_status",
     "InvoiceService",
]
