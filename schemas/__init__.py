# schemas/__init__.py
from .invoice import (
     LineItemCreate,
     InvoiceCreate,
     InvoiceResponse,
     InvoiceListResponse,
)
from .payment import PaymentCreate, PaymentResponse

__all__ = [
     "LineItemCreate",
     "InvoiceCreate",
     "InvoiceResponse",
     "InvoiceListResponse",
     "PaymentCreate",
     "PaymentResponse",
]
