# models/__init__.py
from .base import Base
from .user import User
from .catalog import Category, Item
from .invoice import Invoice, InvoiceLineItem, InvoiceType, PaymentStatus
from .payment import Payment, PaymentMethod
from .invoice_sequence import InvoiceSequence

__all__ = [
     "Base",
     "User",
     "Category",
     "Item",
     "Invoice",
     "InvoiceLineItem",
     "InvoiceType",
     "PaymentStatus",
     "Payment",
     "PaymentMethod",
     "InvoiceSequence",
]
