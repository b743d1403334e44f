# repositories/__init__.py
from .invoice_repository import InvoiceRepository

__all__ = [
     "InvoiceRepository",
]
