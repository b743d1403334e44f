# services/numbering_service.py
"""
Invoice Numbering Authority.

Numbers look like INV-2026-000042. The year is the creation year; the
sequence is a running count of every invoice ever numbered and is not
reset at the start of a year.

Allocation is an atomic increment of the `invoice` counter row, so two
concurrent creations can never draw the same value. The first allocation
seeds the counter from the number of invoices already stored, which keeps
numbering continuous for databases that predate the counter.
"""
from sqlalchemy.exc import IntegrityError

import config
from repositories import InvoiceRepository
from .errors import ConflictError

INVOICE_SEQUENCE = "invoice"


def format_invoice_number(year: int, sequence: int, prefix: str = config.INVOICE_NUMBER_PREFIX) -> str:
     return f"{prefix}-{year}-{sequence:06d}"


class NumberingService:
     """Allocates unique, sequential invoice numbers."""

     def __init__(self, repository: InvoiceRepository, prefix: str = config.INVOICE_NUMBER_PREFIX):
          self.repository = repository
          self.prefix = prefix

     def next_sequence(self) -> int:
          value = self.repository.increment_sequence(INVOICE_SEQUENCE)
          if value is not None:
               return value

          seed = self.repository.count_invoices() + 1
          try:
               return self.repository.create_sequence(INVOICE_SEQUENCE, seed)
          except IntegrityError:
               # Another transaction created the counter first
               raise ConflictError("Invoice number allocation collided, retry the request")

     def next_invoice_number(self, year: int) -> str:
          """
          Allocate the next invoice number for an invoice created in `year`.

          Raises:
               ConflictError: the counter could not be allocated atomically
          """
          return format_invoice_number(year, self.next_sequence(), self.prefix)
