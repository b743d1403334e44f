# models/invoice_sequence.py
from sqlalchemy import Column, Integer, String
from .base import Base


class InvoiceSequence(Base):
     """
     Named counter used to allocate invoice numbers.

     Incremented with a single UPDATE so the row lock taken by the database
     serializes concurrent allocations until the creating transaction ends.
     """

     name = Column(String(50), primary_key=True)
     last_value = Column(Integer, nullable=False, default=0)

     def __repr__(self):
          return f"<InvoiceSequence(name='{self.name}', last_value={self.last_value})>"
