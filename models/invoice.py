# models/invoice.py
import enum
from sqlalchemy import (
     Column,
     Integer,
     String,
     Text,
     Numeric,
     Date,
     DateTime,
     ForeignKey,
     Enum,
     CheckConstraint,
     func,
)
from sqlalchemy.orm import relationship
from .base import Base


class InvoiceType(str, enum.Enum):
     """Kind of transaction the invoice records."""
     CASH = "CASH"
     CREDIT = "CREDIT"
     DEBIT = "DEBIT"


class PaymentStatus(str, enum.Enum):
     """Settlement state, derived from the invoice's payments."""
     PENDING = "PENDING"
     PARTIAL = "PARTIAL"
     PAID = "PAID"


class Invoice(Base):
     """
     Invoice model - a bill issued by one user (issuer) to another (recipient).

     Monetary totals are derived from the line items at creation time and
     the settlement fields (amount_paid, amount_due, payment_status) are
     derived from the payments recorded against the invoice.
     """
     __tablename__ = "invoices"
     __table_args__ = (
          CheckConstraint("amount_paid >= 0", name="ck_invoices_amount_paid_non_negative"),
          CheckConstraint("amount_paid <= total_amount", name="ck_invoices_amount_paid_le_total"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     invoice_number = Column(String(32), unique=True, nullable=False, index=True)

     # Parties (generated_by / generated_for)
     issuer_id = Column(
          Integer,
          ForeignKey("users.id"),
          nullable=False,
          index=True
     )
     recipient_id = Column(
          Integer,
          ForeignKey("users.id"),
          nullable=False,
          index=True
     )

     invoice_type = Column(
          Enum(InvoiceType, name="invoice_type", create_constraint=True),
          nullable=False
     )
     payment_status = Column(
          Enum(PaymentStatus, name="payment_status", create_constraint=True),
          default=PaymentStatus.PENDING,
          nullable=False,
          index=True
     )

     invoice_date = Column(Date, nullable=False, index=True)
     due_date = Column(Date, nullable=False, index=True)

     # Money
     sub_total = Column(Numeric(15, 2), nullable=False, default=0)
     total_gst = Column(Numeric(15, 2), nullable=False, default=0)
     total_amount = Column(Numeric(15, 2), nullable=False, default=0)
     amount_paid = Column(Numeric(15, 2), nullable=False, default=0)
     amount_due = Column(Numeric(15, 2), nullable=False, default=0)

     notes = Column(Text, nullable=True)
     terms = Column(Text, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     # Relationships
     issuer = relationship("User", foreign_keys=[issuer_id])
     recipient = relationship("User", foreign_keys=[recipient_id])
     line_items = relationship(
          "InvoiceLineItem",
          back_populates="invoice",
          order_by="InvoiceLineItem.position",
          cascade="all, delete-orphan"
     )
     payments = relationship(
          "Payment",
          back_populates="invoice",
          order_by="Payment.id"
     )

     def __repr__(self):
          return (
               f"<Invoice(id={self.id}, number='{self.invoice_number}', "
               f"total={self.total_amount}, status='{self.payment_status.value}')>"
          )

     @property
     def is_overdue(self) -> bool:
          """Check if invoice is past due date and not fully paid."""
          from time_utils import utctoday
          return self.payment_status != PaymentStatus.PAID and self.due_date < utctoday()


class InvoiceLineItem(Base):
     """
     One priced line of an invoice. Owned by the invoice and deleted with it.
     """
     __tablename__ = "invoice_line_items"

     id = Column(Integer, primary_key=True, autoincrement=True)
     invoice_id = Column(
          Integer,
          ForeignKey("invoices.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     item_id = Column(Integer, ForeignKey("items.id"), nullable=True)  # NULL for custom lines
     position = Column(Integer, nullable=False, default=0)

     description = Column(String(500), nullable=False)
     quantity = Column(Numeric(10, 3), nullable=False)
     rate = Column(Numeric(15, 2), nullable=False)
     gst_rate = Column(Integer, nullable=False)

     # Derived
     amount = Column(Numeric(15, 2), nullable=False)
     gst_amount = Column(Numeric(15, 2), nullable=False)
     total_amount = Column(Numeric(15, 2), nullable=False)

     invoice = relationship("Invoice", back_populates="line_items")
     item = relationship("Item")

     def __repr__(self):
          return f"<InvoiceLineItem(id={self.id}, invoice_id={self.invoice_id}, total={self.total_amount})>"
