# schemas/invoice.py
"""
Pydantic schemas for Invoice API request/response validation.

Derived money fields (amounts, GST, totals, settlement) appear only on
responses; requests carry just what the calculator needs.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict
from enum import Enum

from .payment import PaymentResponse


class InvoiceTypeEnum(str, Enum):
     """Invoice type options."""
     CASH = "CASH"
     CREDIT = "CREDIT"
     DEBIT = "DEBIT"


class PaymentStatusEnum(str, Enum):
     """Invoice settlement status options."""
     PENDING = "PENDING"
     PARTIAL = "PARTIAL"
     PAID = "PAID"


class LineItemCreate(BaseModel):
     """One line of a new invoice."""
     item_id: Optional[int] = Field(None, gt=0, description="Catalog item (omit for custom lines)")
     description: str = Field(..., min_length=1, max_length=500)
     quantity: Decimal = Field(..., ge=0, max_digits=10, decimal_places=3)
     rate: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)
     gst_rate: int = Field(..., ge=0, le=100, description="GST percentage; must be a recognized rate")


class InvoiceCreate(BaseModel):
     """Schema for creating a new invoice."""
     recipient_id: int = Field(..., gt=0, description="User the invoice is issued to")
     issuer_id: Optional[int] = Field(None, gt=0, description="Issuing user (admins only; defaults to caller)")
     invoice_type: InvoiceTypeEnum = Field(..., description="CASH, CREDIT or DEBIT")
     invoice_date: Optional[date] = Field(None, description="Defaults to today")
     due_date: Optional[date] = Field(None, description="Defaults to invoice_date + 30 days")
     notes: Optional[str] = None
     terms: Optional[str] = None
     line_items: List[LineItemCreate] = Field(..., min_length=1)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "recipient_id": 2,
                    "invoice_type": "CREDIT",
                    "line_items": [
                         {"description": "Consulting", "quantity": 2, "rate": 100.00, "gst_rate": 18},
                         {"description": "Travel", "quantity": 1, "rate": 50.00, "gst_rate": 5},
                    ],
               }
          }
     )


class PartyResponse(BaseModel):
     id: int
     name: str
     email: str
     company_name: Optional[str] = None
     gstin: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class LineItemResponse(BaseModel):
     id: int
     item_id: Optional[int] = None
     description: str
     quantity: Decimal
     rate: Decimal
     amount: Decimal
     gst_rate: int
     gst_amount: Decimal
     total_amount: Decimal

     model_config = ConfigDict(from_attributes=True)


class InvoiceResponse(BaseModel):
     """Schema for invoice response."""
     id: int
     invoice_number: str
     issuer_id: int
     recipient_id: int
     invoice_type: InvoiceTypeEnum
     payment_status: PaymentStatusEnum
     invoice_date: date
     due_date: date
     sub_total: Decimal
     total_gst: Decimal
     total_amount: Decimal
     amount_paid: Decimal
     amount_due: Decimal
     is_overdue: bool
     notes: Optional[str] = None
     terms: Optional[str] = None
     created_at: datetime

     issuer: Optional[PartyResponse] = None
     recipient: Optional[PartyResponse] = None
     line_items: List[LineItemResponse] = []
     payments: List[PaymentResponse] = []

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": 1,
                    "invoice_number": "INV-2026-000001",
                    "issuer_id": 1,
                    "recipient_id": 2,
                    "invoice_type": "CREDIT",
                    "payment_status": "PENDING",
                    "invoice_date": "2026-10-19",
                    "due_date": "2026-11-18",
                    "sub_total": "250.00",
                    "total_gst": "38.50",
                    "total_amount": "288.50",
                    "amount_paid": "0.00",
                    "amount_due": "288.50",
                    "is_overdue": False,
                    "created_at": "2026-10-19T10:30:00",
               }
          }
     )


class InvoiceListResponse(BaseModel):
     """Schema for paginated invoice list response."""
     invoices: List[InvoiceResponse]
     total: int
     page: int = 1
     limit: int = 10

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "invoices": [],
                    "total": 0,
                    "page": 1,
                    "limit": 10
               }
          }
     )
