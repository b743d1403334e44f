# schemas/payment.py
"""
Pydantic schemas for recording payments against an invoice.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class PaymentMethodEnum(str, Enum):
     CASH = "CASH"
     BANK_TRANSFER = "BANK_TRANSFER"
     CHEQUE = "CHEQUE"
     UPI = "UPI"
     CARD = "CARD"


class PaymentCreate(BaseModel):
     """Request body for POST /api/invoices/{invoice_id}/payments."""

     amount: Decimal = Field(..., max_digits=15, decimal_places=2, description="Amount received; must be positive")
     payment_method: PaymentMethodEnum = Field(..., description="How the payment was made")
     payment_date: Optional[datetime] = Field(None, description="Defaults to now")
     reference: Optional[str] = Field(None, max_length=255, description="Cheque number, UTR, card slip, ...")
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "amount": 100.00,
                    "payment_method": "UPI",
                    "reference": "UTR-4471290011",
               }
          }
     )


class PaymentResponse(BaseModel):
     id: int
     invoice_id: int
     amount: Decimal
     payment_method: PaymentMethodEnum
     payment_date: datetime
     reference: Optional[str] = None
     notes: Optional[str] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
