# routers/payments.py
"""
Payment API.

POST /api/invoices/{invoice_id}/payments records a (possibly partial)
payment; the invoice's amount_paid, amount_due and payment_status are
re-derived from all of its payments in the same transaction.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from auth import get_principal
from database import get_session
from repositories import InvoiceRepository
from schemas.payment import PaymentCreate, PaymentResponse
from services.access_policy import Principal
from services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invoices", tags=["payments"])


def get_payment_service(db: Session = Depends(get_session)) -> PaymentService:
     return PaymentService(InvoiceRepository(db))


@router.post(
     "/{invoice_id}/payments",
     response_model=PaymentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a payment"
)
def record_payment(
     invoice_id: int,
     body: PaymentCreate,
     db: Session = Depends(get_session),
     service: PaymentService = Depends(get_payment_service),
     principal: Principal = Depends(get_principal),
):
     """
     Record a payment against an invoice.

     - 400 if the amount is not positive or exceeds the amount due
     - 404 if the invoice does not exist or the caller is not a party to it
     """
     payment = service.record_payment(invoice_id, body, principal)
     db.commit()

     logger.info(
          "Payment %s of %s recorded on invoice %s by user %s",
          payment.id, payment.amount, invoice_id, principal.user_id
     )
     return PaymentResponse.model_validate(payment)


@router.get(
     "/{invoice_id}/payments",
     response_model=List[PaymentResponse],
     summary="List payments for an invoice"
)
def list_payments(
     invoice_id: int,
     service: PaymentService = Depends(get_payment_service),
     principal: Principal = Depends(get_principal),
):
     payments = service.list_payments(invoice_id, principal)
     return [PaymentResponse.model_validate(p) for p in payments]
