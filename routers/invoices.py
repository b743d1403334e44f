# routers/invoices.py
"""
Invoice API routes.

Access rules (enforced by the service layer):
- Admin: every invoice; may create on behalf of any issuer and delete
- Everyone else: invoices they issued or received
"""
import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

import config
from auth import get_principal
from database import get_session
from repositories import InvoiceRepository
from schemas.invoice import InvoiceCreate, InvoiceResponse, InvoiceListResponse
from services.access_policy import Principal
from services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def get_invoice_service(db: Session = Depends(get_session)) -> InvoiceService:
     return InvoiceService(InvoiceRepository(db))


@router.post(
     "",
     response_model=InvoiceResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new invoice"
)
def create_invoice(
     invoice_data: InvoiceCreate,
     db: Session = Depends(get_session),
     service: InvoiceService = Depends(get_invoice_service),
     principal: Principal = Depends(get_principal)
):
     """
     Create a new invoice.

     - **recipient_id**: user being billed (may be the caller for cash sales)
     - **invoice_type**: CASH, CREDIT or DEBIT
     - **line_items**: at least one; amounts and GST are computed server-side
     - **invoice_date / due_date**: default to today and today + 30 days
     """
     invoice = service.create_invoice(invoice_data, principal)
     db.commit()

     logger.info(
          "Invoice %s created by user %s (total=%s)",
          invoice.invoice_number, principal.user_id, invoice.total_amount
     )
     return InvoiceResponse.model_validate(invoice)


@router.get(
     "",
     response_model=InvoiceListResponse,
     summary="List invoices visible to the caller"
)
def list_invoices(
     page: int = Query(1, ge=1, description="Page number"),
     limit: int = Query(config.DEFAULT_PAGE_LIMIT, ge=1, le=config.MAX_PAGE_LIMIT, description="Items per page"),
     service: InvoiceService = Depends(get_invoice_service),
     principal: Principal = Depends(get_principal)
):
     """
     Retrieve a paginated list of invoices, newest first.

     Non-admins only see invoices they issued or received.
     """
     invoices, total = service.list_invoices(principal, page=page, limit=limit)

     return InvoiceListResponse(
          invoices=[InvoiceResponse.model_validate(inv) for inv in invoices],
          total=total,
          page=page,
          limit=limit
     )


@router.get(
     "/{invoice_id}",
     response_model=InvoiceResponse,
     summary="Get invoice by ID"
)
def get_invoice(
     invoice_id: int,
     service: InvoiceService = Depends(get_invoice_service),
     principal: Principal = Depends(get_principal)
):
     """
     Retrieve one invoice with its line items and payments.

     Returns 404 both when the invoice does not exist and when the caller
     is not a party to it.
     """
     invoice = service.get_invoice(invoice_id, principal)
     return InvoiceResponse.model_validate(invoice)


@router.delete(
     "/{invoice_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete invoice"
)
def delete_invoice(
     invoice_id: int,
     db: Session = Depends(get_session),
     service: InvoiceService = Depends(get_invoice_service),
     principal: Principal = Depends(get_principal)
):
     """
     Delete an invoice and its line items.

     Admins only. Invoices with recorded payments cannot be deleted.
     """
     service.delete_invoice(invoice_id, principal)
     db.commit()

     logger.info("Invoice %s deleted by user %s", invoice_id, principal.user_id)
     return Response(status_code=status.HTTP_204_NO_CONTENT)
