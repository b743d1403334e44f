# services/access_policy.py
"""
Access Policy - who may see, create and delete invoices.

- Admin: everything, including creating on behalf of another issuer.
- Everyone else: invoices they issued or received; creates only as themselves.
- Deletion: admins only.

The policy only answers questions; it never touches the session.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import or_

from models import Invoice


@dataclass(frozen=True)
class Principal:
     """Authenticated caller as supplied by the identity layer."""
     user_id: int
     is_admin: bool = False


def can_access_invoice(principal: Principal, invoice: Invoice) -> bool:
     if principal.is_admin:
          return True
     return principal.user_id in (invoice.issuer_id, invoice.recipient_id)


def can_create_for(principal: Principal, issuer_id: int) -> bool:
     return principal.is_admin or principal.user_id == issuer_id


def can_delete(principal: Principal) -> bool:
     return principal.is_admin


def visibility_filter(principal: Principal) -> Optional[object]:
     """
     SQL criterion restricting invoices to those the principal may read.

     Returns None for admins (no restriction).
     """
     if principal.is_admin:
          return None
     return or_(
          Invoice.issuer_id == principal.user_id,
          Invoice.recipient_id == principal.user_id,
     )
