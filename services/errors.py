# services/errors.py
"""
Error taxonomy for the invoicing core.

Services raise these; the HTTP layer (main.py) maps each kind to a status
code. Nothing in the services catches them.
"""


class InvoiceServiceError(Exception):
     """Base class for all invoicing errors."""
     kind = "error"

     def __init__(self, message: str):
          super().__init__(message)
          self.message = message


class ValidationError(InvoiceServiceError):
     """Malformed or out-of-range input. Retrying will not help."""
     kind = "validation_error"


class NotFoundError(InvoiceServiceError):
     """Entity is missing or not visible to the caller."""
     kind = "not_found"


class ConflictError(InvoiceServiceError):
     """A state precondition does not hold. Re-read state and retry."""
     kind = "conflict"


class OverpaymentError(InvoiceServiceError):
     """Payment would take the amount paid past the invoice total."""
     kind = "overpayment"

     def __init__(self, message: str, amount_due=None):
          super().__init__(message)
          self.amount_due = amount_due


class AuthorizationError(InvoiceServiceError):
     """Principal lacks the rights for this operation."""
     kind = "forbidden"
