# services/gst_calculator.py
"""
Money/GST Calculator - derives line and invoice totals from line drafts.

Per line:
     amount      = quantity * rate
     gst_amount  = amount * gst_rate / 100
     line total  = amount + gst_amount

Each line value is rounded to paise (2 places, half-up) before it is added
to the invoice totals, so the totals always equal the sum of the amounts
printed on the lines. Quantities keep 3 places.

Pure: no database access, no clock, no logging.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, List, Optional

from .errors import ValidationError

MONEY_PLACES = Decimal("0.01")
QUANTITY_PLACES = Decimal("0.001")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class LineItemDraft:
     description: str
     quantity: Decimal
     rate: Decimal
     gst_rate: int
     item_id: Optional[int] = None


@dataclass(frozen=True)
class CalculatedLine:
     description: str
     quantity: Decimal
     rate: Decimal
     gst_rate: int
     amount: Decimal
     gst_amount: Decimal
     total_amount: Decimal
     item_id: Optional[int] = None


@dataclass(frozen=True)
class InvoiceTotals:
     lines: List[CalculatedLine]
     sub_total: Decimal
     total_gst: Decimal
     total_amount: Decimal


def quantize_money(value: Decimal) -> Decimal:
     return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def _to_decimal(value: Any, field: str, position: int) -> Decimal:
     try:
          result = value if isinstance(value, Decimal) else Decimal(str(value))
     except (InvalidOperation, TypeError, ValueError):
          raise ValidationError(f"Line {position}: {field} must be a number")
     if not result.is_finite():
          raise ValidationError(f"Line {position}: {field} must be a finite number")
     return result


def calculate_line(draft: Any, recognized_rates: Iterable[int], position: int = 1) -> CalculatedLine:
     """Validate one line draft and compute its derived amounts."""
     description = (getattr(draft, "description", None) or "").strip()
     if not description:
          raise ValidationError(f"Line {position}: description is required")

     quantity = _to_decimal(draft.quantity, "quantity", position)
     rate = _to_decimal(draft.rate, "rate", position)
     if quantity < 0:
          raise ValidationError(f"Line {position}: quantity cannot be negative")
     if rate < 0:
          raise ValidationError(f"Line {position}: rate cannot be negative")

     gst_rate = draft.gst_rate
     if isinstance(gst_rate, bool) or not isinstance(gst_rate, int) or gst_rate not in set(recognized_rates):
          allowed = ", ".join(str(r) for r in sorted(recognized_rates))
          raise ValidationError(f"Line {position}: gst_rate {gst_rate!r} is not one of {allowed}")

     quantity = quantity.quantize(QUANTITY_PLACES, rounding=ROUND_HALF_UP)
     rate = quantize_money(rate)
     amount = quantize_money(quantity * rate)
     gst_amount = quantize_money(amount * gst_rate / HUNDRED)

     return CalculatedLine(
          description=description,
          quantity=quantity,
          rate=rate,
          gst_rate=gst_rate,
          amount=amount,
          gst_amount=gst_amount,
          total_amount=amount + gst_amount,
          item_id=getattr(draft, "item_id", None),
     )


def calculate_invoice(drafts: Iterable[Any], recognized_rates: Iterable[int]) -> InvoiceTotals:
     """
     Compute every line and the invoice-level totals.

     Args:
          drafts: ordered line drafts (anything with description, quantity,
               rate, gst_rate and optionally item_id)
          recognized_rates: permitted GST percentages

     Returns:
          InvoiceTotals with lines in the order supplied

     Raises:
          ValidationError: empty line list or any invalid line
     """
     rates = frozenset(recognized_rates)
     lines = [calculate_line(draft, rates, position) for position, draft in enumerate(drafts, start=1)]
     if not lines:
          raise ValidationError("Invoice must have at least one line item")

     sub_total = Decimal("0.00")
     total_gst = Decimal("0.00")
     for line in lines:
          sub_total += line.amount
          total_gst += line.gst_amount

     return InvoiceTotals(
          lines=lines,
          sub_total=sub_total,
          total_gst=total_gst,
          total_amount=sub_total + total_gst,
     )
