import random
from decimal import Decimal

import pytest

from services.errors import ValidationError
from services.gst_calculator import LineItemDraft, calculate_invoice, calculate_line

RATES = frozenset({0, 5, 12, 18, 28})


def line(quantity, rate, gst_rate, description="Item", item_id=None):
     return LineItemDraft(
          description=description,
          quantity=Decimal(str(quantity)),
          rate=Decimal(str(rate)),
          gst_rate=gst_rate,
          item_id=item_id,
     )


def test_two_line_invoice_totals():
     totals = calculate_invoice([line(2, 100, 18), line(1, 50, 5)], RATES)

     assert totals.sub_total == Decimal("250.00")
     assert totals.total_gst == Decimal("38.50")
     assert totals.total_amount == Decimal("288.50")

     first, second = totals.lines
     assert (first.amount, first.gst_amount, first.total_amount) == (
          Decimal("200.00"), Decimal("36.00"), Decimal("236.00")
     )
     assert (second.amount, second.gst_amount, second.total_amount) == (
          Decimal("50.00"), Decimal("2.50"), Decimal("52.50")
     )


def test_lines_keep_supplied_order_and_catalog_reference():
     totals = calculate_invoice(
          [line(1, 10, 0, "First", item_id=7), line(1, 20, 0, "Second")],
          RATES,
     )
     assert [l.description for l in totals.lines] == ["First", "Second"]
     assert totals.lines[0].item_id == 7
     assert totals.lines[1].item_id is None


def test_each_line_is_rounded_before_summing():
     # 0.10 at 5% is 0.005 GST per line; rounded per line that is 0.01 each
     totals = calculate_invoice([line(1, "0.10", 5)] * 3, RATES)

     assert [l.gst_amount for l in totals.lines] == [Decimal("0.01")] * 3
     assert totals.total_gst == Decimal("0.03")
     assert totals.total_amount == Decimal("0.33")


def test_quantity_keeps_three_places():
     result = calculate_line(line("1.2345", 10, 0), RATES)
     assert result.quantity == Decimal("1.235")
     assert result.amount == Decimal("12.35")


def test_zero_quantity_and_zero_rate_are_allowed():
     totals = calculate_invoice([line(0, 100, 18), line(3, 0, 12)], RATES)
     assert totals.total_amount == Decimal("0.00")


def test_totals_invariant_holds_for_generated_lines():
     rng = random.Random(20261019)
     for _ in range(50):
          drafts = [
               line(
                    Decimal(rng.randint(0, 50000)) / 1000,
                    Decimal(rng.randint(0, 1000000)) / 100,
                    rng.choice(sorted(RATES)),
               )
               for _ in range(rng.randint(1, 8))
          ]
          totals = calculate_invoice(drafts, RATES)

          assert totals.total_amount == totals.sub_total + totals.total_gst
          assert totals.sub_total == sum(l.amount for l in totals.lines)
          assert totals.total_gst == sum(l.gst_amount for l in totals.lines)
          for l in totals.lines:
               assert l.total_amount == l.amount + l.gst_amount


def test_empty_invoice_is_rejected():
     with pytest.raises(ValidationError, match="at least one line item"):
          calculate_invoice([], RATES)


@pytest.mark.parametrize(
     "draft, message",
     [
          (line(-1, 100, 18), "quantity cannot be negative"),
          (line(1, -100, 18), "rate cannot be negative"),
          (line(1, 100, 7), "gst_rate"),
          (line(1, 100, 18, description="   "), "description is required"),
     ],
)
def test_invalid_lines_are_rejected(draft, message):
     with pytest.raises(ValidationError, match=message):
          calculate_invoice([line(1, 10, 0), draft], RATES)


def test_error_names_the_offending_line():
     with pytest.raises(ValidationError, match="Line 2"):
          calculate_invoice([line(1, 10, 0), line(1, 10, 3)], RATES)


def test_recognized_rates_are_configurable():
     totals = calculate_invoice([line(1, 100, 7)], {0, 7})
     assert totals.total_gst == Decimal("7.00")

     with pytest.raises(ValidationError):
          calculate_invoice([line(1, 100, 18)], {0, 7})
