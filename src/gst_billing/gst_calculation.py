"""
GST Calculation
Tax on base amounts, reverse extraction from inclusive amounts, multi-line
breakdowns and discount handling.

Intra-state supply splits the rate equally into SGST and CGST; inter-state
supply charges the whole rate as IGST. Amounts are Decimal and every
monetary output is rounded to 2 places.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, Mapping, Union

from . import billing_config as cfg
from .billing_logger import get_logger
from .currency import to_decimal, to_money
from .models import (
    ZERO,
    DiscountCalculation,
    GSTValidationError,
    LineItemInput,
    Number,
    ProcessedLineItem,
    TaxBreakdown,
    TaxCalculationResult,
)

_HUNDRED = Decimal("100")


class GSTCalculation:
    """GST calculation utilities."""

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def validate_rate(gst_rate: Number, field: str = "gst_rate") -> Decimal:
        rate = to_decimal(gst_rate, field)
        if rate < cfg.MIN_GST_RATE or rate > cfg.MAX_GST_RATE:
            raise GSTValidationError(
                f"GST rate must be between {cfg.MIN_GST_RATE} and {cfg.MAX_GST_RATE}, got {rate}",
                field,
                gst_rate,
            )
        if rate not in cfg.STANDARD_GST_RATES:
            get_logger().warning(
                f"GST rate {rate}% is not a notified slab", component="GSTCalculation"
            )
        return rate

    @staticmethod
    def validate_amount(amount: Number, field: str = "base_amount") -> Decimal:
        value = to_decimal(amount, field)
        if value < 0:
            raise GSTValidationError(f"{field} cannot be negative, got {value}", field, amount)
        return value

    # ------------------------------------------------------------------
    # Single amount
    # ------------------------------------------------------------------

    def calculate_gst(
        self,
        base_amount: Number,
        gst_rate: Number,
        is_intra_state: bool = True,
    ) -> TaxCalculationResult:
        """Compute GST on a tax-exclusive amount."""
        rate = self.validate_rate(gst_rate)
        base = self.validate_amount(base_amount, "base_amount")

        result = TaxCalculationResult(
            base_amount=to_money(base, "base_amount"),
            gst_rate=rate,
            is_intra_state=is_intra_state,
        )
        if is_intra_state:
            half_rate = rate / 2
            half_amount = to_money(base * half_rate / _HUNDRED)
            result.sgst_rate = result.cgst_rate = half_rate
            result.sgst_amount = result.cgst_amount = half_amount
        else:
            result.igst_rate = rate
            result.igst_amount = to_money(base * rate / _HUNDRED)

        # Sum of rounded parts, so the totals always add up exactly
        result.total_tax_amount = result.sgst_amount + result.cgst_amount + result.igst_amount
        result.total_amount = result.base_amount + result.total_tax_amount
        return result

    def calculate_reverse_gst(
        self,
        inclusive_amount: Number,
        gst_rate: Number,
        is_intra_state: bool = True,
    ) -> TaxCalculationResult:
        """Extract GST from a tax-inclusive amount."""
        rate = self.validate_rate(gst_rate)
        inclusive = self.validate_amount(inclusive_amount, "inclusive_amount")

        base = inclusive / (1 + rate / _HUNDRED)
        return self.calculate_gst(base, rate, is_intra_state)

    # ------------------------------------------------------------------
    # Multiple lines
    # ------------------------------------------------------------------

    def calculate_gst_breakdown(
        self,
        items: Iterable[Union[LineItemInput, Mapping[str, Any]]],
        is_intra_state: bool = True,
    ) -> TaxBreakdown:
        """Apply GST to each line and total the results by tax type.

        The supply type applies to the whole list, not per line.
        """
        breakdown = TaxBreakdown()
        subtotal = total_sgst = total_cgst = total_igst = ZERO

        for raw in items:
            item = _as_line_item(raw)
            quantity = 1 if item.quantity is None else item.quantity
            item_amount = to_decimal(item.amount, "amount") * to_decimal(quantity, "quantity")
            calc = self.calculate_gst(item_amount, item.gst_rate, is_intra_state)

            subtotal += calc.base_amount
            total_sgst += calc.sgst_amount
            total_cgst += calc.cgst_amount
            total_igst += calc.igst_amount

            breakdown.items.append(
                ProcessedLineItem(
                    description=item.description,
                    amount=calc.base_amount,
                    gst_rate=calc.gst_rate,
                    sgst=calc.sgst_amount,
                    cgst=calc.cgst_amount,
                    igst=calc.igst_amount,
                )
            )

        breakdown.subtotal = to_money(subtotal)
        breakdown.total_sgst = to_money(total_sgst)
        breakdown.total_cgst = to_money(total_cgst)
        breakdown.total_igst = to_money(total_igst)
        breakdown.total_tax = to_money(total_sgst + total_cgst + total_igst)
        breakdown.grand_total = breakdown.subtotal + breakdown.total_tax
        return breakdown

    # ------------------------------------------------------------------
    # Discounts
    # ------------------------------------------------------------------

    def calculate_discount_with_gst(
        self,
        original_amount: Number,
        discount_percentage: Number,
        gst_rate: Number,
        is_discount_on_base_amount: bool = True,
        is_intra_state: bool = True,
    ) -> DiscountCalculation:
        """Compare GST before and after a percentage discount.

        The discount applies either to the base amount or to the
        tax-inclusive total, in which case the discounted base is back-solved.
        The original total is rounded up to the paisa, so a tiny discount on
        it can back-solve above the original base. discount_amount and
        total_savings then come out slightly negative and are reported as such.
        """
        rate = self.validate_rate(gst_rate)
        original = self.validate_amount(original_amount, "original_amount")
        pct = to_decimal(discount_percentage, "discount_percentage")
        if pct < 0 or pct > _HUNDRED:
            raise GSTValidationError(
                f"Discount percentage must be between 0 and 100, got {pct}",
                "discount_percentage",
                discount_percentage,
            )

        original_gst = self.calculate_gst(original, rate, is_intra_state)

        if is_discount_on_base_amount or pct == 0:
            # 0% off the rounded inclusive total must not back-solve to a different base
            discount_amount = original * pct / _HUNDRED
            discounted_base = original - discount_amount
        else:
            total_discount = original_gst.total_amount * pct / _HUNDRED
            discounted_base = (original_gst.total_amount - total_discount) / (1 + rate / _HUNDRED)
            discount_amount = original - discounted_base

        discounted_gst = self.calculate_gst(discounted_base, rate, is_intra_state)

        return DiscountCalculation(
            original_gst=original_gst,
            discount_amount=to_money(discount_amount),
            discounted_gst=discounted_gst,
            total_savings=to_money(original_gst.total_amount - discounted_gst.total_amount),
        )


def _as_line_item(item: Union[LineItemInput, Mapping[str, Any]]) -> LineItemInput:
    if isinstance(item, LineItemInput):
        return item
    if item.get("gst_rate") is None:
        raise GSTValidationError(
            f"gst_rate is required for line '{item.get('description', '')}'",
            "gst_rate",
            None,
        )
    return LineItemInput(
        description=item.get("description", ""),
        amount=item.get("amount", 0),
        gst_rate=item["gst_rate"],
        quantity=item.get("quantity"),
    )


_default = GSTCalculation()

calculate_gst = _default.calculate_gst
calculate_reverse_gst = _default.calculate_reverse_gst
calculate_gst_breakdown = _default.calculate_gst_breakdown
calculate_discount_with_gst = _default.calculate_discount_with_gst
