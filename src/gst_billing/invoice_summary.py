"""
GST Invoice Summary
Builds the itemized tax summary for a sale and decides B2B and e-invoice
status. Also settles the collected amount for the chosen payment method.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union

from . import billing_config as cfg
from .billing_logger import get_logger
from .currency import round_to_indian_currency, to_decimal, to_money
from .gst_calculation import GSTCalculation
from .gstin_validator import mask_gstin, validate_gstin
from .hsn_rates import HSNRateTable
from .models import (
    ZERO,
    GSTValidationError,
    InvoiceItemInput,
    InvoiceLineResult,
    InvoiceSummary,
    LineItemInput,
    Number,
    PaymentSettlement,
)


class InvoiceSummaryBuilder:
    """Compose per-line GST, aggregate totals and compliance flags."""

    def __init__(
        self,
        gst: Optional[GSTCalculation] = None,
        rate_table: Optional[HSNRateTable] = None,
    ) -> None:
        self.gst = gst or GSTCalculation()
        self.rate_table = rate_table or HSNRateTable()
        self.logger = get_logger()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(
        self,
        items: Iterable[Union[InvoiceItemInput, Mapping[str, Any]]],
        customer_gstin: Optional[str] = None,
        is_intra_state: bool = True,
    ) -> InvoiceSummary:
        """Generate the invoice summary.

        Each line's discount is a flat amount taken off quantity * unit price
        before tax. Lines without a GST rate use the HSN rate table.
        """
        lines = [self._process_line(_as_invoice_item(i), is_intra_state) for i in items]

        summary = self.gst.calculate_gst_breakdown(
            [
                LineItemInput(
                    description=line.description,
                    amount=line.net_amount,
                    gst_rate=line.gst_rate,
                )
                for line in lines
            ],
            is_intra_state,
        )

        is_b2b = bool(customer_gstin) and validate_gstin(customer_gstin)
        requires_e_invoice = is_b2b and summary.grand_total >= cfg.E_INVOICE_THRESHOLD

        self.logger.log_invoice_summary(
            len(lines),
            summary.grand_total,
            mask_gstin(customer_gstin.strip().upper()) if is_b2b else "",
            requires_e_invoice,
        )

        return InvoiceSummary(
            items=lines,
            summary=summary,
            is_b2b=is_b2b,
            requires_e_invoice=requires_e_invoice,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _process_line(self, item: InvoiceItemInput, is_intra_state: bool) -> InvoiceLineResult:
        quantity = to_decimal(item.quantity, "quantity")
        unit_price = to_decimal(item.unit_price, "unit_price")
        if quantity < 0:
            raise GSTValidationError(f"quantity cannot be negative, got {quantity}", "quantity", item.quantity)
        if unit_price < 0:
            raise GSTValidationError(f"unit_price cannot be negative, got {unit_price}", "unit_price", item.unit_price)

        if item.gst_rate is None:
            rate = self.rate_table.rate_for(item.hsn_code)
        else:
            rate = self.gst.validate_rate(item.gst_rate)

        base_amount = quantity * unit_price
        discount = ZERO if item.discount is None else to_decimal(item.discount, "discount")
        if discount < 0:
            raise GSTValidationError(f"discount cannot be negative, got {discount}", "discount", item.discount)
        net_amount = base_amount - discount
        if net_amount < 0:
            raise GSTValidationError(
                f"discount {discount} exceeds line amount {to_money(base_amount)} for '{item.description}'",
                "discount",
                item.discount,
            )

        calc = self.gst.calculate_gst(net_amount, rate, is_intra_state)

        return InvoiceLineResult(
            description=item.description,
            hsn_code=item.hsn_code,
            quantity=quantity,
            unit_price=to_money(unit_price),
            gst_rate=rate,
            base_amount=to_money(base_amount),
            discount_amount=to_money(discount),
            net_amount=calc.base_amount,
            sgst_amount=calc.sgst_amount,
            cgst_amount=calc.cgst_amount,
            igst_amount=calc.igst_amount,
            total_amount=calc.total_amount,
        )


def _as_invoice_item(item: Union[InvoiceItemInput, Mapping[str, Any]]) -> InvoiceItemInput:
    if isinstance(item, InvoiceItemInput):
        return item
    return InvoiceItemInput(
        description=item.get("description", ""),
        hsn_code=item.get("hsn_code", ""),
        quantity=item.get("quantity", 1),
        unit_price=item.get("unit_price", 0),
        gst_rate=item.get("gst_rate"),
        discount=item.get("discount"),
    )


def generate_gst_invoice_summary(
    items: Iterable[Union[InvoiceItemInput, Mapping[str, Any]]],
    customer_gstin: Optional[str] = None,
    is_intra_state: bool = True,
) -> InvoiceSummary:
    """Itemized GST summary with B2B and e-invoice flags."""
    return InvoiceSummaryBuilder().build(items, customer_gstin, is_intra_state)


def settle_payment(amount_due: Number, payment_method: str) -> PaymentSettlement:
    """Round the amount due for collection.

    Cash is rounded to the nearest 5 paise; card, UPI and mixed payments to
    the paisa. round_off is what gets added to the invoice total.
    """
    method = (payment_method or "").strip().lower()
    if method not in cfg.VALID_PAYMENT_METHODS:
        raise GSTValidationError(
            f"Unknown payment method '{payment_method}'; expected one of "
            f"{', '.join(sorted(cfg.VALID_PAYMENT_METHODS))}",
            "payment_method",
            payment_method,
        )
    due = to_decimal(amount_due, "amount_due")
    if due < 0:
        raise GSTValidationError(f"amount_due cannot be negative, got {due}", "amount_due", amount_due)

    due = to_money(due)
    payable = round_to_indian_currency(due, method == cfg.PAYMENT_METHOD_CASH)
    return PaymentSettlement(
        payment_method=method,
        amount_due=due,
        payable=payable,
        round_off=payable - due,
    )
