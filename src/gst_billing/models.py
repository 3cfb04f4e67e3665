"""
GST Billing Data Models
Dataclasses passed between the calculation, lookup and invoice components.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float, str, Decimal]

ZERO = Decimal("0")


def _money(value: Decimal) -> str:
    return f"{value:.2f}"


def _rate(value: Decimal) -> str:
    return format(value.normalize(), "f") if value else "0"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class GSTValidationError(ValueError):
    """Raised when an amount, rate or option fails validation."""

    def __init__(self, message: str, field: str = "", value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


# ---------------------------------------------------------------------------
# Tax calculation models
# ---------------------------------------------------------------------------

@dataclass
class TaxCalculationResult:
    """GST on a single base amount."""
    base_amount: Decimal = ZERO
    gst_rate: Decimal = ZERO
    sgst_rate: Decimal = ZERO
    cgst_rate: Decimal = ZERO
    igst_rate: Decimal = ZERO
    sgst_amount: Decimal = ZERO
    cgst_amount: Decimal = ZERO
    igst_amount: Decimal = ZERO
    total_tax_amount: Decimal = ZERO
    total_amount: Decimal = ZERO
    is_intra_state: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_amount": _money(self.base_amount),
            "gst_rate": _rate(self.gst_rate),
            "sgst_rate": _rate(self.sgst_rate),
            "cgst_rate": _rate(self.cgst_rate),
            "igst_rate": _rate(self.igst_rate),
            "sgst_amount": _money(self.sgst_amount),
            "cgst_amount": _money(self.cgst_amount),
            "igst_amount": _money(self.igst_amount),
            "total_tax_amount": _money(self.total_tax_amount),
            "total_amount": _money(self.total_amount),
            "is_intra_state": self.is_intra_state,
        }


@dataclass
class LineItemInput:
    """A priced line handed to the breakdown aggregator."""
    description: str = ""
    amount: Number = 0
    gst_rate: Number = 0
    quantity: Optional[Number] = None  # None means 1


@dataclass
class ProcessedLineItem:
    """A line after tax: either sgst/cgst or igst is populated."""
    description: str = ""
    amount: Decimal = ZERO
    gst_rate: Decimal = ZERO
    sgst: Decimal = ZERO
    cgst: Decimal = ZERO
    igst: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "amount": _money(self.amount),
            "gst_rate": _rate(self.gst_rate),
            "sgst": _money(self.sgst),
            "cgst": _money(self.cgst),
            "igst": _money(self.igst),
        }


@dataclass
class TaxBreakdown:
    """Aggregate tax over a list of lines."""
    subtotal: Decimal = ZERO
    total_sgst: Decimal = ZERO
    total_cgst: Decimal = ZERO
    total_igst: Decimal = ZERO
    total_tax: Decimal = ZERO
    grand_total: Decimal = ZERO
    items: List[ProcessedLineItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subtotal": _money(self.subtotal),
            "total_sgst": _money(self.total_sgst),
            "total_cgst": _money(self.total_cgst),
            "total_igst": _money(self.total_igst),
            "total_tax": _money(self.total_tax),
            "grand_total": _money(self.grand_total),
            "items": [item.to_dict() for item in self.items],
        }


@dataclass
class DiscountCalculation:
    """Tax before and after a discount."""
    original_gst: TaxCalculationResult = field(default_factory=TaxCalculationResult)
    discount_amount: Decimal = ZERO
    discounted_gst: TaxCalculationResult = field(default_factory=TaxCalculationResult)
    total_savings: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_gst": self.original_gst.to_dict(),
            "discount_amount": _money(self.discount_amount),
            "discounted_gst": self.discounted_gst.to_dict(),
            "total_savings": _money(self.total_savings),
        }


# ---------------------------------------------------------------------------
# Invoice models
# ---------------------------------------------------------------------------

@dataclass
class InvoiceItemInput:
    """A sale line as entered at checkout."""
    description: str = ""
    hsn_code: str = ""
    quantity: Number = 1
    unit_price: Number = 0
    gst_rate: Optional[Number] = None  # None -> looked up from hsn_code
    discount: Optional[Number] = None  # flat amount off the line


@dataclass
class InvoiceLineResult:
    """An invoice line with its discount and tax applied."""
    description: str = ""
    hsn_code: str = ""
    quantity: Decimal = ZERO
    unit_price: Decimal = ZERO
    gst_rate: Decimal = ZERO
    base_amount: Decimal = ZERO
    discount_amount: Decimal = ZERO
    net_amount: Decimal = ZERO
    sgst_amount: Decimal = ZERO
    cgst_amount: Decimal = ZERO
    igst_amount: Decimal = ZERO
    total_amount: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "hsn_code": self.hsn_code,
            "quantity": format(self.quantity.normalize(), "f"),
            "unit_price": _money(self.unit_price),
            "gst_rate": _rate(self.gst_rate),
            "base_amount": _money(self.base_amount),
            "discount_amount": _money(self.discount_amount),
            "net_amount": _money(self.net_amount),
            "sgst_amount": _money(self.sgst_amount),
            "cgst_amount": _money(self.cgst_amount),
            "igst_amount": _money(self.igst_amount),
            "total_amount": _money(self.total_amount),
        }


@dataclass
class InvoiceSummary:
    """Itemized invoice with totals and compliance flags."""
    items: List[InvoiceLineResult] = field(default_factory=list)
    summary: TaxBreakdown = field(default_factory=TaxBreakdown)
    is_b2b: bool = False
    requires_e_invoice: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "summary": self.summary.to_dict(),
            "is_b2b": self.is_b2b,
            "requires_e_invoice": self.requires_e_invoice,
        }


@dataclass
class PaymentSettlement:
    """Amount collected for a sale after payment-method rounding."""
    payment_method: str = ""
    amount_due: Decimal = ZERO
    payable: Decimal = ZERO
    round_off: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "payment_method": self.payment_method,
            "amount_due": _money(self.amount_due),
            "payable": _money(self.payable),
            "round_off": _money(self.round_off),
        }
