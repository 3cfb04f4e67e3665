"""
GST Billing - tax calculation core for the POS
Computes SGST/CGST/IGST for sale lines and invoices, validates GSTINs,
looks up HSN rates and applies Indian rupee rounding.

Pure computation: no I/O beyond logging.
"""

from .currency import format_indian_currency, round_to_indian_currency
from .gst_calculation import (
    GSTCalculation,
    calculate_discount_with_gst,
    calculate_gst,
    calculate_gst_breakdown,
    calculate_reverse_gst,
)
from .gstin_validator import resolve_intra_state, validate_gstin
from .hsn_rates import HSNRateTable, get_gst_rate_by_hsn
from .invoice_summary import (
    InvoiceSummaryBuilder,
    generate_gst_invoice_summary,
    settle_payment,
)
from .models import (
    GSTValidationError,
    InvoiceItemInput,
    InvoiceSummary,
    LineItemInput,
    TaxBreakdown,
    TaxCalculationResult,
)

__version__ = "0.1.0"
