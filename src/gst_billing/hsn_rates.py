"""
HSN Rate Lookup
Maps an HSN code to its GST rate using the 4-digit heading.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Optional, Tuple, Union

from . import billing_config as cfg
from .billing_logger import get_logger


class HSNRateTable:
    """GST rates keyed by 4-digit HSN heading."""

    def __init__(
        self,
        rates: Optional[Mapping[str, Decimal]] = None,
        default_rate: Decimal = cfg.DEFAULT_HSN_GST_RATE,
    ):
        self.rates = cfg.HSN_GST_RATES if rates is None else rates
        self.default_rate = Decimal(default_rate)

    @staticmethod
    def heading(hsn_code: Union[str, int, None]) -> str:
        """Return the 4-character heading of an HSN code.

        Integer codes are read as digits, so leading zeros (0713) are lost.
        """
        if hsn_code is None:
            return ""
        return str(hsn_code).strip()[:4]

    def lookup(self, hsn_code: Optional[str]) -> Tuple[Decimal, bool]:
        """Return (rate, matched). Unmatched codes get the default rate."""
        heading = self.heading(hsn_code)
        if heading in self.rates:
            return Decimal(self.rates[heading]), True
        return self.default_rate, False

    def rate_for(self, hsn_code: Optional[str]) -> Decimal:
        rate, matched = self.lookup(hsn_code)
        if not matched:
            get_logger().log_hsn_fallback(hsn_code, rate)
        return rate


_DEFAULT_TABLE = HSNRateTable()


def get_gst_rate_by_hsn(
    hsn_code: Optional[str],
    table: Optional[Mapping[str, Decimal]] = None,
) -> Decimal:
    """GST rate (percent) for an HSN code; unmapped codes default to 18%."""
    if table is None:
        return _DEFAULT_TABLE.rate_for(hsn_code)
    return HSNRateTable(table).rate_for(hsn_code)
