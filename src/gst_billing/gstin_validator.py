"""
GSTIN Validation
Format checks on GST identification numbers and place-of-supply helpers.
"""

from __future__ import annotations

import re
from typing import Optional

from . import billing_config as cfg

# 2 digits (state) + 5 letters + 4 digits + 1 letter (PAN) + entity code + Z + checksum
_GSTIN_RE = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")


def validate_gstin(gstin: Optional[str]) -> bool:
    """Return True when gstin is a well-formed 15-character GSTIN.

    Input is case-insensitive. Empty, None or non-string input is simply invalid.
    """
    if not gstin or not isinstance(gstin, str):
        return False
    return bool(_GSTIN_RE.match(gstin.strip().upper()))


def state_code_from_gstin(gstin: Optional[str]) -> Optional[str]:
    """Return the 2-digit state code of a valid GSTIN, else None.

    Codes that are not a known state or territory also give None.
    """
    if not validate_gstin(gstin):
        return None
    code = gstin.strip()[:2]
    if code not in cfg.STATE_CODE_TO_NAME:
        return None
    return code


def mask_gstin(gstin: Optional[str]) -> str:
    """Mask the middle portion of a GSTIN for logs.

    Example: 27AAPFU0939F1ZV -> 27AAPF****9F1ZV
    """
    if not gstin:
        return ""
    gstin = str(gstin)
    if len(gstin) < 10:
        return gstin
    return gstin[:6] + "****" + gstin[10:]


def is_intra_state(supplier_state_code: str, place_of_supply: str) -> bool:
    """Return True when supply is intra-state."""
    return (
        bool(supplier_state_code)
        and bool(place_of_supply)
        and supplier_state_code.strip() == place_of_supply.strip()
    )


def resolve_intra_state(
    customer_gstin: Optional[str],
    home_state_code: Optional[str] = None,
) -> bool:
    """Decide the supply type for a sale from the customer's GSTIN.

    Registered customers are intra-state only when their GSTIN state code
    matches the shop's home state. Walk-in (B2C) sales are intra-state, as
    are GSTINs whose state code is unknown.
    """
    home = home_state_code or cfg.HOME_STATE_CODE
    customer_state = state_code_from_gstin(customer_gstin)
    if customer_state is None:
        return True
    return is_intra_state(home, customer_state)
