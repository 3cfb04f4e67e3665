"""
GST Billing Configuration
Constants and environment-backed settings for the GST billing core.

Regulatory values (rate bounds, e-invoice threshold, rounding steps, HSN rates)
are fixed here and never read from the environment. Only logging and the
home state for place-of-supply resolution can be overridden.
"""

import os
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Project root (two levels up from this file: src/gst_billing/billing_config.py)
# ---------------------------------------------------------------------------
GST_BILLING_ROOT = Path(__file__).parent
PROJECT_ROOT = GST_BILLING_ROOT.parent.parent

# Load environment variables from .env file (if exists - local dev only)
env_file = PROJECT_ROOT / ".env"
if env_file.exists():
    load_dotenv(env_file)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL: str = os.getenv("GST_BILLING_LOG_LEVEL", "INFO").upper()
LOG_DIR: str = os.getenv("GST_BILLING_LOG_DIR", "")
LOG_MAX_MB: int = int(os.getenv("GST_BILLING_LOG_MAX_MB", "10"))
LOG_BACKUP_COUNT: int = int(os.getenv("GST_BILLING_LOG_BACKUP_COUNT", "5"))

# ---------------------------------------------------------------------------
# Place of supply (27 = Maharashtra)
# ---------------------------------------------------------------------------
HOME_STATE_CODE: str = os.getenv("GST_BILLING_HOME_STATE_CODE", "27").strip()

# ---------------------------------------------------------------------------
# GST rate bounds (percent)
# ---------------------------------------------------------------------------
MIN_GST_RATE = Decimal("0")
MAX_GST_RATE = Decimal("100")

# Notified GST slabs; other rates are accepted with a warning
STANDARD_GST_RATES = frozenset(
    Decimal(r) for r in ("0", "0.25", "3", "5", "12", "18", "28")
)

# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------
MONEY_QUANT = Decimal("0.01")
CASH_ROUNDING_STEP = Decimal("0.05")
DIGITAL_ROUNDING_STEP = Decimal("0.01")
CURRENCY_SYMBOL = "₹"

# E-invoicing is mandatory for B2B invoices at or above this value (rupees)
E_INVOICE_THRESHOLD = Decimal("50000")

# ---------------------------------------------------------------------------
# Payment methods (as stored on a sale)
# ---------------------------------------------------------------------------
PAYMENT_METHOD_CASH = "cash"
VALID_PAYMENT_METHODS = frozenset({"cash", "card", "upi", "mixed"})

# ---------------------------------------------------------------------------
# HSN prefix -> GST rate (percent)
# ---------------------------------------------------------------------------
DEFAULT_HSN_GST_RATE = Decimal("18")

HSN_GST_RATES = MappingProxyType({
    # Medicines and medical equipment
    "3004": Decimal("12"),  # Medicaments
    "9018": Decimal("12"),  # Medical instruments
    # Food items
    "1006": Decimal("5"),   # Rice
    "1001": Decimal("0"),   # Wheat
    "1701": Decimal("0"),   # Sugar
    # Agricultural products
    "1201": Decimal("0"),   # Soya beans
    "1202": Decimal("0"),   # Ground nuts
    "0713": Decimal("0"),   # Dried leguminous vegetables
    # Restaurant items
    "2101": Decimal("18"),  # Coffee preparations
    "2102": Decimal("18"),  # Yeasts
    "2103": Decimal("18"),  # Sauce preparations
    # Common retail items
    "8517": Decimal("18"),  # Mobile phones
    "6204": Decimal("12"),  # Women's clothing
    "6203": Decimal("12"),  # Men's clothing
})

# ---------------------------------------------------------------------------
# Valid reference data
# ---------------------------------------------------------------------------
STATE_CODE_TO_NAME = MappingProxyType({
    "01": "Jammu and Kashmir",
    "02": "Himachal Pradesh",
    "03": "Punjab",
    "04": "Chandigarh",
    "05": "Uttarakhand",
    "06": "Haryana",
    "07": "Delhi",
    "08": "Rajasthan",
    "09": "Uttar Pradesh",
    "10": "Bihar",
    "11": "Sikkim",
    "12": "Arunachal Pradesh",
    "13": "Nagaland",
    "14": "Manipur",
    "15": "Mizoram",
    "16": "Tripura",
    "17": "Meghalaya",
    "18": "Assam",
    "19": "West Bengal",
    "20": "Jharkhand",
    "21": "Odisha",
    "22": "Chhattisgarh",
    "23": "Madhya Pradesh",
    "24": "Gujarat",
    "26": "Dadra and Nagar Haveli and Daman and Diu",
    "27": "Maharashtra",
    "29": "Karnataka",
    "30": "Goa",
    "31": "Lakshadweep",
    "32": "Kerala",
    "33": "Tamil Nadu",
    "34": "Puducherry",
    "35": "Andaman and Nicobar Islands",
    "36": "Telangana",
    "37": "Andhra Pradesh",
    "38": "Ladakh",
    "97": "Other Territory",
})
