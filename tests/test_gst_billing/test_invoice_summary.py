"""
Tests for invoice summary generation, payment settlement and logging.
"""

import logging
import os
import sys
import tempfile
import unittest
from decimal import Decimal
from pathlib import Path

# Ensure src/ is on sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from gst_billing.billing_logger import BillingLogger, get_logger
from gst_billing.hsn_rates import HSNRateTable
from gst_billing.invoice_summary import (
    InvoiceSummaryBuilder,
    generate_gst_invoice_summary,
    settle_payment,
)
from gst_billing.models import GSTValidationError, InvoiceItemInput

VALID_GSTIN = "27AAPFU0939F1ZV"


def _laptop(unit_price=50000, gst_rate=18):
    return {
        "description": "Laptop",
        "hsn_code": "8471",
        "quantity": 1,
        "unit_price": unit_price,
        "gst_rate": gst_rate,
    }


# ======================================================================
# Test: Invoice summary
# ======================================================================


class TestGenerateInvoiceSummary(unittest.TestCase):
    """Invoice lines, totals and compliance flags."""

    def setUp(self):
        # Install handlers before assertLogs captures the logger
        get_logger()

    def test_b2b_above_threshold_requires_e_invoice(self):
        inv = generate_gst_invoice_summary([_laptop()], VALID_GSTIN)
        self.assertTrue(inv.is_b2b)
        self.assertTrue(inv.requires_e_invoice)
        self.assertEqual(inv.summary.grand_total, Decimal("59000.00"))

    def test_b2c_never_requires_e_invoice(self):
        inv = generate_gst_invoice_summary([_laptop(unit_price=500000)])
        self.assertFalse(inv.is_b2b)
        self.assertFalse(inv.requires_e_invoice)

    def test_invalid_gstin_is_b2c(self):
        inv = generate_gst_invoice_summary([_laptop()], "BADGSTIN")
        self.assertFalse(inv.is_b2b)
        self.assertFalse(inv.requires_e_invoice)

    def test_b2b_below_threshold(self):
        inv = generate_gst_invoice_summary([_laptop(unit_price=40000)], VALID_GSTIN)
        self.assertTrue(inv.is_b2b)
        self.assertEqual(inv.summary.grand_total, Decimal("47200.00"))
        self.assertFalse(inv.requires_e_invoice)

    def test_threshold_is_inclusive(self):
        inv = generate_gst_invoice_summary([_laptop(gst_rate=0)], VALID_GSTIN)
        self.assertEqual(inv.summary.grand_total, Decimal("50000.00"))
        self.assertTrue(inv.requires_e_invoice)

    def test_line_discount(self):
        item = InvoiceItemInput(
            description="Paracetamol strip",
            hsn_code="3004",
            quantity=3,
            unit_price=120,
            gst_rate=12,
            discount=60,
        )
        inv = generate_gst_invoice_summary([item])
        line = inv.items[0]
        self.assertEqual(line.base_amount, Decimal("360.00"))
        self.assertEqual(line.discount_amount, Decimal("60.00"))
        self.assertEqual(line.net_amount, Decimal("300.00"))
        self.assertEqual(line.sgst_amount, Decimal("18.00"))
        self.assertEqual(line.cgst_amount, Decimal("18.00"))
        self.assertEqual(line.total_amount, Decimal("336.00"))
        self.assertEqual(inv.summary.subtotal, Decimal("300.00"))

    def test_rate_from_hsn_when_missing(self):
        inv = generate_gst_invoice_summary(
            [{"description": "Basmati rice", "hsn_code": "10063020", "quantity": 10, "unit_price": 50}]
        )
        line = inv.items[0]
        self.assertEqual(line.gst_rate, Decimal("5"))
        self.assertEqual(line.total_amount, Decimal("525.00"))

    def test_injected_rate_table(self):
        builder = InvoiceSummaryBuilder(rate_table=HSNRateTable({"1006": Decimal("0")}))
        inv = builder.build([{"description": "Rice", "hsn_code": "1006", "quantity": 1, "unit_price": 80}])
        self.assertEqual(inv.summary.total_tax, Decimal("0.00"))

    def test_inter_state_invoice(self):
        inv = generate_gst_invoice_summary([_laptop()], "29AABCU9603R1ZP", is_intra_state=False)
        line = inv.items[0]
        self.assertEqual(line.igst_amount, Decimal("9000.00"))
        self.assertEqual(line.sgst_amount, Decimal("0"))
        self.assertEqual(inv.summary.total_igst, Decimal("9000.00"))
        self.assertEqual(inv.summary.total_sgst, Decimal("0.00"))

    def test_net_amounts_sum_to_subtotal(self):
        items = [
            {"description": "Chai", "hsn_code": "0902", "quantity": 3, "unit_price": "12.50", "gst_rate": 5},
            {"description": "Sauce", "hsn_code": "2103", "quantity": 2, "unit_price": "89.99", "gst_rate": 18, "discount": "9.99"},
            {"description": "Coffee", "hsn_code": "2101", "quantity": 1, "unit_price": "149", "gst_rate": 18},
        ]
        inv = generate_gst_invoice_summary(items)
        self.assertEqual(sum(i.net_amount for i in inv.items), inv.summary.subtotal)
        self.assertEqual(inv.summary.subtotal + inv.summary.total_tax, inv.summary.grand_total)

    def test_discount_larger_than_line_raises(self):
        item = InvoiceItemInput("Pen", "9608", quantity=1, unit_price=10, gst_rate=18, discount=20)
        with self.assertRaises(GSTValidationError) as ctx:
            generate_gst_invoice_summary([item])
        self.assertEqual(ctx.exception.field, "discount")

    def test_negative_discount_raises(self):
        item = InvoiceItemInput("Pen", "9608", quantity=1, unit_price=10, gst_rate=18, discount=-1)
        with self.assertRaises(GSTValidationError):
            generate_gst_invoice_summary([item])

    def test_invalid_rate_raises(self):
        with self.assertRaises(GSTValidationError):
            generate_gst_invoice_summary([_laptop(gst_rate=101)])

    def test_to_dict(self):
        d = generate_gst_invoice_summary([_laptop()], VALID_GSTIN).to_dict()
        self.assertTrue(d["is_b2b"])
        self.assertTrue(d["requires_e_invoice"])
        self.assertEqual(d["summary"]["grand_total"], "59000.00")
        self.assertEqual(d["items"][0]["hsn_code"], "8471")
        self.assertEqual(d["items"][0]["quantity"], "1")

    def test_logs_masked_gstin(self):
        with self.assertLogs("GST-Billing", level="INFO") as logs:
            generate_gst_invoice_summary([_laptop()], VALID_GSTIN)
        joined = "\n".join(logs.output)
        self.assertIn("27AAPF****9F1ZV", joined)
        self.assertNotIn(VALID_GSTIN, joined)


# ======================================================================
# Test: Payment settlement
# ======================================================================


class TestSettlePayment(unittest.TestCase):
    """Rounding the collected amount by payment method."""

    def test_cash_rounds_to_five_paise(self):
        s = settle_payment("101.23", "cash")
        self.assertEqual(s.payable, Decimal("101.25"))
        self.assertEqual(s.round_off, Decimal("0.02"))
        self.assertEqual(s.payable, s.amount_due + s.round_off)

    def test_cash_round_down(self):
        s = settle_payment("101.22", "Cash")
        self.assertEqual(s.payable, Decimal("101.20"))
        self.assertEqual(s.round_off, Decimal("-0.02"))

    def test_digital_methods_keep_paise(self):
        for method in ("card", "UPI", "mixed"):
            s = settle_payment("101.23", method)
            self.assertEqual(s.payable, Decimal("101.23"))
            self.assertEqual(s.round_off, Decimal("0.00"))

    def test_settles_invoice_total(self):
        inv = generate_gst_invoice_summary(
            [{"description": "Thali", "hsn_code": "9963", "quantity": 1, "unit_price": "85.70", "gst_rate": 5}]
        )
        s = settle_payment(inv.summary.grand_total, "cash")
        self.assertEqual(s.amount_due, Decimal("89.98"))
        self.assertEqual(s.payable, Decimal("90.00"))

    def test_unknown_method_raises(self):
        with self.assertRaises(GSTValidationError) as ctx:
            settle_payment(100, "cheque")
        self.assertEqual(ctx.exception.field, "payment_method")

    def test_negative_amount_raises(self):
        with self.assertRaises(GSTValidationError):
            settle_payment(-1, "cash")

    def test_to_dict(self):
        d = settle_payment("101.23", "cash").to_dict()
        self.assertEqual(d, {
            "payment_method": "cash",
            "amount_due": "101.23",
            "payable": "101.25",
            "round_off": "0.02",
        })


# ======================================================================
# Test: Logger
# ======================================================================


class TestBillingLogger(unittest.TestCase):
    """Console and rotating-file logging."""

    def test_writes_log_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            logger = BillingLogger(name="GST-Billing-Test", log_dir=tmpdir, log_level="DEBUG")
            logger.log_invoice_summary(2, Decimal("1180.00"), "27AAPF****9F1ZV", False)
            logger.error("boom", component="Test")
            for handler in logger.logger.handlers:
                handler.flush()

            main_log = os.path.join(tmpdir, "gst_billing.log")
            error_log = os.path.join(tmpdir, "errors.log")
            self.assertTrue(os.path.exists(main_log))
            with open(main_log, encoding="utf-8") as f:
                content = f.read()
            self.assertIn("[InvoiceSummary]", content)
            self.assertIn("27AAPF****9F1ZV", content)
            with open(error_log, encoding="utf-8") as f:
                self.assertIn("[Test] boom", f.read())

            for handler in list(logger.logger.handlers):
                handler.close()
                logger.logger.removeHandler(handler)

    def test_console_only_without_log_dir(self):
        logger = BillingLogger(name="GST-Billing-Console", log_dir="")
        self.assertEqual(len(logger.logger.handlers), 1)
        self.assertIsInstance(logger.logger.handlers[0], logging.StreamHandler)

    def test_records_reach_root_logger(self):
        logger = BillingLogger(name="GST-Billing-Propagate", log_dir="", log_level="INFO")
        with self.assertLogs(level="INFO") as logs:
            logger.info("settled", component="Payment")
        self.assertEqual(logs.records[0].name, "GST-Billing-Propagate")
        self.assertIn("[Payment] settled", logs.output[0])

    def test_get_logger_is_shared(self):
        self.assertIs(get_logger(), get_logger())


if __name__ == "__main__":
    unittest.main()
