from decimal import Decimal
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from .errors import PaymentError, PaymentNotFound
from .models import Payment
from .utils import format_amount, parse_seller_costs


def _create(order_id=42, payment_id="MKS42", status=Payment.STATUS_PENDING, **kw):
    return Payment.objects.create_payment(
        order_id=order_id, payment_id=payment_id, status=status, **kw
    )


class SellerCostParsingTests(SimpleTestCase):
    def test_accepts_decimal_comma(self):
        self.assertEqual(parse_seller_costs("1,50"), Decimal("1.50"))

    def test_accepts_numbers(self):
        self.assertEqual(parse_seller_costs(2), Decimal("2"))
        self.assertEqual(parse_seller_costs(" 0.35 "), Decimal("0.35"))

    def test_rejects_garbage(self):
        for value in (None, "", "abc", "NaN", True):
            self.assertIsNone(parse_seller_costs(value), value)

    def test_format_amount_rounds_half_up(self):
        self.assertEqual(format_amount(Decimal("1.005")), Decimal("1.01"))
        self.assertEqual(str(format_amount(3)), "3.00")


class CreateAndLoadTests(TestCase):
    def test_create_returns_loaded_record(self):
        with self.assertLogs("maksuturva.models", level="INFO") as cm:
            payment = _create(order_id="42", data_sent={"pmt_amount": "10,00"})

        self.assertEqual(payment.order_id, 42)
        self.assertEqual(payment.payment_id, "MKS42")
        self.assertEqual(payment.get_status(), "pending")
        self.assertEqual(payment.data_sent, {"pmt_amount": "10,00"})
        self.assertEqual(payment.data_received, {})
        self.assertIsNotNone(payment.date_added)
        self.assertIsNone(payment.date_updated)
        self.assertIn("order_id=42", cm.output[0])

    def test_duplicate_order_is_rejected(self):
        _create()
        with self.assertLogs("maksuturva.models", level="ERROR"):
            with self.assertRaises(PaymentError):
                _create(payment_id="OTHER")
        self.assertEqual(Payment.objects.count(), 1)

    def test_unknown_status_is_rejected(self):
        with self.assertRaises(PaymentError):
            _create(status="paid")
        self.assertFalse(Payment.objects.exists())

    def test_create_rejects_invalid_order_id(self):
        for order_id in (0, -5, "abc"):
            with self.assertRaises(PaymentError):
                _create(order_id=order_id)
        self.assertFalse(Payment.objects.exists())

    def test_load_by_order_id(self):
        _create(order_id=7, payment_id="MKS7")
        self.assertEqual(Payment.objects.load(7).payment_id, "MKS7")
        self.assertEqual(Payment.objects.load("7").payment_id, "MKS7")

    def test_load_missing_or_invalid_id(self):
        for order_id in (99, 0, -1, None, "abc"):
            with self.assertRaises(PaymentNotFound):
                Payment.objects.load(order_id)


class StatusChangeTests(TestCase):
    def setUp(self):
        self.payment = _create()

    def test_mutators_persist_status(self):
        expected = {
            "complete": "completed",
            "cancel": "cancelled",
            "error": "error",
            "delayed": "delayed",
            "pending": "pending",
        }
        for method, status in expected.items():
            getattr(self.payment, method)()
            self.assertEqual(self.payment.get_status(), status)
            self.assertEqual(Payment.objects.load(42).status, status)

    def test_any_status_may_follow_any_other(self):
        self.payment.complete()
        self.payment.pending()
        self.payment.cancel()
        self.payment.complete()
        self.assertEqual(Payment.objects.load(42).status, "completed")

    def test_update_sets_date_updated(self):
        self.payment.complete()
        self.assertIsNotNone(self.payment.date_updated)
        self.assertEqual(Payment.objects.load(42).date_updated, self.payment.date_updated)

    def test_set_data_received_keeps_data_sent(self):
        self.payment.data_sent = {"ignored": "locally"}
        self.payment.set_data_received({"pmt_sellercosts": "1,00"})

        stored = Payment.objects.load(42)
        self.assertEqual(stored.data_received, {"pmt_sellercosts": "1,00"})
        self.assertEqual(stored.data_sent, {})

    def test_update_requires_matching_payment_id(self):
        self.payment.payment_id = "SOMEONE-ELSE"
        with self.assertLogs("maksuturva.models", level="ERROR"):
            with self.assertRaises(PaymentError):
                self.payment.complete()
        self.assertEqual(Payment.objects.load(42).status, "pending")

    def test_database_failure_is_wrapped(self):
        with patch("django.db.models.query.QuerySet.update", side_effect=DatabaseError("gone")):
            with self.assertLogs("maksuturva.models", level="ERROR"):
                with self.assertRaises(PaymentError) as ctx:
                    self.payment.cancel()
        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)

    def test_status_change_is_logged(self):
        with self.assertLogs("maksuturva.models", level="INFO") as cm:
            self.payment.delayed()
        self.assertIn("pending -> delayed", cm.output[0])


class SurchargeTests(TestCase):
    def _payment(self, sent, received):
        return _create(data_sent=sent, data_received=received)

    def test_positive_difference_is_surcharge(self):
        payment = self._payment({"pmt_sellercosts": "1,00"}, {"pmt_sellercosts": "2,50"})
        self.assertEqual(payment.get_surcharge(), Decimal("1.50"))
        self.assertTrue(payment.includes_surcharge())

    def test_lower_or_equal_received_cost_means_none(self):
        payment = self._payment({"pmt_sellercosts": "2,50"}, {"pmt_sellercosts": "2.50"})
        self.assertEqual(payment.get_surcharge(), Decimal("0"))
        payment.set_data_received({"pmt_sellercosts": "1,00"})
        self.assertFalse(payment.includes_surcharge())

    def test_missing_field_means_none(self):
        payment = self._payment({"pmt_sellercosts": "1,00"}, {})
        self.assertEqual(payment.get_surcharge(), Decimal("0"))
        self.assertFalse(payment.includes_surcharge())

    def test_surcharge_rounds_to_cents(self):
        payment = self._payment({"pmt_sellercosts": "1,00"}, {"pmt_sellercosts": "2,005"})
        self.assertEqual(payment.get_surcharge(), Decimal("1.01"))

    def test_out_of_range_cost_means_none(self):
        for order_id, received in ((1, "1e30"), (2, "99999999999999999999999999999")):
            payment = _create(order_id=order_id, payment_id=f"MKS{order_id}",
                              data_sent={"pmt_sellercosts": "0"},
                              data_received={"pmt_sellercosts": received})
            with self.assertLogs("maksuturva.models", level="WARNING"):
                self.assertEqual(payment.get_surcharge(), Decimal("0"))

    def test_unparseable_cost_means_none(self):
        payment = self._payment({"pmt_sellercosts": "1,00"}, {"pmt_sellercosts": "n/a"})
        self.assertFalse(payment.includes_surcharge())


class PaymentStatusViewTests(TestCase):
    def test_reports_status_and_surcharge(self):
        _create(order_id=5, payment_id="MKS5",
                data_sent={"pmt_sellercosts": "0,00"},
                data_received={"pmt_sellercosts": "0,35"})

        resp = self.client.get(reverse("maksuturva:payment_status", kwargs={"order_id": 5}))

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {
            "ok": True,
            "order_id": 5,
            "payment_id": "MKS5",
            "status": "pending",
            "surcharge": "0.35",
            "includes_surcharge": True,
        })

    def test_huge_seller_costs_report_no_surcharge(self):
        _create(order_id=6, payment_id="MKS6",
                data_sent={"pmt_sellercosts": "0,00"},
                data_received={"pmt_sellercosts": "99999999999999999999999999999"})

        with self.assertLogs("maksuturva.models", level="WARNING"):
            resp = self.client.get(reverse("maksuturva:payment_status", kwargs={"order_id": 6}))

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["surcharge"], "0.00")
        self.assertFalse(resp.json()["includes_surcharge"])

    def test_unknown_order_is_404(self):
        resp = self.client.get(reverse("maksuturva:payment_status", kwargs={"order_id": 404}))
        self.assertEqual(resp.status_code, 404)
        self.assertFalse(resp.json()["ok"])

    def test_post_not_allowed(self):
        resp = self.client.post(reverse("maksuturva:payment_status", kwargs={"order_id": 5}))
        self.assertEqual(resp.status_code, 405)


class PaymentCommandTests(TestCase):
    def test_prints_record(self):
        _create(order_id=3, payment_id="MKS3")
        out = StringIO()
        call_command("maksuturva_payment", "3", stdout=out)
        self.assertIn("order=3 payment=MKS3 status=pending surcharge=0.00", out.getvalue())

    def test_set_runs_mutator(self):
        _create(order_id=3, payment_id="MKS3")
        out = StringIO()
        call_command("maksuturva_payment", "3", "--set", "cancel", stdout=out)
        self.assertIn("Updated 3 -> cancelled", out.getvalue())
        self.assertEqual(Payment.objects.load(3).status, "cancelled")

    def test_unknown_order(self):
        with self.assertRaises(CommandError):
            call_command("maksuturva_payment", "3", stdout=StringIO())
