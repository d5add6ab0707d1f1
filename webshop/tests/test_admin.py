from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from maksuturva.models import Payment


class PaymentAdminTests(TestCase):
    def setUp(self):
        user = get_user_model().objects.create_superuser("admin", "admin@example.com", "complexpass123")
        self.client.force_login(user)
        self.payment = Payment.objects.create_payment(
            order_id=11, payment_id="MKS11", status=Payment.STATUS_PENDING,
        )

    def test_changelist_lists_payments(self):
        resp = self.client.get(reverse("admin:maksuturva_payment_changelist"))
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "MKS11")

    def test_changelist_filters_by_status(self):
        resp = self.client.get(reverse("admin:maksuturva_payment_changelist"), {"status__exact": "completed"})
        self.assertEqual(resp.status_code, 200)
        self.assertNotContains(resp, "MKS11")

    def test_payments_cannot_be_deleted(self):
        url = reverse("admin:maksuturva_payment_delete", args=[self.payment.pk])
        resp = self.client.post(url, {"post": "yes"})
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(Payment.objects.count(), 1)

    def test_payments_cannot_be_added(self):
        resp = self.client.get(reverse("admin:maksuturva_payment_add"))
        self.assertEqual(resp.status_code, 403)

    def test_change_form_only_updates_status(self):
        url = reverse("admin:maksuturva_payment_change", args=[self.payment.pk])
        resp = self.client.post(url, {"status": "completed", "order_id": "99", "payment_id": "HIJACK"})
        self.assertEqual(resp.status_code, 302)

        stored = Payment.objects.load(11)
        self.assertEqual(stored.status, "completed")
        self.assertEqual(stored.payment_id, "MKS11")
        self.assertIsNotNone(stored.date_updated)
