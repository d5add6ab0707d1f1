import logging
from decimal import Decimal, InvalidOperation

from django.db import DatabaseError, models, transaction
from django.utils import timezone

from .errors import PaymentError, PaymentNotFound
from .utils import format_amount, parse_seller_costs

logger = logging.getLogger(__name__)

SELLER_COSTS_KEY = "pmt_sellercosts"


def _order_pk(order_id) -> int:
    try:
        return int(order_id)
    except (TypeError, ValueError):
        return 0


class PaymentManager(models.Manager):
    def load(self, order_id) -> "Payment":
        """Return the payment record of the given order.

        Raises ``PaymentNotFound`` when the id is not a positive integer or
        no row exists for it.
        """
        oid = _order_pk(order_id)
        if oid <= 0:
            raise PaymentNotFound("Failed to load Maksuturva payment!")
        try:
            return self.get(order_id=oid)
        except self.model.DoesNotExist:
            raise PaymentNotFound("Failed to load Maksuturva payment!") from None

    def create_payment(self, *, order_id, payment_id, status,
                       data_sent: dict | None = None, data_received: dict | None = None) -> "Payment":
        """Insert the record for a new checkout and return it freshly loaded."""
        if status not in self.model.STATUSES:
            raise PaymentError(f"Unknown Maksuturva payment status: {status!r}")
        oid = _order_pk(order_id)
        if oid <= 0:
            raise PaymentError("Failed to create Maksuturva payment.")

        try:
            with transaction.atomic():
                self.create(
                    order_id=oid,
                    payment_id=payment_id,
                    status=status,
                    data_sent=dict(data_sent or {}),
                    data_received=dict(data_received or {}),
                    date_added=timezone.now(),
                )
        except DatabaseError as e:
            logger.exception("Failed to create Maksuturva payment for order_id=%s", oid)
            raise PaymentError("Failed to create Maksuturva payment.") from e

        logger.info("Created Maksuturva payment %s for order_id=%s (%s)", payment_id, oid, status)
        return self.load(oid)


class Payment(models.Model):
    STATUS_PENDING = "pending"
    STATUS_ON_HOLD = "on-hold"
    STATUS_PROCESSING = "processing"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"
    STATUS_REFUNDED = "refunded"
    STATUS_FAILED = "failed"
    STATUS_DELAYED = "delayed"
    STATUS_ERROR = "error"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ON_HOLD, "On hold"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_REFUNDED, "Refunded"),
        (STATUS_FAILED, "Failed"),
        (STATUS_DELAYED, "Delayed"),
        (STATUS_ERROR, "Error"),
    ]
    STATUSES = frozenset(code for code, _ in STATUS_CHOICES)

    order_id = models.PositiveIntegerField(unique=True)
    payment_id = models.CharField(max_length=64)
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, db_index=True)
    data_sent = models.JSONField(default=dict, blank=True)      # what we posted to Maksuturva
    data_received = models.JSONField(default=dict, blank=True)  # what Maksuturva sent back
    date_added = models.DateTimeField(default=timezone.now)
    date_updated = models.DateTimeField(null=True, blank=True)

    objects = PaymentManager()

    class Meta:
        db_table = "maksuturva_queue"

    def __str__(self):
        return f"{self.order_id} ({self.status})"

    def get_status(self) -> str:
        return self.status

    def set_data_received(self, data: dict) -> None:
        self.data_received = dict(data)
        self.update()

    def complete(self) -> None:
        self._set_status(self.STATUS_COMPLETED)

    def cancel(self) -> None:
        self._set_status(self.STATUS_CANCELLED)

    def error(self) -> None:
        """Mark the payment as failed on our side (bad callback, unexpected data)."""
        self._set_status(self.STATUS_ERROR)

    def delayed(self) -> None:
        self._set_status(self.STATUS_DELAYED)

    def pending(self) -> None:
        self._set_status(self.STATUS_PENDING)

    def get_surcharge(self) -> Decimal:
        """Return the extra fee the chosen payment method added, zero if none.

        Maksuturva reports the seller costs again after payment; when they grew
        compared to what we sent, the difference is the surcharge.
        """
        sent = parse_seller_costs((self.data_sent or {}).get(SELLER_COSTS_KEY))
        received = parse_seller_costs((self.data_received or {}).get(SELLER_COSTS_KEY))
        if sent is not None and received is not None and received > sent:
            try:
                return format_amount(received - sent)
            except InvalidOperation:
                logger.warning("Seller costs out of range for order_id=%s: sent=%s received=%s",
                               self.order_id, sent, received)
        return Decimal("0")

    def includes_surcharge(self) -> bool:
        return self.get_surcharge() > 0

    def _set_status(self, status: str) -> None:
        previous = self.status
        self.status = status
        self.update()
        logger.info("Maksuturva payment %s for order_id=%s: %s -> %s",
                    self.payment_id, self.order_id, previous, status)

    def update(self) -> None:
        """Persist status and received data to the row matching order and payment id.

        Raises ``PaymentError`` on a database error and also when no row matches
        the order and payment id pair.
        """
        now = timezone.now()
        try:
            updated = type(self).objects.filter(
                order_id=self.order_id, payment_id=self.payment_id,
            ).update(
                status=self.status,
                data_received=self.data_received,
                date_updated=now,
            )
        except DatabaseError as e:
            logger.exception("Failed to update Maksuturva payment for order_id=%s", self.order_id)
            raise PaymentError("Failed to update Maksuturva payment!") from e

        if not updated:
            logger.error("No Maksuturva payment row for order_id=%s payment_id=%s",
                         self.order_id, self.payment_id)
            raise PaymentError("Failed to update Maksuturva payment!")
        self.date_updated = now
