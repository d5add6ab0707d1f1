from django.core.management.base import BaseCommand, CommandError

from maksuturva.errors import PaymentError, PaymentNotFound
from maksuturva.models import Payment

ACTIONS = ("complete", "cancel", "error", "delayed", "pending")


class Command(BaseCommand):
    help = "Show the Maksuturva payment of an order, optionally forcing its status"

    def add_arguments(self, parser):
        parser.add_argument("order_id", type=int)
        parser.add_argument("--set", dest="action", choices=ACTIONS,
                            help="Run the given status change before printing")

    def handle(self, *args, **opts):
        try:
            payment = Payment.objects.load(opts["order_id"])
        except PaymentNotFound:
            self.stdout.write(self.style.WARNING(f"No Maksuturva payment for order {opts['order_id']}"))
            raise CommandError(f"Unknown order {opts['order_id']}")

        if opts["action"]:
            try:
                getattr(payment, opts["action"])()
            except PaymentError as e:
                raise CommandError(str(e)) from e
            self.stdout.write(self.style.SUCCESS(f"Updated {payment.order_id} -> {payment.get_status()}"))

        self.stdout.write(
            f"order={payment.order_id} payment={payment.payment_id} status={payment.get_status()} "
            f"surcharge={payment.get_surcharge():.2f}"
        )
