from django.http import JsonResponse
from django.views.decorators.http import require_GET

from .errors import PaymentNotFound
from .models import Payment


@require_GET
def payment_status_view(request, order_id: int):
    """Report the Maksuturva payment state of an order, e.g. for the thank-you page."""
    try:
        payment = Payment.objects.load(order_id)
    except PaymentNotFound as e:
        return JsonResponse({"ok": False, "error": str(e)}, status=404)

    surcharge = payment.get_surcharge()
    return JsonResponse({
        "ok": True,
        "order_id": payment.order_id,
        "payment_id": payment.payment_id,
        "status": payment.get_status(),
        "surcharge": f"{surcharge:.2f}",
        "includes_surcharge": surcharge > 0,
    })
