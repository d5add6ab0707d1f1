class PaymentError(Exception):
    """Raised when a Maksuturva payment record cannot be created, loaded or saved."""


class PaymentNotFound(PaymentError):
    pass
