from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENTS = Decimal("0.01")


def parse_seller_costs(value) -> Decimal | None:
    """Parse a gateway money value such as ``"1,50"`` into a Decimal.

    Maksuturva echoes amounts with a decimal comma; both separators are
    accepted. Returns ``None`` for missing or non-numeric values.
    """
    if value is None or isinstance(value, bool):
        return None
    raw = str(value).strip().replace(",", ".")
    if not raw:
        return None
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def format_amount(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
