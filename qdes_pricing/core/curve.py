"""Integer arithmetic for the QDES price curve.

All functions are pure and work on non-negative integers only. Division
always truncates, and the order of operations is part of the contract:
changing it changes rounding and therefore the charged amounts.
"""


def clamped_sub(a: int, b: int) -> int:
    """a - b, saturating at zero."""
    return a - b if a > b else 0


def decayed_price(
    last_price: int,
    last_timestamp: int,
    now: int,
    decay_time: int,
    bottom_price: int,
) -> int:
    """Project last_price forward to now along the quadratic decay curve.

    With f = dt / decay_time and dp = last_price - bottom_price the curve is
    last_price - dp * (2f - f^2): it falls fastest right after a purchase
    and flattens into bottom_price, reaching it exactly at decay_time.

    Computed as p = dp * dt // decay_time, then last_price - 2p + p * dt // decay_time.
    Once dt reaches decay_time the result is bottom_price outright; the
    general expression can leave a one-unit remainder there.

    Args:
        last_price: Price recorded at last_timestamp
        last_timestamp: Second the price was recorded
        now: Current second (earlier than last_timestamp counts as no time passed)
        decay_time: Seconds for a full decay to bottom_price
        bottom_price: Floor of the curve

    Returns:
        The projected price
    """
    elapsed = min(clamped_sub(now, last_timestamp), decay_time)
    if elapsed == decay_time:
        return bottom_price

    spread = clamped_sub(last_price, bottom_price)
    p = spread * elapsed // decay_time
    return last_price - 2 * p + p * elapsed // decay_time


def surged_price(price: int, quantity: int, numerator: int, denominator: int) -> int:
    """Apply the growth ratio once per unit bought, truncating at every step.

    This is deliberately iterative: floor(price * (n/d)**q) differs from
    the stepwise result in general.
    """
    for _ in range(quantity):
        price = price * numerator // denominator
    return price


def required_payment(price: int, quantity: int, scale_numerator: int = 1, scale_denominator: int = 1) -> int:
    """Total due for quantity units at a flat unit price.

    The scale ratio is applied to the unit price (truncating) before
    multiplying by quantity.
    """
    return quantity * (price * scale_numerator // scale_denominator)
