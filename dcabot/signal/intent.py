"""Purchase decision: buy only at or below the configured ceiling."""

from decimal import Decimal

from dcabot.models.signal import Intent


def decide(observed: Decimal, threshold: Decimal) -> Intent:
    # Inclusive: a price equal to the ceiling still buys.
    if observed <= threshold:
        return Intent.PROCEED
    return Intent.SKIP
