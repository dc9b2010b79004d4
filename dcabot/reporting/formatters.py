"""Output formatters for run outcomes."""

import json

from dcabot.models.execution import OrderOutcome, OutcomeStatus


def format_outcome_text(o: OrderOutcome) -> str:
    """Single line for terminals and log aggregation."""
    if o.status == OutcomeStatus.SKIPPED:
        return f"SKIPPED: price {o.observed_price} above threshold {o.threshold}"
    if o.status == OutcomeStatus.PLACED:
        return f"PLACED: {o.description} (txid {o.transaction_id})"
    if o.status == OutcomeStatus.DRY_RUN:
        return f"DRY-RUN: {o.description} (not sent)"
    if o.status == OutcomeStatus.AMBIGUOUS:
        return f"AMBIGUOUS: {o.reason} - check open orders on the exchange before rerunning"
    return f"FAILED: {o.reason}"


def format_outcome_json(o: OrderOutcome) -> str:
    """JSON outcome for programmatic consumption. Decimals stay strings."""
    data: dict[str, str] = {"status": o.status.value}
    if o.observed_price is not None:
        data["observed_price"] = str(o.observed_price)
    if o.threshold is not None:
        data["threshold"] = str(o.threshold)
    if o.description:
        data["description"] = o.description
    if o.transaction_id:
        data["transaction_id"] = o.transaction_id
    if o.reason:
        data["reason"] = o.reason
    return json.dumps(data, indent=2)
