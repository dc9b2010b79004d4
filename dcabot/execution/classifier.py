"""Classify Kraken AddOrder responses into outcomes."""

import json

from dcabot.models.execution import OrderOutcome

UNEXPECTED_STRUCTURE = "unexpected response structure"


def classify(status: int, body: str) -> OrderOutcome:
    """Turn an AddOrder response into Placed or Failed. Never raises."""
    if not 200 <= status < 300:
        return OrderOutcome.failed(f"transport error: {status}")

    try:
        payload = json.loads(body)
    except ValueError:
        return OrderOutcome.failed(UNEXPECTED_STRUCTURE)
    if not isinstance(payload, dict):
        return OrderOutcome.failed(UNEXPECTED_STRUCTURE)

    errors = payload.get("error")
    if isinstance(errors, list) and errors:
        return OrderOutcome.failed("; ".join(str(e) for e in errors))

    result = payload.get("result")
    if not isinstance(result, dict):
        return OrderOutcome.failed(UNEXPECTED_STRUCTURE)
    descr = result.get("descr")
    order = descr.get("order") if isinstance(descr, dict) else None
    txids = result.get("txid")
    if (
        isinstance(order, str)
        and isinstance(txids, list)
        and txids
        and all(isinstance(t, str) for t in txids)
    ):
        return OrderOutcome.placed(description=order, transaction_id=txids[0])

    return OrderOutcome.failed(UNEXPECTED_STRUCTURE)
