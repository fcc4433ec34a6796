"""Collapse an order's fulfillments into single display values."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from order_export.formatters import format_timestamp
from order_export.models import Fulfillment

UNFULFILLED = "Unfulfilled"


@dataclass(frozen=True)
class TrackingSummary:
    carriers: str = ""
    numbers: str = ""
    urls: str = ""


@dataclass(frozen=True)
class DeliveryState:
    status: str = UNFULFILLED
    delivered_at: str = ""
    estimated_delivery: str = ""


def _unique(values: Iterable[str | None]) -> list[str]:
    """Drop empty values and duplicates, keeping first-seen order."""
    return list(dict.fromkeys(v for v in values if v))


def aggregate_tracking(fulfillments: Sequence[Fulfillment]) -> TrackingSummary:
    """Merge tracking entries across all fulfillments.

    Carriers and numbers are joined with ", "; URLs one per line.
    """
    entries = [info for f in fulfillments for info in f.tracking_info]
    return TrackingSummary(
        carriers=", ".join(_unique(e.company for e in entries)),
        numbers=", ".join(_unique(e.number for e in entries)),
        urls="\n".join(_unique(e.url for e in entries)),
    )


def resolve_delivery_state(fulfillments: Sequence[Fulfillment]) -> DeliveryState:
    """Pick the most recent delivery state.

    Fulfillments are walked in order and the last one defining each field
    wins, independently per field.
    """
    status = UNFULFILLED
    delivered_at = None
    estimated = None
    for fulfillment in fulfillments:
        if fulfillment.display_status:
            status = fulfillment.display_status
        if fulfillment.delivered_at:
            delivered_at = fulfillment.delivered_at
        if fulfillment.estimated_delivery_at:
            estimated = fulfillment.estimated_delivery_at
    return DeliveryState(
        status=status.replace("_", " "),
        delivered_at=format_timestamp(delivered_at),
        estimated_delivery=format_timestamp(estimated),
    )
