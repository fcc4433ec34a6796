"""Flatten orders into spreadsheet rows.

Each order becomes one row, or one row per line item when line-item
expansion is enabled. Rows are plain dicts whose insertion order defines
column order during serialization.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from order_export.errors import MalformedOrderError
from order_export.flatteners import aggregate_tracking, resolve_delivery_state
from order_export.formatters import format_address, format_money, format_timestamp
from order_export.models import ExportOptions, LineItem, Money, Order

logger = logging.getLogger(__name__)

ExportRow = dict[str, str | int]


@dataclass
class RowBatch:
    """Rows built for an export plus the orders that had to be skipped."""

    rows: list[ExportRow] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def bare_id(gid: str) -> str:
    """Strip a platform URI prefix, e.g. "gid://shopify/Order/42" -> "42"."""
    if gid.startswith("gid://"):
        return gid.rstrip("/").rsplit("/", 1)[-1]
    return gid


def _money(value: Money | None) -> str:
    if value is None:
        return ""
    return format_money(value.amount, value.currency_code)


def base_row(order: Order, options: ExportOptions) -> ExportRow:
    """Build the columns shared by every row emitted for one order."""
    if not order.id or not str(order.id).strip():
        raise MalformedOrderError(f"Order {order.name or '?'} has no identifier")

    delivery = resolve_delivery_state(order.fulfillments)
    customer = order.customer

    row: ExportRow = {
        "Order Number": order.name or "",
        "Order ID": bare_id(str(order.id).strip()),
        "Created At": format_timestamp(order.created_at),
        "Updated At": format_timestamp(order.updated_at),
        "Financial Status": order.financial_status or "",
        "Fulfillment Status": order.fulfillment_status or "",
        "Delivery Status": delivery.status,
        "Total": _money(order.total_price),
        "Subtotal": _money(order.subtotal_price),
        "Shipping": _money(order.total_shipping),
        "Tax": _money(order.total_tax),
        "Discounts": _money(order.total_discounts),
        "Refunded": _money(order.total_refunded),
        "Customer Email": (customer.email or "") if customer else "",
        "Customer Name": customer.full_name if customer else "",
        "Customer Phone": (customer.phone or "") if customer else "",
        "Notes": order.note or "",
        "Tags": ", ".join(order.tags),
    }

    if options.include_addresses:
        row["Shipping Address"] = format_address(order.shipping_address)
        row["Billing Address"] = format_address(order.billing_address)

    if options.include_fulfillments:
        tracking = aggregate_tracking(order.fulfillments)
        row["Carrier"] = tracking.carriers
        row["Tracking Numbers"] = tracking.numbers
        row["Tracking URLs"] = tracking.urls
        row["Delivered At"] = delivery.delivered_at
        row["Estimated Delivery"] = delivery.estimated_delivery

    return row


def line_item_columns(item: LineItem) -> ExportRow:
    return {
        "Item Title": item.title or "",
        "Item Variant": item.variant_title or "",
        "Item SKU": item.sku or "",
        "Item Quantity": int(item.quantity),
        "Item Unit Price": _money(item.unit_price),
        "Item Total": _money(item.discounted_total),
    }


def summarize_line_items(items: Iterable[LineItem]) -> str:
    """Render items as "2x Mug; 1x Poster"."""
    return "; ".join(f"{item.quantity}x {item.title}" for item in items)


def order_rows(order: Order, options: ExportOptions) -> list[ExportRow]:
    """Return the rows for a single order (always at least one)."""
    base = base_row(order, options)
    if options.include_line_items and order.line_items:
        return [{**base, **line_item_columns(item)} for item in order.line_items]
    return [{**base, "Line Items": summarize_line_items(order.line_items)}]


def collect_rows(orders: Iterable[Order], options: ExportOptions) -> RowBatch:
    """Build rows for every order, skipping the ones that are malformed."""
    batch = RowBatch()
    for position, order in enumerate(orders):
        try:
            batch.rows.extend(order_rows(order, options))
        except (MalformedOrderError, ArithmeticError, AttributeError, TypeError, ValueError) as exc:
            label = getattr(order, "name", None) or f"at position {position}"
            logger.warning("Skipping order %s: %s", label, exc)
            batch.skipped.append(str(label))
    return batch


def build_rows(orders: Iterable[Order], options: ExportOptions) -> list[ExportRow]:
    return collect_rows(orders, options).rows
