"""Decode raw Shopify GraphQL order nodes into validated Order snapshots."""

import logging
from collections.abc import Iterable, Mapping

from order_export.errors import MalformedOrderError
from order_export.formatters import parse_timestamp
from order_export.models import (
    Address,
    Customer,
    Fulfillment,
    LineItem,
    Money,
    Order,
    TrackingInfo,
)

logger = logging.getLogger(__name__)


def _text(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


def _money(money_bag: Mapping | None) -> Money | None:
    """Read the shop-currency side of a MoneyBag."""
    if not money_bag:
        return None
    shop = money_bag.get("shopMoney") or {}
    if not shop:
        return None
    return Money(amount=_text(shop.get("amount")), currency_code=_text(shop.get("currencyCode")))


def _address(raw: Mapping | None) -> Address | None:
    if not raw:
        return None
    return Address(
        first_name=raw.get("firstName"),
        last_name=raw.get("lastName"),
        company=raw.get("company"),
        address1=raw.get("address1"),
        address2=raw.get("address2"),
        city=raw.get("city"),
        province=raw.get("province"),
        zip=raw.get("zip"),
        country=raw.get("country"),
    )


def _customer(raw: Mapping | None) -> Customer | None:
    if not raw:
        return None
    return Customer(
        email=raw.get("email"),
        first_name=raw.get("firstName"),
        last_name=raw.get("lastName"),
        phone=raw.get("phone"),
    )


def _line_item(raw: Mapping) -> LineItem:
    return LineItem(
        title=str(raw.get("title") or ""),
        quantity=int(raw.get("quantity") or 0),
        variant_title=raw.get("variantTitle"),
        sku=raw.get("sku"),
        unit_price=_money(raw.get("originalUnitPriceSet")),
        discounted_total=_money(raw.get("discountedTotalSet")),
    )


def _fulfillment(raw: Mapping) -> Fulfillment:
    return Fulfillment(
        status=str(raw.get("status") or ""),
        created_at=parse_timestamp(raw.get("createdAt")),
        display_status=raw.get("displayStatus"),
        delivered_at=parse_timestamp(raw.get("deliveredAt")),
        estimated_delivery_at=parse_timestamp(raw.get("estimatedDeliveryAt")),
        tracking_info=tuple(
            TrackingInfo(company=t.get("company"), number=t.get("number"), url=t.get("url"))
            for t in raw.get("trackingInfo") or []
        ),
    )


def _nodes(connection: object) -> list:
    """Accept either a GraphQL connection ({"nodes": [...]}) or a bare list."""
    if isinstance(connection, Mapping):
        if "nodes" in connection:
            return list(connection.get("nodes") or [])
        return [edge.get("node") for edge in connection.get("edges") or []]
    return list(connection or [])


def parse_order(node: Mapping) -> Order:
    """Convert one raw order node into an Order.

    Raises:
        MalformedOrderError: If the node is not a mapping or has no id.
    """
    if not isinstance(node, Mapping):
        raise MalformedOrderError(f"Expected an order object, got {type(node).__name__}")
    order_id = node.get("id")
    if not order_id:
        raise MalformedOrderError(f"Order {node.get('name') or '?'} has no id")

    try:
        return Order(
            id=str(order_id),
            name=str(node.get("name") or ""),
            created_at=parse_timestamp(node.get("createdAt")),
            updated_at=parse_timestamp(node.get("updatedAt")),
            financial_status=node.get("displayFinancialStatus"),
            fulfillment_status=node.get("displayFulfillmentStatus"),
            total_price=_money(node.get("totalPriceSet")),
            subtotal_price=_money(node.get("subtotalPriceSet")),
            total_shipping=_money(node.get("totalShippingPriceSet")),
            total_tax=_money(node.get("totalTaxSet")),
            total_discounts=_money(node.get("totalDiscountsSet")),
            total_refunded=_money(node.get("totalRefundedSet")),
            customer=_customer(node.get("customer")),
            shipping_address=_address(node.get("shippingAddress")),
            billing_address=_address(node.get("billingAddress")),
            line_items=tuple(_line_item(i) for i in _nodes(node.get("lineItems"))),
            fulfillments=tuple(_fulfillment(f) for f in node.get("fulfillments") or []),
            note=node.get("note"),
            tags=tuple(str(t) for t in node.get("tags") or []),
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise MalformedOrderError(f"Order {order_id}: {exc}") from exc


def parse_orders(nodes: Iterable[Mapping]) -> list[Order]:
    """Parse every node, logging and skipping the malformed ones."""
    orders: list[Order] = []
    for node in nodes:
        try:
            orders.append(parse_order(node))
        except MalformedOrderError as exc:
            logger.warning("Skipping malformed order record: %s", exc)
    return orders
