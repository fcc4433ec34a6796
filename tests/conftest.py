from datetime import datetime, timezone

import pytest

from order_export.models import (
    Address,
    Customer,
    Fulfillment,
    LineItem,
    Money,
    Order,
    TrackingInfo,
)


def usd(amount):
    return Money(amount=amount, currency_code="USD")


@pytest.fixture
def order_with_items():
    return Order(
        id="gid://shopify/Order/5001",
        name="#1001",
        created_at=datetime(2024, 5, 10, 14, 30, tzinfo=timezone.utc),
        updated_at=datetime(2024, 5, 11, 9, 0, tzinfo=timezone.utc),
        financial_status="PAID",
        fulfillment_status="FULFILLED",
        total_price=usd("45.00"),
        subtotal_price=usd("40.00"),
        total_shipping=usd("5.00"),
        total_tax=usd("0.00"),
        total_discounts=usd("0.00"),
        total_refunded=usd("0.00"),
        customer=Customer(email="grace@example.com", first_name="Grace", last_name="Hopper", phone="+15550100"),
        shipping_address=Address(
            first_name="Grace", last_name="Hopper", address1="1 Navy Way",
            city="Arlington", province="Virginia", zip="22201", country="United States",
        ),
        line_items=(
            LineItem(title="Mug", quantity=2, sku="MUG-1", unit_price=usd("10.00"), discounted_total=usd("20.00")),
            LineItem(title="Poster", quantity=1, variant_title="A2", unit_price=usd("20.00"), discounted_total=usd("20.00")),
        ),
        fulfillments=(
            Fulfillment(
                status="SUCCESS",
                display_status="IN_TRANSIT",
                tracking_info=(TrackingInfo(company="UPS", number="1Z1", url="https://ups.example/1Z1"),),
            ),
            Fulfillment(
                status="SUCCESS",
                display_status="DELIVERED",
                delivered_at=datetime(2024, 5, 14, 16, 5, tzinfo=timezone.utc),
                tracking_info=(TrackingInfo(company="UPS", number="1Z2", url="https://ups.example/1Z2"),),
            ),
        ),
        note="Leave at the door",
        tags=("vip", "wholesale"),
    )


@pytest.fixture
def order_without_items():
    return Order(id="gid://shopify/Order/5002", name="#1002", total_price=usd("0.00"))


@pytest.fixture
def raw_order_node():
    """An order node as returned by the Admin GraphQL API."""
    def money(amount, code="USD"):
        return {"shopMoney": {"amount": amount, "currencyCode": code}}

    return {
        "id": "gid://shopify/Order/5001",
        "name": "#1001",
        "createdAt": "2024-05-10T14:30:00Z",
        "updatedAt": "2024-05-11T09:00:00Z",
        "displayFinancialStatus": "PAID",
        "displayFulfillmentStatus": "FULFILLED",
        "note": None,
        "tags": ["vip"],
        "totalPriceSet": money("45.00"),
        "subtotalPriceSet": money("40.00"),
        "totalShippingPriceSet": money("5.00"),
        "totalTaxSet": money("0.00"),
        "totalDiscountsSet": money("0.00"),
        "totalRefundedSet": None,
        "customer": {"id": "gid://shopify/Customer/1", "email": "grace@example.com",
                     "firstName": "Grace", "lastName": "Hopper", "phone": None},
        "shippingAddress": {"firstName": "Grace", "lastName": "Hopper", "address1": "1 Navy Way",
                            "city": "Arlington", "province": "Virginia", "zip": "22201",
                            "country": "United States", "countryCodeV2": "US"},
        "billingAddress": None,
        "lineItems": {"nodes": [
            {"id": "gid://shopify/LineItem/1", "title": "Mug", "variantTitle": None, "sku": "MUG-1",
             "quantity": 2, "originalUnitPriceSet": money("10.00"), "discountedTotalSet": money("20.00")},
        ]},
        "fulfillments": [
            {"id": "gid://shopify/Fulfillment/1", "status": "SUCCESS", "displayStatus": "DELIVERED",
             "createdAt": "2024-05-11T10:00:00Z", "deliveredAt": "2024-05-14T16:05:00Z",
             "estimatedDeliveryAt": None, "inTransitAt": None,
             "trackingInfo": [{"company": "UPS", "number": "1Z1", "url": None}]},
        ],
    }
