"""GraphQL documents and search-query helpers for the Shopify Admin API."""

from dataclasses import dataclass

_MONEY = "shopMoney { amount currencyCode }"

_ADDRESS_FIELDS = """
      firstName
      lastName
      company
      address1
      address2
      city
      province
      country
      zip
"""

ORDER_FIELDS = f"""
    id
    name
    createdAt
    updatedAt
    displayFinancialStatus
    displayFulfillmentStatus
    note
    tags
    totalPriceSet {{ {_MONEY} }}
    subtotalPriceSet {{ {_MONEY} }}
    totalShippingPriceSet {{ {_MONEY} }}
    totalTaxSet {{ {_MONEY} }}
    totalDiscountsSet {{ {_MONEY} }}
    totalRefundedSet {{ {_MONEY} }}
    customer {{ id email firstName lastName phone }}
    shippingAddress {{ {_ADDRESS_FIELDS} }}
    billingAddress {{ {_ADDRESS_FIELDS} }}
    lineItems(first: 50) {{
      nodes {{
        id
        title
        variantTitle
        sku
        quantity
        originalUnitPriceSet {{ {_MONEY} }}
        discountedTotalSet {{ {_MONEY} }}
      }}
    }}
    fulfillments {{
      id
      status
      displayStatus
      createdAt
      deliveredAt
      estimatedDeliveryAt
      trackingInfo {{ company number url }}
    }}
"""

ORDERS_QUERY = f"""
query GetOrders($first: Int!, $after: String, $query: String, $sortKey: OrderSortKeys, $reverse: Boolean) {{
  orders(first: $first, after: $after, query: $query, sortKey: $sortKey, reverse: $reverse) {{
    edges {{
      cursor
      node {{ {ORDER_FIELDS} }}
    }}
    pageInfo {{ hasNextPage hasPreviousPage startCursor endCursor }}
  }}
}}
"""

ORDER_BY_ID_QUERY = f"""
query GetOrderById($id: ID!) {{
  order(id: $id) {{ {ORDER_FIELDS} }}
}}
"""

ORDERS_COUNT_QUERY = """
query GetOrdersCount($query: String) {
  ordersCount(query: $query) { count precision }
}
"""

# UI sort columns -> OrderSortKeys enum values.
SORT_KEYS = {
    "name": "ORDER_NUMBER",
    "createdAt": "CREATED_AT",
    "updatedAt": "UPDATED_AT",
    "totalPrice": "TOTAL_PRICE",
    "customer": "CUSTOMER_NAME",
}
DEFAULT_SORT_KEY = "CREATED_AT"


@dataclass(frozen=True)
class OrderFilters:
    """Search criteria applied by Shopify before orders are returned."""

    order_id: str | None = None
    date_from: str | None = None
    date_to: str | None = None
    fulfillment_status: str | None = None
    financial_status: str | None = None
    status: str | None = None

    def is_empty(self) -> bool:
        return not build_order_query_string(self)


def resolve_sort_key(sort_key: str | None) -> str:
    return SORT_KEYS.get(sort_key or "createdAt", DEFAULT_SORT_KEY)


def _status_term(field: str, value: str | None) -> str | None:
    if not value or value == "all":
        return None
    statuses = [s.strip() for s in value.split(",") if s.strip()]
    if len(statuses) > 1:
        return "(" + " OR ".join(f"{field}:{s}" for s in statuses) + ")"
    return f"{field}:{statuses[0]}" if statuses else None


def build_order_query_string(filters: OrderFilters | None) -> str:
    """Translate filters into Shopify search syntax.

    Example:
        OrderFilters(order_id="1001", fulfillment_status="shipped,unshipped")
        -> "name:*1001* AND (fulfillment_status:shipped OR fulfillment_status:unshipped)"
    """
    if filters is None:
        return ""
    terms: list[str | None] = []
    if filters.order_id:
        # "1001" also matches the display name "#1001".
        terms.append(f"name:*{filters.order_id}*")
    if filters.date_from:
        terms.append(f"created_at:>={filters.date_from}")
    if filters.date_to:
        terms.append(f"created_at:<={filters.date_to}")
    terms.append(_status_term("fulfillment_status", filters.fulfillment_status))
    terms.append(_status_term("financial_status", filters.financial_status))
    terms.append(_status_term("status", filters.status))
    return " AND ".join(t for t in terms if t)
