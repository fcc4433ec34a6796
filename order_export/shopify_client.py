"""Shopify Admin GraphQL client for fetching orders to export."""

import logging
import os
from dataclasses import dataclass, field

import requests
from dotenv import load_dotenv

from order_export.base_client import OrderSource
from order_export.errors import ShopifyQueryError
from order_export.models import Order
from order_export.normalize import parse_order, parse_orders
from order_export.queries import (
    ORDER_BY_ID_QUERY,
    ORDERS_COUNT_QUERY,
    ORDERS_QUERY,
    OrderFilters,
    build_order_query_string,
    resolve_sort_key,
)

load_dotenv()

logger = logging.getLogger(__name__)

API_VERSION = "2024-10"
PAGE_SIZE = 50
ORDER_GID_PREFIX = "gid://shopify/Order/"


@dataclass
class PageInfo:
    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: str | None = None
    end_cursor: str | None = None


@dataclass
class OrdersPage:
    """One page of orders plus the cursor state needed to fetch the next."""

    orders: list[Order] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)
    total_count: int = 0


def order_gid(order_id: str | int) -> str:
    """Expand a bare numeric id to its GraphQL global id."""
    order_id = str(order_id)
    if order_id.startswith("gid://"):
        return order_id
    return f"{ORDER_GID_PREFIX}{order_id}"


class ShopifyClient(OrderSource):
    """Client for the Shopify Admin GraphQL API."""

    def __init__(
        self,
        store_url: str | None = None,
        access_token: str | None = None,
        api_version: str | None = None,
        session: requests.Session | None = None,
    ):
        self.store_url = (store_url or os.getenv("SHOPIFY_STORE_URL", "")).rstrip("/")
        self.access_token = access_token or os.getenv("SHOPIFY_ACCESS_TOKEN", "")
        if not self.store_url or not self.access_token:
            raise ValueError(
                "SHOPIFY_STORE_URL and SHOPIFY_ACCESS_TOKEN must be set "
                "either as arguments or in a .env file."
            )
        self.store_url = self.store_url.removeprefix("https://").removeprefix("http://")
        self.api_version = api_version or os.getenv("SHOPIFY_API_VERSION", API_VERSION)
        self.endpoint = f"https://{self.store_url}/admin/api/{self.api_version}/graphql.json"
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "X-Shopify-Access-Token": self.access_token,
                "Content-Type": "application/json",
            }
        )

    def _graphql(self, query: str, variables: dict | None = None) -> dict:
        resp = self.session.post(
            self.endpoint,
            json={"query": query, "variables": variables or {}},
        )
        resp.raise_for_status()
        payload = resp.json()
        if payload.get("errors"):
            messages = [str(e.get("message", e)) for e in payload["errors"]]
            logger.error("GraphQL errors: %s", messages)
            raise ShopifyQueryError(messages)
        return payload.get("data") or {}

    def count_orders(self, filters: OrderFilters | None = None) -> int:
        """Return the number of orders matching the filters."""
        query = build_order_query_string(filters) or None
        data = self._graphql(ORDERS_COUNT_QUERY, {"query": query})
        return int((data.get("ordersCount") or {}).get("count") or 0)

    def fetch_page(
        self,
        filters: OrderFilters | None = None,
        first: int = PAGE_SIZE,
        after: str | None = None,
        sort_key: str | None = None,
        reverse: bool = True,
        include_count: bool = True,
    ) -> OrdersPage:
        """Fetch a single page of orders.

        Args:
            filters: Search criteria translated to Shopify query syntax.
            first: Page size (Shopify max is 250).
            after: Cursor returned as end_cursor by the previous page.
            sort_key: One of "name", "createdAt", "updatedAt", "totalPrice",
                      "customer". Unknown keys sort by creation date.
            reverse: Newest first when True.
            include_count: Issue a second query for the total match count;
                           otherwise total_count is the page size.

        Returns:
            OrdersPage with parsed orders, page info and the total match count.
        """
        query = build_order_query_string(filters) or None
        data = self._graphql(
            ORDERS_QUERY,
            {
                "first": first,
                "after": after,
                "query": query,
                "sortKey": resolve_sort_key(sort_key),
                "reverse": reverse,
            },
        )
        connection = data.get("orders") or {}
        nodes = [edge.get("node") for edge in connection.get("edges") or []]
        orders = parse_orders(nodes)

        raw_info = connection.get("pageInfo") or {}
        page_info = PageInfo(
            has_next_page=bool(raw_info.get("hasNextPage")),
            has_previous_page=bool(raw_info.get("hasPreviousPage")),
            start_cursor=raw_info.get("startCursor"),
            end_cursor=raw_info.get("endCursor"),
        )
        total = self.count_orders(filters) if include_count else len(orders)
        return OrdersPage(orders=orders, page_info=page_info, total_count=total)

    def fetch_orders(
        self,
        filters: OrderFilters | None = None,
        limit: int | None = None,
        sort_key: str | None = None,
        reverse: bool = True,
    ) -> list[Order]:
        """Follow pagination cursors until all matching orders are fetched.

        Args:
            filters: Search criteria translated to Shopify query syntax.
            limit: Stop after this many orders; None fetches every page.
            sort_key: See fetch_page().
            reverse: See fetch_page().

        Returns:
            List of Order objects in the requested sort order.
        """
        orders: list[Order] = []
        after = None
        while limit is None or len(orders) < limit:
            first = PAGE_SIZE if limit is None else min(PAGE_SIZE, limit - len(orders))
            page = self.fetch_page(filters, first=first, after=after,
                                   sort_key=sort_key, reverse=reverse, include_count=False)
            orders.extend(page.orders)
            logger.debug("Fetched %d order(s), %d so far", len(page.orders), len(orders))
            if not page.page_info.has_next_page or not page.page_info.end_cursor:
                break
            after = page.page_info.end_cursor
        return orders if limit is None else orders[:limit]

    def fetch_order_by_id(self, order_id: str | int) -> Order | None:
        """Fetch one order, or None if Shopify does not know the id."""
        data = self._graphql(ORDER_BY_ID_QUERY, {"id": order_gid(order_id)})
        node = data.get("order")
        if not node:
            return None
        return parse_order(node)

    def fetch_orders_by_ids(self, order_ids: list[str]) -> list[Order]:
        orders: list[Order] = []
        for order_id in order_ids:
            order = self.fetch_order_by_id(order_id)
            if order is None:
                logger.warning("Order %s not found; skipping", order_id)
                continue
            orders.append(order)
        return orders
