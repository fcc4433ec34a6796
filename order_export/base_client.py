"""Abstract base class for order sources feeding the exporter."""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from order_export.models import Order
from order_export.normalize import parse_orders
from order_export.queries import OrderFilters


class OrderSource(ABC):
    """Base class that all order sources must implement."""

    @abstractmethod
    def fetch_orders(
        self,
        filters: OrderFilters | None = None,
        limit: int | None = None,
    ) -> list[Order]:
        """Fetch fully materialized orders.

        Args:
            filters: Search criteria applied by the source.
            limit: Maximum number of orders to return; None means all.

        Returns:
            List of Order snapshots, malformed records already dropped.
        """


class JsonFileSource(OrderSource):
    """Orders saved as raw Shopify GraphQL nodes in a JSON file.

    Accepts a list of nodes, ``{"orders": [...]}``, or a complete GraphQL
    response (``data.orders.edges[].node``).
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load_nodes(self) -> list[dict]:
        with self.path.open(encoding="utf-8") as f:
            payload = json.load(f)

        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict):
            if isinstance(payload.get("orders"), list):
                return payload["orders"]
            connection = (payload.get("data") or {}).get("orders") or {}
            if "edges" in connection:
                return [edge.get("node") for edge in connection["edges"]]
            if "nodes" in connection:
                return connection["nodes"]
        raise ValueError(f"{self.path} does not contain a list of orders.")

    def fetch_orders(
        self,
        filters: OrderFilters | None = None,
        limit: int | None = None,
    ) -> list[Order]:
        if filters is not None and not filters.is_empty():
            raise ValueError("Filters are only supported when fetching from Shopify.")
        orders = parse_orders(self._load_nodes())
        return orders if limit is None else orders[:limit]
