#!/usr/bin/env python3
"""CLI entry point for exporting Shopify orders to a spreadsheet."""

import argparse
import logging
import sys
from pathlib import Path

from order_export.base_client import JsonFileSource, OrderSource
from order_export.errors import ExportError
from order_export.exporter import export_orders
from order_export.models import ExportFormat, ExportOptions, Order
from order_export.queries import SORT_KEYS, OrderFilters


def _build_source(args) -> OrderSource:
    """Instantiate the order source chosen on the command line.

    Args:
        args: Parsed argparse namespace.

    Returns:
        A JsonFileSource when --input is given, otherwise a ShopifyClient.
    """
    if args.input:
        return JsonFileSource(args.input)

    from order_export.shopify_client import ShopifyClient
    return ShopifyClient(
        store_url=args.store_url,
        access_token=args.access_token,
        api_version=args.api_version,
    )


def _build_filters(args) -> OrderFilters:
    return OrderFilters(
        order_id=args.order,
        date_from=args.date_from,
        date_to=args.date_to,
        fulfillment_status=args.fulfillment_status,
        financial_status=args.financial_status,
        status=args.status,
    )


def _fetch(source: OrderSource, args) -> list[Order]:
    if args.ids:
        if not hasattr(source, "fetch_orders_by_ids"):
            raise ValueError("--ids is only supported when fetching from Shopify.")
        return source.fetch_orders_by_ids(args.ids)
    if args.input:
        return source.fetch_orders(_build_filters(args), limit=args.limit)
    return source.fetch_orders(
        _build_filters(args),
        limit=args.limit,
        sort_key=args.sort,
        reverse=not args.oldest_first,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Export Shopify orders with delivery and tracking detail to xlsx or csv.",
    )
    parser.add_argument(
        "--format",
        default=ExportFormat.XLSX.value,
        choices=[f.value for f in ExportFormat],
        help='Output format (default: "xlsx").',
    )
    parser.add_argument(
        "--output", "-o",
        metavar="FILE",
        help="Write the export here (default: shopify-orders-<date>.<format>).",
    )
    parser.add_argument(
        "--line-items",
        action="store_true",
        help="Emit one row per line item instead of one per order.",
    )
    parser.add_argument(
        "--fulfillments",
        action="store_true",
        help="Include carrier, tracking and delivery date columns.",
    )
    parser.add_argument(
        "--addresses",
        action="store_true",
        help="Include shipping and billing address columns.",
    )
    parser.add_argument(
        "--input",
        metavar="FILE",
        help="Read raw order JSON from a file instead of calling Shopify.",
    )
    parser.add_argument("--limit", type=int, help="Maximum number of orders to export.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")

    # Shopify connection.
    shopify_group = parser.add_argument_group("Shopify options")
    shopify_group.add_argument(
        "--store-url",
        help="Shopify store URL (overrides SHOPIFY_STORE_URL env var).",
    )
    shopify_group.add_argument(
        "--access-token",
        help="Admin API access token (overrides SHOPIFY_ACCESS_TOKEN env var).",
    )
    shopify_group.add_argument(
        "--api-version",
        help="Admin API version (overrides SHOPIFY_API_VERSION env var).",
    )
    shopify_group.add_argument(
        "--ids",
        nargs="+",
        metavar="ID",
        help="Export exactly these order ids instead of searching.",
    )
    shopify_group.add_argument(
        "--sort",
        default="createdAt",
        choices=sorted(SORT_KEYS),
        help='Sort column (default: "createdAt").',
    )
    shopify_group.add_argument(
        "--oldest-first",
        action="store_true",
        help="Sort ascending instead of newest first.",
    )

    # Filters applied by Shopify search.
    filter_group = parser.add_argument_group("Filters")
    filter_group.add_argument("--order", help='Order number search, e.g. "1001".')
    filter_group.add_argument("--from", dest="date_from", help="Created on or after (YYYY-MM-DD).")
    filter_group.add_argument("--to", dest="date_to", help="Created on or before (YYYY-MM-DD).")
    filter_group.add_argument(
        "--fulfillment-status",
        help='Comma-separated fulfillment statuses, e.g. "shipped,unshipped".',
    )
    filter_group.add_argument(
        "--financial-status",
        help='Comma-separated financial statuses, e.g. "paid,refunded".',
    )
    filter_group.add_argument("--status", help='Order status, e.g. "open" or "closed".')
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        options = ExportOptions(
            format=args.format,
            include_line_items=args.line_items,
            include_fulfillments=args.fulfillments,
            include_addresses=args.addresses,
        )
        source = _build_source(args)
        print("Reading orders from file..." if args.input else "Fetching orders from Shopify...")
        orders = _fetch(source, args)
    except (ValueError, OSError, ExportError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not orders:
        print("No orders found.")
        return 0

    print(f"Found {len(orders)} order(s).")

    try:
        result = export_orders(orders, options)
        path = Path(args.output or result.filename)
        path.write_bytes(result.buffer)
    except (ExportError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Exported {result.row_count} row(s) to {path}")
    if result.skipped_orders:
        print(f"Warning: {result.skipped_orders} malformed order(s) were skipped.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
