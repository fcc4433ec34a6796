"""Top-level export entry point: orders in, downloadable file out."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timezone

from order_export.errors import ConfigurationError, ExportFailedError
from order_export.models import ExportFormat, ExportOptions, Order
from order_export.rows import collect_rows
from order_export.serializers import serialize

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "shopify-orders"

CONTENT_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@dataclass(frozen=True)
class ExportResult:
    """A finished export ready to be streamed to the user."""

    buffer: bytes
    filename: str
    content_type: str
    row_count: int
    skipped_orders: int = 0


def export_filename(fmt: ExportFormat | str, today: date | None = None) -> str:
    """Return e.g. "shopify-orders-2024-05-10.xlsx"."""
    fmt = ExportFormat(fmt)
    today = today or datetime.now(timezone.utc).date()
    return f"{FILENAME_PREFIX}-{today.isoformat()}.{fmt.value}"


def content_type(fmt: ExportFormat | str) -> str:
    return CONTENT_TYPES[ExportFormat(fmt)]


def export_orders(
    orders: Iterable[Order],
    options: ExportOptions,
    today: date | None = None,
) -> ExportResult:
    """Build rows for the orders and serialize them in the requested format.

    Args:
        orders: Fully materialized order snapshots.
        options: Output format and column-group toggles.
        today: Date used in the filename. Defaults to the current UTC date.

    Returns:
        ExportResult with the payload, filename and content type.

    Raises:
        ConfigurationError: If options is not an ExportOptions.
        ExportFailedError: If the payload could not be serialized.
    """
    if not isinstance(options, ExportOptions):
        raise ConfigurationError(f"Expected ExportOptions, got {type(options).__name__}")

    batch = collect_rows(orders, options)
    try:
        buffer = serialize(batch.rows, options.format)
    except Exception as exc:
        logger.error("Export serialization failed: %s", exc)
        raise ExportFailedError("Failed to export orders") from exc

    logger.info(
        "Exported %d row(s) as %s (%d order(s) skipped)",
        len(batch.rows), options.format.value, len(batch.skipped),
    )
    return ExportResult(
        buffer=buffer,
        filename=export_filename(options.format, today),
        content_type=content_type(options.format),
        row_count=len(batch.rows),
        skipped_orders=len(batch.skipped),
    )
