"""Order snapshots and export configuration shared across the export pipeline."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from order_export.errors import ConfigurationError


@dataclass(frozen=True)
class Money:
    """A decimal amount paired with its ISO 4217 currency code."""

    amount: str | None = None
    currency_code: str | None = None


@dataclass(frozen=True)
class Address:
    """A postal address attached to an order."""

    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    province: str | None = None
    zip: str | None = None
    country: str | None = None

    @property
    def name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


@dataclass(frozen=True)
class Customer:
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


@dataclass(frozen=True)
class LineItem:
    """A single purchased product line within an order."""

    title: str
    quantity: int = 0
    variant_title: str | None = None
    sku: str | None = None
    unit_price: Money | None = None
    discounted_total: Money | None = None


@dataclass(frozen=True)
class TrackingInfo:
    company: str | None = None
    number: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class Fulfillment:
    """One shipment covering some of an order's line items."""

    status: str
    created_at: datetime | None = None
    display_status: str | None = None
    delivered_at: datetime | None = None
    estimated_delivery_at: datetime | None = None
    tracking_info: tuple[TrackingInfo, ...] = ()


@dataclass(frozen=True)
class Order:
    """A read-only order snapshot as returned by the commerce platform."""

    id: str
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    financial_status: str | None = None
    fulfillment_status: str | None = None
    total_price: Money | None = None
    subtotal_price: Money | None = None
    total_shipping: Money | None = None
    total_tax: Money | None = None
    total_discounts: Money | None = None
    total_refunded: Money | None = None
    customer: Customer | None = None
    shipping_address: Address | None = None
    billing_address: Address | None = None
    line_items: tuple[LineItem, ...] = ()
    fulfillments: tuple[Fulfillment, ...] = ()
    note: str | None = None
    tags: tuple[str, ...] = ()


class ExportFormat(str, Enum):
    """Supported spreadsheet encodings."""

    XLSX = "xlsx"
    CSV = "csv"


_TRUTHY = {"true", "1", "yes", "on"}


@dataclass(frozen=True)
class ExportOptions:
    """Per-export configuration: output encoding plus column-group toggles."""

    format: ExportFormat | str = ExportFormat.XLSX
    include_line_items: bool = False
    include_fulfillments: bool = False
    include_addresses: bool = False

    def __post_init__(self):
        # Accept plain strings such as "csv" so callers can pass raw input.
        if isinstance(self.format, ExportFormat):
            return
        try:
            fmt = ExportFormat(str(self.format).lower())
        except ValueError:
            supported = ", ".join(f.value for f in ExportFormat)
            raise ConfigurationError(
                f"Unsupported export format {self.format!r}; expected one of: {supported}."
            ) from None
        object.__setattr__(self, "format", fmt)

    @classmethod
    def from_form(cls, form: Mapping[str, object]) -> "ExportOptions":
        """Build options from submitted form fields.

        Args:
            form: Mapping with a "format" field and "true"/"false" strings for
                  includeLineItems, includeFulfillments and includeAddresses.

        Returns:
            A validated ExportOptions instance.
        """

        def flag(key: str) -> bool:
            return str(form.get(key, "")).strip().lower() in _TRUTHY

        return cls(
            format=form.get("format") or ExportFormat.XLSX,
            include_line_items=flag("includeLineItems"),
            include_fulfillments=flag("includeFulfillments"),
            include_addresses=flag("includeAddresses"),
        )
