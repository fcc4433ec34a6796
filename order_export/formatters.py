"""Human-readable renderings of raw order fields.

All output is produced in a fixed reference locale (en_US) and timezone (UTC)
so that the same order exports identically on every machine.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from babel.dates import format_datetime
from babel.numbers import format_currency

from order_export.models import Address

logger = logging.getLogger(__name__)

LOCALE = "en_US"
DEFAULT_CURRENCY = "USD"
TIMESTAMP_PATTERN = "MMM d, y, hh:mm a"
ADDRESS_SEPARATOR = ", "


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Return an aware UTC datetime, or None when the value is absent or unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Ignoring unparseable timestamp %r", value)
            return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime | str | None) -> str:
    """Render a timestamp as e.g. "May 10, 2024, 02:30 PM" (UTC), or "" if absent."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return ""
    return format_datetime(parsed, TIMESTAMP_PATTERN, locale=LOCALE)


def format_money(amount: str | None, currency_code: str | None) -> str:
    """Render a decimal amount in its own currency.

    Args:
        amount: Decimal amount as a string, e.g. "19.99".
        currency_code: ISO 4217 code. Falls back to USD when absent.

    Returns:
        The formatted amount, e.g. "$19.99", or "" when the amount is absent
        or cannot be parsed as a finite number.
    """
    if amount is None or str(amount).strip() == "":
        return ""
    try:
        number = Decimal(str(amount).strip())
    except InvalidOperation:
        logger.debug("Ignoring unparseable amount %r", amount)
        return ""
    if not number.is_finite():
        return ""
    currency = (currency_code or "").strip().upper() or DEFAULT_CURRENCY
    try:
        return format_currency(number, currency, locale=LOCALE)
    except ArithmeticError:
        # Amounts too large to quantize to the currency precision.
        logger.debug("Cannot format amount %r in %s", amount, currency)
        return ""


def format_address(address: Address | None) -> str:
    if address is None:
        return ""
    parts = [
        address.name,
        address.company,
        address.address1,
        address.address2,
        address.city,
        address.province,
        address.zip,
        address.country,
    ]
    return ADDRESS_SEPARATOR.join(p.strip() for p in parts if p and p.strip())
