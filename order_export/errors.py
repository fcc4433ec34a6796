"""Exceptions raised by the order export pipeline."""


class ExportError(Exception):
    """Base class for all export errors."""


class ConfigurationError(ExportError, ValueError):
    """Export options are invalid; raised before any rows are built."""


class MalformedOrderError(ExportError):
    """A single order record is missing required data."""


class ExportFailedError(ExportError):
    """The export as a whole could not be produced."""


class ShopifyQueryError(ExportError):
    """The Shopify GraphQL API answered with an errors payload."""

    def __init__(self, messages: list[str]):
        self.messages = messages
        super().__init__("Failed to fetch orders: " + ", ".join(messages))
