"""Outbound connectors: checkout export and calendar providers."""

from grocerygo.connectors.base import ConnectorError, ConnectorResponse
from grocerygo.connectors.calendars import (
    CalendarError,
    CalendarEvent,
    CalendarProvider,
    GoogleCalendarProvider,
    busy_days,
)
from grocerygo.connectors.checkout import CheckoutClient, CheckoutError, LineItem, to_line_items

__all__ = [
    "CalendarError",
    "CalendarEvent",
    "CalendarProvider",
    "CheckoutClient",
    "CheckoutError",
    "ConnectorError",
    "ConnectorResponse",
    "GoogleCalendarProvider",
    "LineItem",
    "busy_days",
    "to_line_items",
]
