"""Read-only calendar providers used as scheduling signals.

Connections are made elsewhere; a provider here receives an access token
that is already valid and only lists events. Token refresh is the caller's
concern.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

import httpx

from grocerygo.config import get_settings
from grocerygo.connectors.base import ConnectorError, HttpConnector
from grocerygo.logging_config import get_logger
from grocerygo.plan.calendar import week_dates

logger = get_logger(__name__)


class CalendarError(ConnectorError):
    """Raised when events cannot be fetched from a calendar provider."""


@dataclass
class CalendarEvent:
    """An event on a user's external calendar."""

    id: str
    title: str
    start: datetime
    end: datetime
    is_all_day: bool
    source: str

    def days(self) -> list[date]:
        """Calendar days the event touches (all-day end dates are exclusive)."""
        first = self.start.date()
        last = self.end.date()
        if self.is_all_day:
            last -= timedelta(days=1)
        elif self.end.time() == datetime.min.time() and last > first:
            last -= timedelta(days=1)
        last = max(first, last)
        return [first + timedelta(days=i) for i in range((last - first).days + 1)]


class CalendarProvider(ABC):
    """Uniform read interface over external calendars."""

    @property
    @abstractmethod
    def source(self) -> str:
        """Provider identifier, e.g. "google"."""
        pass

    @abstractmethod
    async def fetch_events(self, start: date, end: date) -> list[CalendarEvent]:
        """
        List events between two dates.

        Args:
            start: First day to include.
            end: Last day to include.

        Returns:
            Events ordered by start time.
        """
        pass


def _parse_event_time(value: dict[str, Any] | None) -> tuple[datetime | None, bool]:
    """Parse a Google event start/end object into (datetime, is_all_day)."""
    if not isinstance(value, dict):
        return None, False
    if value.get("dateTime"):
        return datetime.fromisoformat(str(value["dateTime"]).replace("Z", "+00:00")), False
    if value.get("date"):
        return datetime.fromisoformat(str(value["date"])), True
    return None, False


class GoogleCalendarProvider(HttpConnector, CalendarProvider):
    """Google Calendar events for the user's primary calendar."""

    error_class = CalendarError

    def __init__(
        self,
        access_token: str,
        calendar_id: str = "primary",
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.access_token = access_token
        self.calendar_id = calendar_id
        self.base_url = base_url or settings.google_calendar_base_url
        super().__init__(
            timeout=settings.calendar_timeout,
            headers={"Authorization": f"Bearer {access_token}"},
            transport=transport,
        )

    @property
    def source(self) -> str:
        return "google"

    async def fetch_events(self, start: date, end: date) -> list[CalendarEvent]:
        url = f"{self.base_url}/calendars/{self.calendar_id}/events"
        params = {
            "timeMin": f"{start.isoformat()}T00:00:00Z",
            "timeMax": f"{(end + timedelta(days=1)).isoformat()}T00:00:00Z",
            "singleEvents": "true",
            "orderBy": "startTime",
        }

        logger.info(f"Fetching Google calendar events {start} to {end}")
        response = await self._request("GET", url, params=params)

        if not isinstance(response.data, dict):
            raise CalendarError("Unexpected calendar response body", response=str(response.data)[:500])

        events: list[CalendarEvent] = []
        for item in response.data.get("items") or []:
            if not isinstance(item, dict):
                continue
            try:
                event_start, is_all_day = _parse_event_time(item.get("start"))
                event_end, _ = _parse_event_time(item.get("end"))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping calendar event {item.get('id')} with unreadable time: {e}")
                continue
            if event_start is None:
                continue
            events.append(
                CalendarEvent(
                    id=item.get("id") or str(uuid.uuid4()),
                    title=item.get("summary") or "(No title)",
                    start=event_start,
                    end=event_end or event_start,
                    is_all_day=is_all_day,
                    source=self.source,
                )
            )

        logger.info(f"Fetched {len(events)} calendar events")
        return events


def busy_days(events: list[CalendarEvent], week_of: date) -> dict[date, list[CalendarEvent]]:
    """Group events onto the seven days of a plan's week; days without events map to []."""
    days: dict[date, list[CalendarEvent]] = {day: [] for day in week_dates(week_of)}
    for event in events:
        for day in event.days():
            if day in days:
                days[day].append(event)
    return days
