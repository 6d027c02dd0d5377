"""Event value object passed to the scoring engine."""
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional
from suitability import SuitabilityAnalysis

# Changing any of these invalidates a stored weather analysis.
ANALYZED_FIELDS = ("location", "date", "event_type")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValueError(f"Invalid date format {value!r}. Use YYYY-MM-DD") from exc


@dataclass
class Event:
    name: str
    location: str
    date: date
    event_type: str = "general"
    description: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    weather_analysis: Optional[SuitabilityAnalysis] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        """Build an event from a loosely-typed mapping (date as YYYY-MM-DD or date)."""
        event_date = data["date"]
        if isinstance(event_date, str):
            event_date = parse_date(event_date)
        kwargs = {
            "name": data["name"],
            "location": data["location"],
            "date": event_date,
            "event_type": data.get("event_type", data.get("eventType", "general")),
            "description": data.get("description") or "",
        }
        if data.get("id"):
            kwargs["id"] = data["id"]
        return cls(**kwargs)

    def update(self, **changes: Any) -> None:
        """
        Apply field changes; id and created_at are never overwritten.

        A stored weather analysis is dropped when the location, date or
        event type changes, unless the caller supplies a new one.
        """
        for key, value in changes.items():
            if key in ("id", "created_at"):
                continue
            if not hasattr(self, key):
                raise AttributeError(f"Event has no field {key!r}")
            setattr(self, key, value)
        if "weather_analysis" not in changes and any(key in changes for key in ANALYZED_FIELDS):
            self.weather_analysis = None
        self.updated_at = _now()

    def analysis_is_current(self) -> bool:
        """True when the stored analysis was made for the event's present location, date and type."""
        analysis = self.weather_analysis
        return (
            analysis is not None
            and analysis.location == self.location
            and analysis.event_date == self.date
            and analysis.event_type == self.event_type
        )
