"""
Data models for the Cloud Functions Fleet Tool.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

UNSPECIFIED_STATUS = "CLOUD_FUNCTION_STATUS_UNSPECIFIED"

_RFC3339_FRACTION = re.compile(r"\.(\d+)")


class TriggerKind(Enum):
    """How a function is invoked."""

    HTTPS = "HTTPS"
    EVENT = "Event"
    UNKNOWN = "Unknown"

    @classmethod
    def classify(cls, resource: Dict[str, Any]) -> "TriggerKind":
        """Classify a v1 function resource; an HTTPS trigger takes priority."""
        if resource.get("httpsTrigger") is not None:
            return cls.HTTPS
        if resource.get("eventTrigger") is not None:
            return cls.EVENT
        return cls.UNKNOWN


def short_name(resource_name: str) -> str:
    """Return the trailing id of a resource name (projects/.../functions/<id>)."""
    return resource_name.rstrip("/").split("/")[-1]


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an RFC 3339 timestamp as returned by Google APIs.

    Fractional seconds may carry nanosecond precision; they are truncated
    to microseconds.

    Args:
        value: Timestamp string, e.g. '2024-03-01T12:00:00.123456789Z'

    Returns:
        Timezone-aware UTC datetime, or None when value is empty

    Raises:
        ValueError: If the string is not a valid timestamp
    """
    if not value:
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _RFC3339_FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_rfc3339(value: Optional[datetime]) -> str:
    """Format a datetime as RFC 3339 (UTC, second precision)."""
    if value is None:
        return "n/a"
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class FunctionRecord:
    """Read-only projection of a deployed Cloud Function."""

    name: str  # function id
    full_name: str  # projects/.../locations/.../functions/...
    status: str
    runtime: str
    trigger: TriggerKind
    update_time: Optional[datetime] = None
    version: Optional[str] = None  # from the "version" label
    url: Optional[str] = None  # HTTPS trigger only
    source: Optional[str] = None  # source archive URL

    @classmethod
    def from_api(cls, resource: Dict[str, Any]) -> "FunctionRecord":
        """
        Build a record from a Cloud Functions v1 resource document.

        Args:
            resource: Function resource as returned by the REST API

        Returns:
            FunctionRecord instance
        """
        full_name = resource.get("name", "")
        labels = resource.get("labels") or {}
        https_trigger = resource.get("httpsTrigger") or {}

        try:
            update_time = parse_timestamp(resource.get("updateTime"))
        except ValueError:
            update_time = None  # reported as n/a

        return cls(
            name=short_name(full_name),
            full_name=full_name,
            status=resource.get("status") or UNSPECIFIED_STATUS,
            runtime=resource.get("runtime", ""),
            trigger=TriggerKind.classify(resource),
            update_time=update_time,
            version=labels.get("version") or None,
            url=https_trigger.get("url") or None,
            source=resource.get("sourceArchiveUrl") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly projection used by --output json."""
        return {
            "name": self.name,
            "status": self.status,
            "runtime": self.runtime,
            "trigger": self.trigger.value,
            "updateTime": format_rfc3339(self.update_time)
            if self.update_time
            else None,
            "version": self.version or "",
        }
