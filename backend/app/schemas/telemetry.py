"""Schemas for SDK telemetry ingestion."""
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional

from app.constants import EventType
from app.utils.dates import to_naive_utc


class DeviceInfo(BaseModel):
    """Device fields every SDK request carries."""
    device_id: str = Field(..., min_length=1, description="Client-generated device identifier")
    platform: str = Field(..., min_length=1, description="iOS, Android, Windows, ...")
    os_version: str = Field(..., min_length=1)
    app_version: str = Field(..., min_length=1)


class EventPayload(DeviceInfo):
    """A single telemetry event as sent by the SDK."""
    event_type: EventType
    event_name: str = Field(..., min_length=1)
    parameters: Optional[Dict[str, Any]] = None
    timestamp: Optional[datetime] = Field(None, description="Client time; server time if omitted")

    @field_validator("timestamp")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class EventBatchRequest(BaseModel):
    """Request schema for /sdk/events."""
    events: List[EventPayload] = Field(..., min_length=1)


class SessionEventRequest(DeviceInfo):
    """Body of /sdk/session/start and /sdk/session/end; the type is fixed by the route."""
    event_name: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    timestamp: Optional[datetime] = None

    @field_validator("timestamp")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

    def to_payload(self, event_type: EventType) -> EventPayload:
        return EventPayload(
            device_id=self.device_id,
            platform=self.platform,
            os_version=self.os_version,
            app_version=self.app_version,
            event_type=event_type,
            event_name=self.event_name or event_type.value,
            parameters=self.parameters,
            timestamp=self.timestamp,
        )


class InstallationRequest(DeviceInfo):
    """Request schema for /sdk/installation."""
    properties: Optional[Dict[str, Any]] = None


class IngestResponse(BaseModel):
    """Response schema for ingestion endpoints."""
    message: str
    count: int = 1
