"""Schemas for analytics queries."""
from datetime import datetime
from pydantic import BaseModel, field_validator
from typing import Any, Dict, Optional

from app.constants import EventType, MetricType, PeriodType
from app.utils.dates import to_naive_utc
from app.utils.serialization import serialize_datetime, serialize_uuid


class DateRange(BaseModel):
    """Inclusive date bounds shared by every analytics filter."""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class EventFilters(DateRange):
    event_type: Optional[EventType] = None
    event_name: Optional[str] = None
    device_id: Optional[str] = None  # Client identifier, not the row id
    platform: Optional[str] = None


class DeviceFilters(DateRange):
    platform: Optional[str] = None


class MetricFilters(DateRange):
    metric_type: Optional[MetricType] = None
    period: Optional[PeriodType] = None


class EventResponse(BaseModel):
    id: str
    project_id: str
    device_id: str
    event_type: str
    event_name: str
    parameters: Dict[str, Any]
    timestamp: Optional[str]
    received_at: Optional[str]

    @classmethod
    def from_orm(cls, obj) -> "EventResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=serialize_uuid(obj.id),
            project_id=serialize_uuid(obj.project_id),
            device_id=serialize_uuid(obj.device_id),
            event_type=obj.event_type,
            event_name=obj.event_name,
            parameters=obj.parameters or {},
            timestamp=serialize_datetime(obj.timestamp),
            received_at=serialize_datetime(obj.received_at),
        )


class DeviceResponse(BaseModel):
    id: str
    project_id: str
    device_id: str
    platform: str
    os_version: str
    app_version: str
    first_seen: Optional[str]
    last_seen: Optional[str]
    ip_address: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def from_orm(cls, obj) -> "DeviceResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=serialize_uuid(obj.id),
            project_id=serialize_uuid(obj.project_id),
            device_id=obj.device_id,
            platform=obj.platform,
            os_version=obj.os_version,
            app_version=obj.app_version,
            first_seen=serialize_datetime(obj.first_seen),
            last_seen=serialize_datetime(obj.last_seen),
            ip_address=obj.ip_address or None,
            country=obj.country or None,
        )


class MetricResponse(BaseModel):
    id: str
    project_id: str
    metric_type: str
    period: str
    period_start: Optional[str]
    value: float
    dimensions: Dict[str, Any]

    @classmethod
    def from_orm(cls, obj) -> "MetricResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=serialize_uuid(obj.id),
            project_id=serialize_uuid(obj.project_id),
            metric_type=obj.metric_type,
            period=obj.period,
            period_start=serialize_datetime(obj.period_start),
            value=obj.value,
            dimensions=obj.dimensions or {},
        )
