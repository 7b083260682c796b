"""Read-only analytics over events, devices and pre-aggregated metrics."""
import uuid
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

from app.auth.access import AccessControl, AccessLevel
from app.auth.principal import Principal, ProjectPrincipal
from app.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from app.models import Device, Event, Metric
from app.schemas.analytics import DeviceFilters, EventFilters, MetricFilters
from app.utils.db import active, parse_uuid
from app.utils.exceptions import AuthorizationError, ValidationError


@dataclass(frozen=True)
class Page:
    limit: int = DEFAULT_PAGE_LIMIT
    offset: int = 0

    @classmethod
    def normalize(cls, limit: Optional[int] = None, offset: Optional[int] = None) -> "Page":
        """Non-positive limits fall back to the default, large ones are clamped."""
        if limit is None or limit <= 0:
            limit = DEFAULT_PAGE_LIMIT
        elif limit > MAX_PAGE_LIMIT:
            limit = MAX_PAGE_LIMIT
        if offset is None or offset < 0:
            offset = 0
        return cls(limit=limit, offset=offset)


class AnalyticsService:
    """Project-scoped queries. Callers resolve the project id first."""

    def __init__(self, db: Session, access: Optional[AccessControl] = None):
        self.db = db
        self.access = access or AccessControl(db)

    def resolve_project_id(self, principal: Principal, project_id: Optional[str]) -> uuid.UUID:
        """
        Pick the project a query runs against.

        API-key callers are pinned to their own project. Users must name a
        project they can read.
        """
        if isinstance(principal, ProjectPrincipal):
            if project_id and parse_uuid(project_id, "project ID") != principal.project_id:
                raise AuthorizationError("Access denied: API key does not belong to this project")
            return principal.project_id

        if not project_id:
            raise ValidationError("Project ID is required")
        project = self.access.require_project(principal, project_id, AccessLevel.READ)
        return project.id

    def query_events(self, project_id: uuid.UUID, filters: EventFilters, page: Page) -> List[Event]:
        query = active(self.db.query(Event), Event).filter(Event.project_id == project_id)

        if filters.event_type:
            query = query.filter(Event.event_type == filters.event_type.value)
        if filters.event_name:
            query = query.filter(Event.event_name == filters.event_name)
        if filters.start_date:
            query = query.filter(Event.timestamp >= filters.start_date)
        if filters.end_date:
            query = query.filter(Event.timestamp <= filters.end_date)

        if filters.device_id:
            device = active(self.db.query(Device), Device).filter(
                Device.project_id == project_id,
                Device.device_id == filters.device_id,
            ).first()
            if device is None:
                return []
            query = query.filter(Event.device_id == device.id)

        if filters.platform:
            query = query.join(Device, Event.device_id == Device.id).filter(Device.platform == filters.platform)

        return (
            query.order_by(Event.received_at.desc(), Event.timestamp.desc())
            .limit(page.limit)
            .offset(page.offset)
            .all()
        )

    def query_devices(self, project_id: uuid.UUID, filters: DeviceFilters, page: Page) -> List[Device]:
        query = active(self.db.query(Device), Device).filter(Device.project_id == project_id)

        if filters.platform:
            query = query.filter(Device.platform == filters.platform)
        if filters.start_date:
            query = query.filter(Device.first_seen >= filters.start_date)
        if filters.end_date:
            query = query.filter(Device.last_seen <= filters.end_date)

        return query.order_by(Device.last_seen.desc()).limit(page.limit).offset(page.offset).all()

    def query_metrics(self, project_id: uuid.UUID, filters: MetricFilters) -> List[Metric]:
        query = active(self.db.query(Metric), Metric).filter(Metric.project_id == project_id)

        if filters.metric_type:
            query = query.filter(Metric.metric_type == filters.metric_type.value)
        if filters.period:
            query = query.filter(Metric.period == filters.period.value)
        if filters.start_date:
            query = query.filter(Metric.period_start >= filters.start_date)
        if filters.end_date:
            query = query.filter(Metric.period_start <= filters.end_date)

        return query.order_by(Metric.period_start.asc()).all()
