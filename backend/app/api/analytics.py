"""Dashboard analytics endpoints."""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth.dependencies import get_analytics_context
from app.auth.principal import RequestContext
from app.constants import API_V1_PREFIX, EventType, MetricType, PeriodType
from app.database import get_db
from app.schemas.analytics import (
    DeviceFilters,
    DeviceResponse,
    EventFilters,
    EventResponse,
    MetricFilters,
    MetricResponse,
)
from app.services.analytics import AnalyticsService, Page

router = APIRouter(prefix=f"{API_V1_PREFIX}/dashboard/analytics", tags=["analytics"])


@router.get("/metrics", response_model=list[MetricResponse])
def get_metrics(
    project_id: Optional[str] = Query(None),
    metric_type: Optional[MetricType] = Query(None),
    period: Optional[PeriodType] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    ctx: RequestContext = Depends(get_analytics_context),
    db: Session = Depends(get_db),
) -> list[MetricResponse]:
    """
    List pre-aggregated metrics for a project, oldest period first.

    Args:
        project_id: Required for dashboard users; optional with an API key
        metric_type: Only this metric
        period: Only this aggregation period
        start_date: Earliest period start
        end_date: Latest period start
        ctx: Request context
        db: Database session

    Returns:
        Matching metrics
    """
    service = AnalyticsService(db)
    resolved = service.resolve_project_id(ctx.principal, project_id)
    filters = MetricFilters(metric_type=metric_type, period=period, start_date=start_date, end_date=end_date)
    return [MetricResponse.from_orm(m) for m in service.query_metrics(resolved, filters)]


@router.get("/events", response_model=list[EventResponse])
def get_events(
    project_id: Optional[str] = Query(None),
    event_type: Optional[EventType] = Query(None),
    event_name: Optional[str] = Query(None),
    device_id: Optional[str] = Query(None, description="Client device identifier"),
    platform: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    ctx: RequestContext = Depends(get_analytics_context),
    db: Session = Depends(get_db),
) -> list[EventResponse]:
    """
    List raw events, most recently received first.

    Limit defaults to 100 and is capped at 1000.
    """
    service = AnalyticsService(db)
    resolved = service.resolve_project_id(ctx.principal, project_id)
    filters = EventFilters(
        event_type=event_type,
        event_name=event_name,
        device_id=device_id,
        platform=platform,
        start_date=start_date,
        end_date=end_date,
    )
    events = service.query_events(resolved, filters, Page.normalize(limit, offset))
    return [EventResponse.from_orm(e) for e in events]


@router.get("/devices", response_model=list[DeviceResponse])
def get_devices(
    project_id: Optional[str] = Query(None),
    platform: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, description="Devices first seen on or after"),
    end_date: Optional[datetime] = Query(None, description="Devices last seen on or before"),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    ctx: RequestContext = Depends(get_analytics_context),
    db: Session = Depends(get_db),
) -> list[DeviceResponse]:
    service = AnalyticsService(db)
    resolved = service.resolve_project_id(ctx.principal, project_id)
    filters = DeviceFilters(platform=platform, start_date=start_date, end_date=end_date)
    devices = service.query_devices(resolved, filters, Page.normalize(limit, offset))
    return [DeviceResponse.from_orm(d) for d in devices]
