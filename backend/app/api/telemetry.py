"""SDK telemetry ingestion endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.api_key import get_sdk_context
from app.auth.principal import RequestContext
from app.constants import API_V1_PREFIX, INSTALLATION_EVENT_NAME, EventType
from app.database import get_db
from app.schemas.telemetry import (
    EventBatchRequest,
    EventPayload,
    IngestResponse,
    InstallationRequest,
    SessionEventRequest,
)
from app.services.ingestion import IngestionService

router = APIRouter(prefix=f"{API_V1_PREFIX}/sdk", tags=["sdk"])


@router.post("/event", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
def record_event(
    request: EventPayload,
    ctx: RequestContext = Depends(get_sdk_context),
    db: Session = Depends(get_db),
) -> IngestResponse:
    """
    Record a single event from the SDK.

    The device is registered on first sight and refreshed afterwards.
    Requires API key to identify project.

    Args:
        request: Event payload with device info
        ctx: Request context carrying the project
        db: Database session

    Returns:
        Ingest response
    """
    IngestionService(db).ingest(ctx.principal.project_id, request, ctx.client_ip)
    return IngestResponse(message="Event recorded successfully")


@router.post("/events", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
def record_events(
    request: EventBatchRequest,
    ctx: RequestContext = Depends(get_sdk_context),
    db: Session = Depends(get_db),
) -> IngestResponse:
    """
    Record a batch of events atomically.

    Either every event in the batch is stored or none is. An invalid
    element fails validation before anything is written.
    """
    count = IngestionService(db).ingest_batch(ctx.principal.project_id, request.events, ctx.client_ip)
    return IngestResponse(message="Events recorded successfully", count=count)


@router.post("/session/start", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
def start_session(
    request: SessionEventRequest,
    ctx: RequestContext = Depends(get_sdk_context),
    db: Session = Depends(get_db),
) -> IngestResponse:
    payload = request.to_payload(EventType.SESSION_START)
    IngestionService(db).ingest(ctx.principal.project_id, payload, ctx.client_ip)
    return IngestResponse(message="Session start recorded")


@router.post("/session/end", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
def end_session(
    request: SessionEventRequest,
    ctx: RequestContext = Depends(get_sdk_context),
    db: Session = Depends(get_db),
) -> IngestResponse:
    payload = request.to_payload(EventType.SESSION_END)
    IngestionService(db).ingest(ctx.principal.project_id, payload, ctx.client_ip)
    return IngestResponse(message="Session end recorded")


@router.post("/installation", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
def record_installation(
    request: InstallationRequest,
    ctx: RequestContext = Depends(get_sdk_context),
    db: Session = Depends(get_db),
) -> IngestResponse:
    """Register the device and record an install event carrying its properties."""
    payload = EventPayload(
        device_id=request.device_id,
        platform=request.platform,
        os_version=request.os_version,
        app_version=request.app_version,
        event_type=EventType.INSTALL,
        event_name=INSTALLATION_EVENT_NAME,
        parameters=request.properties,
    )
    IngestionService(db).ingest(ctx.principal.project_id, payload, ctx.client_ip)
    return IngestResponse(message="Installation recorded successfully")
