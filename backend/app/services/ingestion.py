"""Telemetry ingestion: device resolution plus event persistence."""
import uuid
from typing import Dict, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Device, Event
from app.schemas.telemetry import EventPayload
from app.services.devices import DeviceRegistry
from app.utils.dates import utcnow
from app.utils.exceptions import StorageError
from app.utils.logger import logger


class IngestionService:
    """Records SDK events for one project at a time."""

    def __init__(self, db: Session, registry: Optional[DeviceRegistry] = None):
        self.db = db
        self.registry = registry or DeviceRegistry(db)

    def ingest(self, project_id: uuid.UUID, payload: EventPayload, client_ip: str = "") -> Event:
        """
        Record a single event.

        Args:
            project_id: Project resolved from the API key
            payload: Validated event payload
            client_ip: Observed caller address

        Returns:
            The persisted event

        Raises:
            StorageError: If anything fails; no device or event change survives
        """
        try:
            device = self._resolve_device(project_id, payload, client_ip)
            event = self._record(project_id, device, payload)
            self.db.commit()
        except (SQLAlchemyError, StorageError) as e:
            self.db.rollback()
            logger.error(f"Failed to record event for project {project_id}: {e}", exc_info=True)
            raise StorageError("Failed to record event")

        return event

    def ingest_batch(
        self,
        project_id: uuid.UUID,
        payloads: Sequence[EventPayload],
        client_ip: str = "",
    ) -> int:
        """
        Record a batch of events in one transaction.

        Devices are resolved once per distinct identifier and reused for the
        rest of the batch. Events are inserted in payload order. Any failure
        rolls back every device and event change of the batch.

        Returns:
            Number of events recorded
        """
        devices: Dict[str, Device] = {}
        try:
            for payload in payloads:
                device = devices.get(payload.device_id)
                if device is None:
                    device = self._resolve_device(project_id, payload, client_ip)
                    devices[payload.device_id] = device
                self._record(project_id, device, payload)
            self.db.commit()
        except (SQLAlchemyError, StorageError) as e:
            self.db.rollback()
            logger.error(
                f"Failed to record batch of {len(payloads)} events for project {project_id}: {e}",
                exc_info=True,
            )
            raise StorageError("Failed to record events")
        finally:
            devices.clear()

        logger.info(f"Recorded {len(payloads)} events from {len(set(p.device_id for p in payloads))} devices for project {project_id}")
        return len(payloads)

    def _resolve_device(self, project_id: uuid.UUID, payload: EventPayload, client_ip: str) -> Device:
        return self.registry.resolve(
            project_id,
            payload.device_id,
            platform=payload.platform,
            os_version=payload.os_version,
            app_version=payload.app_version,
            client_ip=client_ip,
        )

    def _record(self, project_id: uuid.UUID, device: Device, payload: EventPayload) -> Event:
        received_at = utcnow()
        event = Event(
            id=uuid.uuid4(),
            project_id=project_id,
            device_id=device.id,
            event_type=payload.event_type.value,
            event_name=payload.event_name,
            parameters=payload.parameters or {},
            timestamp=payload.timestamp or received_at,
            received_at=received_at,
        )
        self.db.add(event)
        # Flushed per event so inserts follow payload order
        self.db.flush()
        return event
