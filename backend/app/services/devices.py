"""Device registry: resolves SDK device identifiers to stored devices."""
import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Device
from app.utils.dates import utcnow
from app.utils.db import active
from app.utils.exceptions import StorageError
from app.utils.logger import logger


class DeviceRegistry:
    """
    Upserts devices keyed by (project_id, device_id).

    The registry only flushes. The caller owns the surrounding transaction,
    so a device created here disappears again if the caller rolls back.
    """

    def __init__(self, db: Session):
        self.db = db

    def find(self, project_id: uuid.UUID, device_id: str) -> Optional[Device]:
        return active(self.db.query(Device), Device).filter(
            Device.project_id == project_id,
            Device.device_id == device_id,
        ).first()

    def resolve(
        self,
        project_id: uuid.UUID,
        device_id: str,
        platform: str,
        os_version: str,
        app_version: str,
        client_ip: str = "",
    ) -> Device:
        """
        Return the device for an identifier, creating it on first sight.

        Existing devices get their liveness fields refreshed; first_seen and
        id never change. Safe to call repeatedly and concurrently.
        """
        device = self.find(project_id, device_id)
        if device is None:
            device = self._create(project_id, device_id, platform, os_version, app_version, client_ip)
            if device is not None:
                return device

            # Lost a first-sight race: another request created it
            device = self.find(project_id, device_id)
            if device is None:
                raise StorageError("Failed to resolve device")

        self._touch(device, os_version, app_version, client_ip)
        return device

    def _create(
        self,
        project_id: uuid.UUID,
        device_id: str,
        platform: str,
        os_version: str,
        app_version: str,
        client_ip: str,
    ) -> Optional[Device]:
        now = utcnow()
        device = Device(
            id=uuid.uuid4(),
            project_id=project_id,
            device_id=device_id,
            platform=platform,
            os_version=os_version,
            app_version=app_version,
            first_seen=now,
            last_seen=now,
            ip_address=client_ip or "",
            country="",
        )
        try:
            # Savepoint so a uniqueness violation leaves the outer transaction usable
            with self.db.begin_nested():
                self.db.add(device)
        except IntegrityError:
            logger.info(f"Device {device_id} in project {project_id} created concurrently, re-reading")
            return None

        logger.debug(f"Registered device {device_id} for project {project_id}")
        return device

    def _touch(self, device: Device, os_version: str, app_version: str, client_ip: str) -> None:
        now = utcnow()
        device.last_seen = max(device.last_seen, now) if device.last_seen else now
        device.os_version = os_version
        device.app_version = app_version
        if client_ip:
            device.ip_address = client_ip
        self.db.flush()
