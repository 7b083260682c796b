"""Database query utility functions."""
from typing import Optional, TypeVar, Type
from uuid import UUID
from sqlalchemy.orm import Query, Session

from app.utils.dates import utcnow
from app.utils.exceptions import NotFoundError, ValidationError

T = TypeVar("T")


def parse_uuid(value: str | UUID, label: str = "ID") -> UUID:
    """Parse a UUID from a path or query parameter."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError):
        raise ValidationError(f"Invalid {label}")


def active(query: Query, model: Type[T]) -> Query:
    """Exclude tombstoned rows. Every normal read goes through here."""
    return query.filter(model.deleted_at.is_(None))


def soft_delete(instance) -> None:
    """Mark a row as logically deleted; the caller commits."""
    instance.deleted_at = utcnow()


def get_by_id(
    db: Session,
    model: Type[T],
    id_value: str | UUID,
    error_message: Optional[str] = None,
) -> T:
    """
    Get a non-deleted model instance by ID.

    Args:
        db: Database session
        model: SQLAlchemy model class with a deleted_at column
        id_value: ID value (UUID string or UUID object)
        error_message: Custom resource name used if not found

    Returns:
        Model instance

    Raises:
        ValidationError: If the ID is not a UUID
        NotFoundError: If no live row has that ID
    """
    id_value = parse_uuid(id_value, f"{model.__name__} ID")
    instance = active(db.query(model), model).filter(model.id == id_value).first()

    if not instance:
        raise NotFoundError(error_message or model.__name__)

    return instance
