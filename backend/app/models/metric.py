"""Pre-aggregated metric model. Rows are written by an external aggregation job."""
from sqlalchemy import Column, String, DateTime, Float, ForeignKey, Index, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
import uuid
from app.database import Base
from app.utils.dates import utcnow


class Metric(Base):
    """Aggregated value for one metric type, period and dimension set."""
    __tablename__ = "metrics"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)
    metric_type = Column(String(20), nullable=False)  # dau, mau, new_users, ...
    period = Column(String(10), nullable=False)  # hourly, daily, ..., total
    period_start = Column(DateTime, nullable=False)
    value = Column(Float, nullable=False)
    dimensions = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=dict)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True, index=True)

    __table_args__ = (
        Index("idx_metrics_project_type_period", "project_id", "metric_type", "period", "period_start"),
    )
