# app/models/metric.py
from sqlalchemy import Column, String, Text, DateTime
from app.database import Base
from app.utils.ids import new_id, utcnow

class Metric(Base):
    __tablename__ = "metrics"

    id = Column(String(32), primary_key=True, default=new_id)
    metric_type = Column(String, nullable=False)     # merit, demerit
    comment = Column(Text, nullable=False)
    added_by = Column(String, nullable=False)
    user_id = Column(String(32), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
