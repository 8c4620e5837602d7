# app/models/evaluation.py
from sqlalchemy import Column, String, Text, DateTime, Integer, JSON
from app.database import Base
from app.utils.ids import new_id, utcnow

class Evaluation(Base):
    __tablename__ = "evaluations"

    id = Column(String(32), primary_key=True, default=new_id)
    # Weak reference: deleting the user leaves its evaluations in place
    user_id = Column(String(32), nullable=False, index=True)
    year = Column(Integer, nullable=True)
    evaluation_date = Column(DateTime(timezone=True), nullable=False)

    cycle_label = Column(String, nullable=True)
    period_start = Column(DateTime(timezone=True), nullable=True)
    period_end = Column(DateTime(timezone=True), nullable=True)

    evaluator_name = Column(String, nullable=False)
    evaluator_email = Column(String, nullable=False)
    evaluator_id = Column(String, nullable=True)

    # [{course, completed, category, score, self_score}, ...]
    items = Column(JSON, nullable=False, default=list)

    employee_comments = Column(Text, nullable=True)
    evaluator_comments = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
