# app/models/user.py
from sqlalchemy import Column, String, Text, Date, DateTime, Float, BigInteger, Boolean, JSON
from app.database import Base
from app.utils.ids import new_id, utcnow

class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)

    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    role_position = Column(String, nullable=True)   # RolePosition value

    mav_id = Column(BigInteger, nullable=True, unique=True, index=True)
    w2w_employee_id = Column(String, nullable=True)
    teams_id = Column(String, nullable=True)

    status = Column(String, nullable=True)           # UserStatus value
    phone_number = Column(String, nullable=True)
    student_email = Column(String, nullable=True)
    work_email = Column(String, nullable=True)

    shirt_size = Column(String, nullable=True)       # ShirtSize value

    date_hired = Column(Date, nullable=True)
    graduation_date = Column(Date, nullable=True)
    birthday = Column(Date, nullable=True)
    most_recent_raise_granted = Column(Date, nullable=True)

    hourly_pay_rate = Column(Float, nullable=True)

    dietary_restrictions = Column(Text, nullable=True)
    favorite_plant = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    major = Column(String, nullable=True)

    last_edited_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String, nullable=True)

    has_a_second_job = Column(Boolean, nullable=True)
    has_ssn = Column(Boolean, nullable=True)
    key_request = Column(Boolean, nullable=True)

    # Metric ids, appended by the metrics saga
    merits = Column(JSON, nullable=False, default=list)
    demerits = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
