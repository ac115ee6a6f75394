from sqlalchemy import Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from urgentjobs.database import Base

JOB_STATUSES = ("active", "filled", "expired", "draft")
PAY_TYPES = ("hourly", "fixed", "daily")
URGENCIES = ("immediate", "today", "this_week", "flexible")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True)
    employer_id = Column(Integer, ForeignKey("employer_profiles.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text)
    pay_amount = Column(Float)
    pay_type = Column(Text)
    location_latitude = Column(Float)
    location_longitude = Column(Float)
    location_address = Column(Text, nullable=False)
    urgency = Column(Text)
    category = Column(Text)
    start_date = Column(Text)
    end_date = Column(Text)
    estimated_hours = Column(Integer)
    status = Column(Text, nullable=False, default="active")
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    employer = relationship("EmployerProfile", back_populates="jobs")
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
