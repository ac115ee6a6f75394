from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from urgentjobs.database import Base

APPLICATION_STATUSES = ("pending", "accepted", "rejected", "withdrawn")


class Application(Base):
    __tablename__ = "job_applications"

    id = Column(Integer, primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    job_seeker_id = Column(Integer, ForeignKey("job_seeker_profiles.id", ondelete="CASCADE"), nullable=False)
    cover_letter = Column(Text)
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    job = relationship("Job", back_populates="applications")
    job_seeker = relationship("JobSeekerProfile", back_populates="applications")
