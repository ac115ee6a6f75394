from sqlalchemy import JSON, Boolean, Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from urgentjobs.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    phone = Column(Text)
    profile_picture = Column(Text)
    role = Column(Text, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    job_seeker_profile = relationship("JobSeekerProfile", back_populates="user", uselist=False)
    employer_profile = relationship("EmployerProfile", back_populates="user", uselist=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class JobSeekerProfile(Base):
    __tablename__ = "job_seeker_profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    bio = Column(Text)
    skills = Column(JSON)
    experience_years = Column(Integer)
    education = Column(Text)
    availability = Column(Text)
    location_latitude = Column(Float)
    location_longitude = Column(Float)
    location_address = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    user = relationship("User", back_populates="job_seeker_profile")
    applications = relationship("Application", back_populates="job_seeker")


class EmployerProfile(Base):
    __tablename__ = "employer_profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    company_name = Column(Text, nullable=False)
    company_description = Column(Text)
    company_website = Column(Text)
    company_logo = Column(Text)
    industry = Column(Text)
    location_latitude = Column(Float)
    location_longitude = Column(Float)
    location_address = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    user = relationship("User", back_populates="employer_profile")
    jobs = relationship("Job", back_populates="employer", cascade="all, delete-orphan")
