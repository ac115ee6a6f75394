from urgentjobs.models.user import User, JobSeekerProfile, EmployerProfile
from urgentjobs.models.job import Job
from urgentjobs.models.application import Application
from urgentjobs.models.notification import Notification
from urgentjobs.models.review import Review

__all__ = ["User", "JobSeekerProfile", "EmployerProfile", "Job", "Application", "Notification", "Review"]
