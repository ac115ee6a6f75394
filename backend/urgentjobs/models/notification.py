from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text
from urgentjobs.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Text)
    related_id = Column(Integer)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(Text, nullable=False)
