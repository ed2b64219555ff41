"""Scheduled study/lecture session, presented by an ustadz (user_id)."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from nurul_iman.database import Base


class StudyRundown(Base):
    __tablename__ = "study_rundowns"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    on_scheduled = Column(Boolean, nullable=False, default=False)
    schedule_date = Column(String(50), nullable=False, default="")
    time = Column(String(50), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", lazy="select")
