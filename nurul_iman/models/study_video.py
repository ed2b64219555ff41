"""Recorded study video (external URL). Created with the schema; no HTTP endpoints yet."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from nurul_iman.database import Base


class StudyVideo(Base):
    __tablename__ = "study_videos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    video_url = Column(String(512), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
