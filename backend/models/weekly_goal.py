import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, JSON, Index
from sqlalchemy.orm import relationship
from database import Base


class WeeklyGoal(Base):
    __tablename__ = "weekly_goals"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)  # auth.users id
    roadmap_type = Column(String(200), nullable=False)  # qiskit/qutip/custom/<slug of imported title>
    week_number = Column(String(100), nullable=False)  # "1", "advanced-2", "custom-1718000000000"
    focus_area = Column(Text, nullable=False)
    topics = Column(JSON, default=list)
    goals = Column(JSON, default=list)
    deliverables = Column(JSON, default=list)
    reference = Column(JSON, default=list)  # list of open-ended reference objects
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    tasks = relationship("Task", back_populates="weekly_goal", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_weekly_goals_user_roadmap", "user_id", "roadmap_type"),
    )
