from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from .db import Base


def localnow() -> datetime:
    return datetime.now()


class ProjectModel(Base):
    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    color = Column(String(20), nullable=False, default="#4CAF50")
    progress = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, nullable=False, default=localnow)

    # Owning side: removing a project removes its tasks.
    tasks = relationship("TaskModel", back_populates="project", cascade="save-update, merge, delete")


class TeamMemberModel(Base):
    __tablename__ = "team_members"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(120), nullable=False)
    email = Column(String(200), nullable=False, default="")
    role = Column(String(120), nullable=False, default="")
    avatar_color = Column(String(20), nullable=False, default="#4ECDC4")
    created_at = Column(DateTime, nullable=False, default=localnow)

    # Non-owning: deleting a member nulls assigned_to_id on these tasks.
    assigned_tasks = relationship("TaskModel", back_populates="assigned_to")


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    priority = Column(Integer, nullable=False, default=1)
    status = Column(String(20), nullable=False, default="pending", index=True)
    created_at = Column(DateTime, nullable=False, default=localnow, index=True)
    due_date = Column(Date, nullable=True)
    completed_at = Column(DateTime, nullable=True, index=True)
    estimated_hours = Column(Float, nullable=False, default=0.0)
    actual_hours = Column(Float, nullable=False, default=0.0)
    tags = Column(Text, nullable=False, default="")
    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True)
    assigned_to_id = Column(
        Uuid, ForeignKey("team_members.id", ondelete="SET NULL"), nullable=True, index=True
    )

    project = relationship("ProjectModel", back_populates="tasks")
    assigned_to = relationship("TeamMemberModel", back_populates="assigned_tasks")


class AnalyticsSnapshotModel(Base):
    __tablename__ = "analytics_snapshots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    date = Column(Date, nullable=False, unique=True)
    tasks_completed = Column(Integer, nullable=False, default=0)
    tasks_created = Column(Integer, nullable=False, default=0)
    hours_worked = Column(Float, nullable=False, default=0.0)
    productivity_score = Column(Float, nullable=False, default=0.0)


class EducationalTipModel(Base):
    __tablename__ = "educational_tips"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(40), nullable=False, index=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=localnow)
