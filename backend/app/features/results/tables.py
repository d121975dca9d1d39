"""ORM tables backing the results store."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.core.database import Base


class ProjectRow(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    organization_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)

    scans: Mapped[List["ScanRow"]] = relationship(back_populates="project")


class ScanRow(Base):
    __tablename__ = "scans"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    project_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    scan_type: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Pending")
    started_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    project: Mapped[ProjectRow] = relationship(back_populates="scans")
    results: Mapped[List["ScanResultRow"]] = relationship(back_populates="scan")


class ScanResultRow(Base):
    __tablename__ = "scan_results"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    scan_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("scans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    help: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    element: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    element_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    severity: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    impact: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    scan_type: Mapped[str] = mapped_column(String(32), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    is_resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    details: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    scan: Mapped[ScanRow] = relationship(back_populates="results")
    tags: Mapped[List["ScanResultTagRow"]] = relationship(
        back_populates="result", cascade="all, delete-orphan", lazy="selectin"
    )


class ScanResultTagRow(Base):
    """One compliance tag on a result; overlap filters query this table."""

    __tablename__ = "scan_result_tags"

    result_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("scan_results.id", ondelete="CASCADE"), primary_key=True
    )
    tag: Mapped[str] = mapped_column(String(128), primary_key=True, index=True)

    result: Mapped[ScanResultRow] = relationship(back_populates="tags")
