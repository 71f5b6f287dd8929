"""SQLAlchemy models for persistence layer (SCL files)."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class SclFileORM(Base):
    """Modèle ORM: une ligne par version stockée d'un document SCL."""

    __tablename__ = "scl_files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    scl_id = Column(String(36), nullable=False)
    scl_type = Column(String(3), nullable=False)
    major_version = Column(Integer, nullable=False)
    minor_version = Column(Integer, nullable=False)
    patch_version = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    scl_data = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(UTC))

    __table_args__ = (
        UniqueConstraint(
            "scl_type",
            "scl_id",
            "major_version",
            "minor_version",
            "patch_version",
            name="uq_scl_type_id_version",
        ),
        Index("ix_scl_files_type_id", "scl_type", "scl_id"),
    )
