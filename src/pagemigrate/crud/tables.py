"""Database table definitions for stored content files and their version history"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


class ContentRecord(SQLModel, table=True):
    """Current state of one file in the content store"""
    __tablename__ = "content_files"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    path: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    content: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    message: str = Field(default="", sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class ContentVersion(SQLModel, table=True):
    """Immutable snapshot of a ContentRecord at a prior commit."""
    __tablename__ = "content_versions"
    __table_args__ = (UniqueConstraint("file_id", "version_num", name="uq_contentver_file_num"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    file_id: UUID = Field(..., foreign_key="content_files.id", index=True, nullable=False)
    version_num: int = Field(..., nullable=False, description="Monotonically increasing per-file version number")
    content: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    message: str = Field(default="", sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
