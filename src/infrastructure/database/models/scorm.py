# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SCORM activity, SCO and tracking models.

These tables are owned by the LMS. The trends report only reads them:
- scorm: one row per SCORM activity
- scorm_scoes: the SCOs (interaction objects) of a package
- scorm_scoes_track: element/value pairs recorded during attempts
"""

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base


class Scorm(Base):
    """A SCORM activity inside a course."""

    __tablename__ = "scorm"

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    course_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")


class ScormSco(Base):
    """A SCO of a SCORM package.

    Only SCOs with a non-empty launch reference can be attempted;
    organisation and aggregation items have an empty launch.
    """

    __tablename__ = "scorm_scoes"
    __table_args__ = (Index("idx_scorm_scoes_scorm", "scorm_id"),)

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    scorm_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("scorm.id", ondelete="CASCADE"), nullable=False
    )
    identifier: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    launch: Mapped[str] = mapped_column(Text, nullable=False, default="")
    scorm_type: Mapped[str] = mapped_column(String(5), nullable=False, default="sco")


class ScormScoTrack(Base):
    """A single tracked element/value pair of one attempt."""

    __tablename__ = "scorm_scoes_track"
    __table_args__ = (
        Index("idx_scorm_track_sco_element", "sco_id", "element"),
        Index("idx_scorm_track_user_sco_attempt", "user_id", "sco_id", "attempt"),
    )

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    scorm_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("scorm.id", ondelete="CASCADE"), nullable=False
    )
    sco_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("scorm_scoes.id", ondelete="CASCADE"), nullable=False
    )
    attempt: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=1)
    element: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    time_modified: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
