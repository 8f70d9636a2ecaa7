# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Capability and group membership models.

A flattened view of the LMS access tables: which users hold which
capability in a context, and which users belong to which group.
"""

from sqlalchemy import BigInteger, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base


class CapabilityGrant(Base):
    """A capability held by a user in a context."""

    __tablename__ = "capability_grants"
    __table_args__ = (
        Index("idx_capability_grants_context", "context_id", "capability"),
        UniqueConstraint("context_id", "user_id", "capability", name="uq_capability_grant"),
    )

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    context_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    capability: Mapped[str] = mapped_column(String(255), nullable=False)


class GroupMember(Base):
    """Membership of a user in a course group."""

    __tablename__ = "group_members"
    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_member"),
    )

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    group_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
