# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Allowed-user resolution for the trends report.

Only users who may attempt the activity (hold the save-track capability
in the module context) are reported. When a group is selected the set is
further limited to that group's members.
"""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.infrastructure.database.models import CapabilityGrant, GroupMember

logger = logging.getLogger(__name__)


class CapabilityService(Protocol):
    """Looks up users holding a capability."""

    def get_users_by_capability(
        self,
        context_id: int,
        capability: str,
        group_id: int | None = None,
    ) -> set[str]:
        """Return ids of users holding capability, optionally within a group."""
        ...


class SqlCapabilityService:
    """CapabilityService backed by the capability_grants and group_members tables.

    Attributes:
        session: Open database session.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the service.

        Args:
            session: Database session for the LMS database.
        """
        self.session = session

    def get_users_by_capability(
        self,
        context_id: int,
        capability: str,
        group_id: int | None = None,
    ) -> set[str]:
        """Return ids of users holding capability in context.

        Args:
            context_id: Module context id.
            capability: Capability name.
            group_id: Restrict to members of this group when set.

        Returns:
            Set of user ids, empty if none qualify.
        """
        stmt = select(CapabilityGrant.user_id).where(
            CapabilityGrant.context_id == context_id,
            CapabilityGrant.capability == capability,
        )
        if group_id:
            stmt = stmt.join(
                GroupMember,
                GroupMember.user_id == CapabilityGrant.user_id,
            ).where(GroupMember.group_id == group_id)

        return set(self.session.execute(stmt.distinct()).scalars())


class AllowedUserResolver:
    """Resolves which users the report may include.

    Attributes:
        capabilities: Capability lookup collaborator.
        capability: Capability that marks a user as able to attempt.
    """

    def __init__(self, capabilities: CapabilityService, capability: str) -> None:
        """Initialize the resolver.

        Args:
            capabilities: Capability lookup collaborator.
            capability: Capability name, e.g. ``mod/scorm:savetrack``.
        """
        self.capabilities = capabilities
        self.capability = capability

    def resolve(self, context_id: int, group_id: int | None = None) -> set[str]:
        """Resolve the allowed users.

        A group id of None or 0 means no group is selected: every user
        holding the capability is allowed.

        Args:
            context_id: Module context id.
            group_id: Currently selected group.

        Returns:
            Allowed user ids. Empty when nobody qualifies.
        """
        group = group_id or None
        users = self.capabilities.get_users_by_capability(context_id, self.capability, group)
        allowed = {str(user_id) for user_id in users or ()}

        logger.debug(
            "Resolved allowed users: context=%s, group=%s, count=%d",
            context_id,
            group,
            len(allowed),
        )
        return allowed
