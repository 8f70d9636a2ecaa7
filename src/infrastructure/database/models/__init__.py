# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models for the LMS tracking store."""

from src.infrastructure.database.models.access import CapabilityGrant, GroupMember
from src.infrastructure.database.models.base import Base
from src.infrastructure.database.models.scorm import Scorm, ScormSco, ScormScoTrack

__all__ = [
    "Base",
    # SCORM
    "Scorm",
    "ScormSco",
    "ScormScoTrack",
    # Access
    "CapabilityGrant",
    "GroupMember",
]
