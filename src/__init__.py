"""SCORM Trends Report.

Aggregates learner interaction tracking of SCORM packages into
per-question frequency tables.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
