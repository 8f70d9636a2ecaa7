# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for the SCORM trends report.

This package contains cross-cutting utilities:
- logging: stdlib logging rendered by structlog, with per-pass context
"""

from src.utils.logging import log_context, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "log_context",
]
