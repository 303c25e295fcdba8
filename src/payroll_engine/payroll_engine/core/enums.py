from __future__ import annotations

from enum import Enum


class AttendanceType(str, Enum):
    """Record-type tag; at most one record per employee, date and type."""

    NORMAL = "normal"
    PROJECT = "project"
