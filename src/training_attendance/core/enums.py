from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    ADMIN = "admin"
    TUTOR = "tutor"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Only presence is persisted; absence is the computed complement."""

    PRESENT = "present"
