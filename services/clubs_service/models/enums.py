"""Enum definitions for clubs service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AdminActionType(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"
    BULK_APPROVE = "bulk_approve"
    BULK_REJECT = "bulk_reject"
    VIEW = "view"
    EXPORT = "export"


class AdminTargetType(str, enum.Enum):
    CLUB_APPLICATION = "club_application"
    REPORT = "report"
    AUDIT_LOG = "audit_log"
