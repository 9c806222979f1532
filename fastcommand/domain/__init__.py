# Domain package for Fast Command

from .models import (
    AuditEventType,
    AuditLogEntry,
    CommissionPolicy,
    CommissionType,
    DiffEntry,
    DiscountType,
    IssueSeverity,
    OrderQuote,
    SettingsVersion,
    ShippingTypeCfg,
    ValidationIssue,
    VersionStatus,
)

__all__ = [
    'AuditEventType',
    'AuditLogEntry',
    'CommissionPolicy',
    'CommissionType',
    'DiffEntry',
    'DiscountType',
    'IssueSeverity',
    'OrderQuote',
    'SettingsVersion',
    'ShippingTypeCfg',
    'ValidationIssue',
    'VersionStatus',
]
