"""
Domain models for the settings and pricing core.

These models represent the business records independent of persistence concerns.
The configuration document itself stays a plain JSON-style dict; the records that
travel through the versioning workflow are dataclasses with to_dict/from_dict
helpers producing the camelCase wire format used by the UI.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Any
import copy


def now_utc() -> datetime:
    """Timezone-aware UTC now for default timestamps."""
    return datetime.now(timezone.utc)


def now_iso() -> str:
    return now_utc().isoformat()


SYSTEM_AUTHOR: Dict[str, Any] = {"id": "system", "name": "system"}


def normalize_author(author: Any) -> Dict[str, Any]:
    """Authors are opaque JSON objects; fall back to the system author."""
    if isinstance(author, dict) and author:
        return dict(author)
    if isinstance(author, str) and author.strip():
        return {"id": author.strip(), "name": author.strip()}
    return dict(SYSTEM_AUTHOR)


class CommissionType(Enum):
    """Commission policy type."""
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class DiscountType(Enum):
    """Discount type applied to an order amount."""
    NONE = "none"
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class VersionStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class AuditEventType(Enum):
    """Audit log entry types written by the versioning service."""
    VERSION_CREATED = "settings.version.created"
    VERSION_PUBLISHED = "settings.version.published"
    VERSION_ROLLBACK = "settings.version.rollback"
    IMPORT = "settings.import"


class IssueSeverity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass
class CommissionPolicy:
    """A commission rule, optionally scoped to a store and a date window."""
    id: str = ""
    type: CommissionType = CommissionType.PERCENTAGE
    value: float = 0.0
    store_id: Optional[str] = None
    effective_from: Optional[str] = None
    effective_to: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "value": self.value,
        }
        if self.store_id is not None:
            data["storeId"] = self.store_id
        if self.effective_from is not None:
            data["effectiveFrom"] = self.effective_from
        if self.effective_to is not None:
            data["effectiveTo"] = self.effective_to
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CommissionPolicy":
        # Anything other than "percentage" is charged as a flat amount.
        if str(data.get("type") or "").lower() == CommissionType.PERCENTAGE.value:
            policy_type = CommissionType.PERCENTAGE
        else:
            policy_type = CommissionType.FIXED
        return cls(
            id=str(data.get("id") or ""),
            type=policy_type,
            value=data.get("value", 0),
            store_id=data.get("storeId") or None,
            effective_from=data.get("effectiveFrom") or None,
            effective_to=data.get("effectiveTo") or None,
        )


@dataclass
class ShippingTypeCfg:
    """A priced shipping tier keyed by transport kind and destination country."""
    id: str = ""
    kind: str = ""
    price_per_kg_mru: float = 0.0
    country: Optional[str] = None
    duration_days: Optional[float] = None
    company_id: Optional[str] = None
    effective_from: Optional[str] = None
    effective_to: Optional[str] = None

    @property
    def has_window(self) -> bool:
        return bool(self.effective_from or self.effective_to)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "kind": self.kind,
            "pricePerKgMRU": self.price_per_kg_mru,
        }
        optional = {
            "country": self.country,
            "durationDays": self.duration_days,
            "companyId": self.company_id,
            "effectiveFrom": self.effective_from,
            "effectiveTo": self.effective_to,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShippingTypeCfg":
        return cls(
            id=str(data.get("id") or ""),
            kind=str(data.get("kind") or ""),
            price_per_kg_mru=data.get("pricePerKgMRU", 0),
            country=data.get("country") or None,
            duration_days=data.get("durationDays"),
            company_id=data.get("companyId") or None,
            effective_from=data.get("effectiveFrom") or None,
            effective_to=data.get("effectiveTo") or None,
        )


@dataclass
class DiffEntry:
    """One changed top-level key between two configuration documents."""
    key: str
    old: Any = None
    new: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "old": self.old, "new": self.new}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiffEntry":
        return cls(key=str(data.get("key", "")), old=data.get("old"), new=data.get("new"))


@dataclass
class SettingsVersion:
    """A snapshot of the configuration document and its diff against what was live."""
    id: str
    created_at: str
    author: Dict[str, Any]
    status: VersionStatus = VersionStatus.DRAFT
    message: str = ""
    content: Dict[str, Any] = field(default_factory=dict)
    diffs: List[DiffEntry] = field(default_factory=list)
    published_at: Optional[str] = None

    @property
    def is_published(self) -> bool:
        return self.status is VersionStatus.PUBLISHED

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "createdAt": self.created_at,
            "author": self.author,
            "status": self.status.value,
            "message": self.message,
            "content": copy.deepcopy(self.content),
            "diffs": [d.to_dict() for d in self.diffs],
        }
        if self.published_at:
            data["publishedAt"] = self.published_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SettingsVersion":
        try:
            status = VersionStatus(data.get("status", "draft"))
        except ValueError:
            status = VersionStatus.DRAFT
        content = data.get("content")
        return cls(
            id=str(data["id"]),
            created_at=data.get("createdAt") or now_iso(),
            author=normalize_author(data.get("author")),
            status=status,
            message=data.get("message") or "",
            content=copy.deepcopy(content) if isinstance(content, dict) else {},
            diffs=[DiffEntry.from_dict(d) for d in data.get("diffs") or [] if isinstance(d, dict)],
            published_at=data.get("publishedAt"),
        )


@dataclass
class AuditLogEntry:
    """Append-only record of who changed the configuration and when."""
    id: str
    type: AuditEventType
    user: Dict[str, Any]
    created_at: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "user": self.user,
            "createdAt": self.created_at,
            "details": copy.deepcopy(self.details),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuditLogEntry":
        return cls(
            id=str(data["id"]),
            type=AuditEventType(data["type"]),
            user=normalize_author(data.get("user")),
            created_at=data.get("createdAt") or now_iso(),
            details=dict(data.get("details") or {}),
        )


@dataclass
class ValidationIssue:
    """A finding produced by the settings validator. Never persisted."""
    path: str
    message: str
    severity: IssueSeverity = IssueSeverity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity is IssueSeverity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "message": self.message, "severity": self.severity.value}


@dataclass
class OrderQuote:
    """Result of pricing an order against a configuration document."""
    original_price: float
    currency: str
    converted_mru: int
    commission: int
    discount: int
    final_price: int
    commission_policy_id: Optional[str] = None
    shipping_type_id: Optional[str] = None
    shipping_cost: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "originalPrice": self.original_price,
            "currency": self.currency,
            "convertedMRU": self.converted_mru,
            "commission": self.commission,
            "commissionPolicyId": self.commission_policy_id,
            "discount": self.discount,
            "finalPrice": self.final_price,
            "shippingTypeId": self.shipping_type_id,
            "shippingCost": self.shipping_cost,
        }
