from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    TENANT = "tenant"
    PROPERTY_OWNER = "property_owner"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class PropertyTypes(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    DETACHED = "detached"
    SEMI_DETACHED = "semi-detached"


class PropertyStatus(str, Enum):
    AVAILABLE = "available"
    LEASED = "leased"
    MAINTENANCE = "maintenance"


class TenantStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class LeaseStatus(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"
    TERMINATED = "terminated"


class MaintenancePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MaintenanceStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class APPLICATION_STATUS(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class RENT_PAYMENT_STATUS(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    LATE = "late"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    STRIPE = "stripe"
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"
    CHECK = "check"
