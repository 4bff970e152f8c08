from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.enums import (
    APPLICATION_STATUS,
    RENT_PAYMENT_STATUS,
    LeaseStatus,
    MaintenancePriority,
    MaintenanceStatus,
    PaymentMethod,
    PropertyStatus,
    PropertyTypes,
    TenantStatus,
    UserRole,
    UserStatus,
)


class RecordBase(BaseModel):
    """Shape returned by every storage backend."""

    model_config = ConfigDict(from_attributes=True)


class InputBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    @field_validator("*")
    @classmethod
    def to_naive_utc(cls, value):
        # stored timestamps are naive UTC; an aware value is converted, not truncated
        if isinstance(value, datetime) and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class CreateBase(InputBase):
    pass


class PartialUpdate(InputBase):
    """Merge payload: only fields the caller actually set are applied.

    Fields listed in ``required_fields`` are NOT NULL in storage, so an
    explicit ``None`` for them is rejected instead of being merged.
    """

    required_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_required(self):
        cleared = [
            name
            for name in self.model_fields_set & self.required_fields
            if getattr(self, name) is None
        ]
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(cleared))}")
        return self


# Users


class UserCreate(CreateBase):
    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole = UserRole.TENANT
    status: UserStatus = UserStatus.ACTIVE

    @field_validator("username", "email")
    @classmethod
    def not_blank(cls, value: str):
        if not value.strip():
            raise ValueError("Value cannot be blank.")
        return value


class UserUpdate(PartialUpdate):
    required_fields: ClassVar[FrozenSet[str]] = frozenset(
        {"username", "email", "password", "role", "status"}
    )

    username: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None
    last_login: Optional[datetime] = None


class UserRecord(RecordBase):
    id: int
    username: str
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole
    status: UserStatus
    last_login: Optional[datetime] = None
    created_at: datetime


# Properties


class PropertyCreate(CreateBase):
    owner_id: int = 1
    name: str
    address: str
    city: str
    state: str
    zip_code: str
    description: Optional[str] = None
    property_type: PropertyTypes
    price: float = Field(..., gt=0)
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_meters: Optional[int] = None
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None
    status: PropertyStatus = PropertyStatus.AVAILABLE
    is_approved: bool = False


class PropertyUpdate(PartialUpdate):
    required_fields: ClassVar[FrozenSet[str]] = frozenset(
        {
            "owner_id",
            "name",
            "address",
            "city",
            "state",
            "zip_code",
            "property_type",
            "price",
            "status",
            "is_approved",
        }
    )

    owner_id: Optional[int] = None
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    description: Optional[str] = None
    property_type: Optional[PropertyTypes] = None
    price: Optional[float] = Field(None, gt=0)
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_meters: Optional[int] = None
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None
    status: Optional[PropertyStatus] = None
    is_approved: Optional[bool] = None


class PropertyRecord(RecordBase):
    id: int
    owner_id: int
    name: str
    address: str
    city: str
    state: str
    zip_code: str
    description: Optional[str] = None
    property_type: PropertyTypes
    price: float
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_meters: Optional[int] = None
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None
    status: PropertyStatus
    is_approved: bool
    created_at: datetime


# Tenants


class TenantCreate(CreateBase):
    user_id: int
    phone: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    occupation: Optional[str] = None
    monthly_income: Optional[float] = None
    employer_name: Optional[str] = None
    employer_phone: Optional[str] = None
    previous_address: Optional[str] = None
    move_in_date: Optional[datetime] = None
    notes: Optional[str] = None
    status: TenantStatus = TenantStatus.ACTIVE


class TenantUpdate(PartialUpdate):
    required_fields: ClassVar[FrozenSet[str]] = frozenset({"user_id", "status"})

    user_id: Optional[int] = None
    phone: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    occupation: Optional[str] = None
    monthly_income: Optional[float] = None
    employer_name: Optional[str] = None
    employer_phone: Optional[str] = None
    previous_address: Optional[str] = None
    move_in_date: Optional[datetime] = None
    notes: Optional[str] = None
    status: Optional[TenantStatus] = None


class TenantRecord(RecordBase):
    id: int
    user_id: int
    phone: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    occupation: Optional[str] = None
    monthly_income: Optional[float] = None
    employer_name: Optional[str] = None
    employer_phone: Optional[str] = None
    previous_address: Optional[str] = None
    move_in_date: Optional[datetime] = None
    notes: Optional[str] = None
    status: TenantStatus
    created_at: datetime
    updated_at: datetime


class TenantWithUser(TenantRecord):
    user: UserRecord


# Leases


class LeaseCreate(CreateBase):
    property_id: int
    tenant_id: int
    start_date: datetime
    end_date: datetime
    monthly_rent: float
    security_deposit: Optional[float] = None
    status: LeaseStatus = LeaseStatus.ACTIVE
    documents: Optional[List[str]] = None


class LeaseUpdate(PartialUpdate):
    required_fields: ClassVar[FrozenSet[str]] = frozenset(
        {"property_id", "tenant_id", "start_date", "end_date", "monthly_rent", "status"}
    )

    property_id: Optional[int] = None
    tenant_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    monthly_rent: Optional[float] = None
    security_deposit: Optional[float] = None
    status: Optional[LeaseStatus] = None
    documents: Optional[List[str]] = None


class LeaseRecord(RecordBase):
    id: int
    property_id: int
    tenant_id: int
    start_date: datetime
    end_date: datetime
    monthly_rent: float
    security_deposit: Optional[float] = None
    status: LeaseStatus
    documents: Optional[List[str]] = None
    created_at: datetime


# Maintenance requests


class MaintenanceRequestCreate(CreateBase):
    property_id: int
    tenant_id: Optional[int] = None
    title: str
    description: str
    priority: MaintenancePriority = MaintenancePriority.MEDIUM
    status: MaintenanceStatus = MaintenanceStatus.PENDING


class MaintenanceRequestUpdate(PartialUpdate):
    required_fields: ClassVar[FrozenSet[str]] = frozenset(
        {"property_id", "title", "description", "priority", "status"}
    )

    property_id: Optional[int] = None
    tenant_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[MaintenancePriority] = None
    status: Optional[MaintenanceStatus] = None
    resolved_at: Optional[datetime] = None


class MaintenanceRequestRecord(RecordBase):
    id: int
    property_id: int
    tenant_id: Optional[int] = None
    title: str
    description: str
    priority: MaintenancePriority
    status: MaintenanceStatus
    created_at: datetime
    resolved_at: Optional[datetime] = None


# Lease applications


class LeaseApplicationCreate(CreateBase):
    property_id: int
    applicant_id: int

    first_name: str
    last_name: str
    email: str
    phone: str
    date_of_birth: str

    employment_status: str
    employer: Optional[str] = None
    job_title: Optional[str] = None
    monthly_income: float
    employment_duration: Optional[str] = None

    previous_landlord: Optional[str] = None
    previous_landlord_phone: Optional[str] = None
    emergency_contact: str
    emergency_contact_phone: str

    desired_move_in_date: str
    lease_duration: int = Field(..., gt=0)
    additional_occupants: Optional[int] = 0
    pets_description: Optional[str] = None

    motivation: Optional[str] = None
    additional_comments: Optional[str] = None
    status: APPLICATION_STATUS = APPLICATION_STATUS.PENDING


class LeaseApplicationUpdate(PartialUpdate):
    required_fields: ClassVar[FrozenSet[str]] = frozenset(
        {
            "property_id",
            "applicant_id",
            "first_name",
            "last_name",
            "email",
            "phone",
            "date_of_birth",
            "employment_status",
            "monthly_income",
            "emergency_contact",
            "emergency_contact_phone",
            "desired_move_in_date",
            "lease_duration",
            "status",
        }
    )

    property_id: Optional[int] = None
    applicant_id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    employment_status: Optional[str] = None
    employer: Optional[str] = None
    job_title: Optional[str] = None
    monthly_income: Optional[float] = None
    employment_duration: Optional[str] = None
    previous_landlord: Optional[str] = None
    previous_landlord_phone: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    desired_move_in_date: Optional[str] = None
    lease_duration: Optional[int] = Field(None, gt=0)
    additional_occupants: Optional[int] = None
    pets_description: Optional[str] = None
    motivation: Optional[str] = None
    additional_comments: Optional[str] = None
    status: Optional[APPLICATION_STATUS] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None


class LeaseApplicationRecord(RecordBase):
    id: int
    property_id: int
    applicant_id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    date_of_birth: str
    employment_status: str
    employer: Optional[str] = None
    job_title: Optional[str] = None
    monthly_income: float
    employment_duration: Optional[str] = None
    previous_landlord: Optional[str] = None
    previous_landlord_phone: Optional[str] = None
    emergency_contact: str
    emergency_contact_phone: str
    desired_move_in_date: str
    lease_duration: int
    additional_occupants: Optional[int] = 0
    pets_description: Optional[str] = None
    motivation: Optional[str] = None
    additional_comments: Optional[str] = None
    status: APPLICATION_STATUS
    created_at: datetime
    updated_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None


# Rent payments


class RentPaymentCreate(CreateBase):
    lease_id: int
    tenant_id: int
    amount: float = Field(..., gt=0)
    due_date: datetime
    paid_date: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    stripe_payment_intent_id: Optional[str] = None
    status: RENT_PAYMENT_STATUS = RENT_PAYMENT_STATUS.PENDING
    late_fee: Optional[float] = 0
    notes: Optional[str] = None


class RentPaymentUpdate(PartialUpdate):
    required_fields: ClassVar[FrozenSet[str]] = frozenset(
        {"lease_id", "tenant_id", "amount", "due_date", "status"}
    )

    lease_id: Optional[int] = None
    tenant_id: Optional[int] = None
    amount: Optional[float] = Field(None, gt=0)
    due_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    stripe_payment_intent_id: Optional[str] = None
    status: Optional[RENT_PAYMENT_STATUS] = None
    late_fee: Optional[float] = None
    notes: Optional[str] = None


class RentPaymentRecord(RecordBase):
    id: int
    lease_id: int
    tenant_id: int
    amount: float
    due_date: datetime
    paid_date: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    stripe_payment_intent_id: Optional[str] = None
    status: RENT_PAYMENT_STATUS
    late_fee: Optional[float] = 0
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# Dashboard


class DashboardStats(BaseModel):
    property_count: int
    active_lease_count: int
    tenant_count: int
    maintenance_request_count: int
