from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    Float,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from core.get_db import Base

from .enums import (
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
from .utils import utc_now


def enum_column(enum_cls):
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
    )


# Foreign keys are plain indexed integer columns: references are soft in
# both backends, and traversals skip rows whose target is gone.


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole), nullable=False, default=UserRole.TENANT
    )
    status: Mapped[UserStatus] = mapped_column(
        enum_column(UserStatus), nullable=False, default=UserStatus.ACTIVE
    )
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )

    def __repr__(self):
        return f"<User id={self.id} username={self.username}>"


# case-insensitive uniqueness; the index names let the repo tell which field collided
Index("uq_users_username_lower", func.lower(User.username), unique=True)
Index("uq_users_email_lower", func.lower(User.email), unique=True)


class Property(Base):
    __tablename__ = "properties"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_properties_price_positive"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    state: Mapped[str] = mapped_column(String(120), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    property_type: Mapped[PropertyTypes] = mapped_column(
        enum_column(PropertyTypes), nullable=False
    )
    price: Mapped[float] = mapped_column(Float, nullable=False)
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    square_meters: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    features: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    images: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    status: Mapped[PropertyStatus] = mapped_column(
        enum_column(PropertyStatus), nullable=False, default=PropertyStatus.AVAILABLE
    )
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )

    def __repr__(self):
        return f"<Property id={self.id} owner={self.owner_id} name={self.name}>"


class Tenant(Base):
    __tablename__ = "tenants"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    emergency_contact: Mapped[Optional[str]] = mapped_column(String(255))
    emergency_phone: Mapped[Optional[str]] = mapped_column(String(40))
    date_of_birth: Mapped[Optional[datetime]] = mapped_column(DateTime)
    occupation: Mapped[Optional[str]] = mapped_column(String(120))
    monthly_income: Mapped[Optional[float]] = mapped_column(Float)
    employer_name: Mapped[Optional[str]] = mapped_column(String(255))
    employer_phone: Mapped[Optional[str]] = mapped_column(String(40))
    previous_address: Mapped[Optional[str]] = mapped_column(String(255))
    move_in_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[TenantStatus] = mapped_column(
        enum_column(TenantStatus), nullable=False, default=TenantStatus.ACTIVE
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )


class Lease(Base):
    __tablename__ = "leases"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    tenant_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    monthly_rent: Mapped[float] = mapped_column(Float, nullable=False)
    security_deposit: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    status: Mapped[LeaseStatus] = mapped_column(
        enum_column(LeaseStatus), nullable=False, default=LeaseStatus.ACTIVE, index=True
    )
    documents: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )


class MaintenanceRequest(Base):
    __tablename__ = "maintenance_requests"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    tenant_id: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[MaintenancePriority] = mapped_column(
        enum_column(MaintenancePriority),
        nullable=False,
        default=MaintenancePriority.MEDIUM,
    )
    status: Mapped[MaintenanceStatus] = mapped_column(
        enum_column(MaintenanceStatus),
        nullable=False,
        default=MaintenanceStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class LeaseApplication(Base):
    __tablename__ = "lease_applications"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    applicant_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(40), nullable=False)
    date_of_birth: Mapped[str] = mapped_column(String(40), nullable=False)

    employment_status: Mapped[str] = mapped_column(String(120), nullable=False)
    employer: Mapped[Optional[str]] = mapped_column(String(255))
    job_title: Mapped[Optional[str]] = mapped_column(String(255))
    monthly_income: Mapped[float] = mapped_column(Float, nullable=False)
    employment_duration: Mapped[Optional[str]] = mapped_column(String(120))

    previous_landlord: Mapped[Optional[str]] = mapped_column(String(255))
    previous_landlord_phone: Mapped[Optional[str]] = mapped_column(String(40))
    emergency_contact: Mapped[str] = mapped_column(String(255), nullable=False)
    emergency_contact_phone: Mapped[str] = mapped_column(String(40), nullable=False)

    desired_move_in_date: Mapped[str] = mapped_column(String(40), nullable=False)
    lease_duration: Mapped[int] = mapped_column(Integer, nullable=False)
    additional_occupants: Mapped[Optional[int]] = mapped_column(Integer)
    pets_description: Mapped[Optional[str]] = mapped_column(Text)

    motivation: Mapped[Optional[str]] = mapped_column(Text)
    additional_comments: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[APPLICATION_STATUS] = mapped_column(
        enum_column(APPLICATION_STATUS),
        nullable=False,
        default=APPLICATION_STATUS.PENDING,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    reviewed_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class RentPayment(Base):
    __tablename__ = "rent_payments"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lease_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    tenant_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    paid_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        enum_column(PaymentMethod), nullable=True
    )
    stripe_payment_intent_id: Mapped[Optional[str]] = mapped_column(String(80))
    status: Mapped[RENT_PAYMENT_STATUS] = mapped_column(
        enum_column(RENT_PAYMENT_STATUS),
        nullable=False,
        default=RENT_PAYMENT_STATUS.PENDING,
    )
    late_fee: Mapped[Optional[float]] = mapped_column(Float)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )
