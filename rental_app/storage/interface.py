"""
Storage interface - the contract every storage backend implements.

Callers depend only on this class. ``MemStorage`` and ``DatabaseStorage``
are independent implementations; the shared contract test suite is what
keeps them interchangeable.

Absence is reported by value: ``get_*`` and ``update_*`` return ``None`` for
an unknown id and ``delete_*`` returns ``False``. ``create_user`` and
``update_user`` raise ``DuplicateError`` when the username or email (compared
case-insensitively) is already taken.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel

from schemas.schema import (
    DashboardStats,
    LeaseApplicationRecord,
    LeaseRecord,
    MaintenanceRequestRecord,
    PropertyRecord,
    RentPaymentRecord,
    TenantRecord,
    TenantWithUser,
    UserRecord,
)

Payload = Union[BaseModel, Mapping[str, Any]]


class StorageInterface(ABC):
    """Abstract interface for storage operations."""

    # User operations
    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[UserRecord]:
        """Get a user by ID."""

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        """Case-insensitive exact match; the earliest created user wins."""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        """Case-insensitive exact match; the earliest created user wins."""

    @abstractmethod
    async def list_users(self) -> List[UserRecord]:
        """List all users in creation order."""

    @abstractmethod
    async def create_user(self, data: Payload) -> UserRecord:
        """Create a user. Raises DuplicateError on username/email collision."""

    @abstractmethod
    async def update_user(self, user_id: int, changes: Payload) -> Optional[UserRecord]:
        """Merge changes into a user. Raises DuplicateError on collision."""

    @abstractmethod
    async def delete_user(self, user_id: int) -> bool:
        """Delete a user."""

    # Property operations
    @abstractmethod
    async def get_property(self, property_id: int) -> Optional[PropertyRecord]:
        """Get a property by ID."""

    @abstractmethod
    async def list_properties(self) -> List[PropertyRecord]:
        """List all properties in creation order."""

    @abstractmethod
    async def get_properties_for_owner(self, owner_id: int) -> List[PropertyRecord]:
        """Properties owned by a user, in creation order."""

    @abstractmethod
    async def create_property(self, data: Payload) -> PropertyRecord:
        """Create a property."""

    @abstractmethod
    async def update_property(
        self, property_id: int, changes: Payload
    ) -> Optional[PropertyRecord]:
        """Merge changes into a property."""

    @abstractmethod
    async def delete_property(self, property_id: int) -> bool:
        """Delete a property."""

    # Tenant operations
    @abstractmethod
    async def get_tenant(self, tenant_id: int) -> Optional[TenantRecord]:
        """Get a tenant by ID."""

    @abstractmethod
    async def get_tenant_by_user_id(self, user_id: int) -> Optional[TenantRecord]:
        """First tenant profile belonging to a user."""

    @abstractmethod
    async def list_tenants(self) -> List[TenantRecord]:
        """List all tenants in creation order."""

    @abstractmethod
    async def create_tenant(self, data: Payload) -> TenantRecord:
        """Create a tenant profile."""

    @abstractmethod
    async def update_tenant(
        self, tenant_id: int, changes: Payload
    ) -> Optional[TenantRecord]:
        """Merge changes into a tenant profile."""

    @abstractmethod
    async def delete_tenant(self, tenant_id: int) -> bool:
        """Delete a tenant profile."""

    @abstractmethod
    async def get_tenants_for_owner(self, owner_id: int) -> List[TenantRecord]:
        """Tenants holding a lease on any property of the owner, each listed once."""

    @abstractmethod
    async def get_tenant_with_user(self, tenant_id: int) -> Optional[TenantWithUser]:
        """A tenant with its user attached; None if either is missing."""

    @abstractmethod
    async def get_tenants_with_users(self) -> List[TenantWithUser]:
        """Every tenant whose user still exists, with the user attached."""

    @abstractmethod
    async def get_tenants_with_users_for_owner(
        self, owner_id: int
    ) -> List[TenantWithUser]:
        """get_tenants_for_owner followed by the same user join."""

    # Lease operations
    @abstractmethod
    async def get_lease(self, lease_id: int) -> Optional[LeaseRecord]:
        """Get a lease by ID."""

    @abstractmethod
    async def list_leases(self) -> List[LeaseRecord]:
        """List all leases in creation order."""

    @abstractmethod
    async def get_leases_for_property(self, property_id: int) -> List[LeaseRecord]:
        """Leases on a property, in creation order."""

    @abstractmethod
    async def get_leases_for_tenant(self, tenant_id: int) -> List[LeaseRecord]:
        """Leases held by a tenant, in creation order."""

    @abstractmethod
    async def create_lease(self, data: Payload) -> LeaseRecord:
        """Create a lease."""

    @abstractmethod
    async def update_lease(self, lease_id: int, changes: Payload) -> Optional[LeaseRecord]:
        """Merge changes into a lease."""

    @abstractmethod
    async def delete_lease(self, lease_id: int) -> bool:
        """Delete a lease."""

    # Maintenance operations
    @abstractmethod
    async def get_maintenance_request(
        self, request_id: int
    ) -> Optional[MaintenanceRequestRecord]:
        """Get a maintenance request by ID."""

    @abstractmethod
    async def list_maintenance_requests(self) -> List[MaintenanceRequestRecord]:
        """List all maintenance requests in creation order."""

    @abstractmethod
    async def get_maintenance_requests_for_property(
        self, property_id: int
    ) -> List[MaintenanceRequestRecord]:
        """Maintenance requests filed against a property."""

    @abstractmethod
    async def get_maintenance_requests_for_tenant(
        self, tenant_id: int
    ) -> List[MaintenanceRequestRecord]:
        """Maintenance requests filed by a tenant."""

    @abstractmethod
    async def create_maintenance_request(self, data: Payload) -> MaintenanceRequestRecord:
        """Create a maintenance request."""

    @abstractmethod
    async def update_maintenance_request(
        self, request_id: int, changes: Payload
    ) -> Optional[MaintenanceRequestRecord]:
        """Merge changes into a maintenance request."""

    @abstractmethod
    async def delete_maintenance_request(self, request_id: int) -> bool:
        """Delete a maintenance request."""

    # Lease application operations
    @abstractmethod
    async def get_lease_application(
        self, application_id: int
    ) -> Optional[LeaseApplicationRecord]:
        """Get a lease application by ID."""

    @abstractmethod
    async def list_lease_applications(self) -> List[LeaseApplicationRecord]:
        """List all lease applications in creation order."""

    @abstractmethod
    async def get_lease_applications_for_property(
        self, property_id: int
    ) -> List[LeaseApplicationRecord]:
        """Applications submitted for a property."""

    @abstractmethod
    async def get_lease_applications_for_user(
        self, applicant_id: int
    ) -> List[LeaseApplicationRecord]:
        """Applications submitted by a user."""

    @abstractmethod
    async def create_lease_application(self, data: Payload) -> LeaseApplicationRecord:
        """Create a lease application."""

    @abstractmethod
    async def update_lease_application(
        self, application_id: int, changes: Payload
    ) -> Optional[LeaseApplicationRecord]:
        """Merge changes into a lease application and refresh updated_at."""

    @abstractmethod
    async def delete_lease_application(self, application_id: int) -> bool:
        """Delete a lease application."""

    # Rent payment operations
    @abstractmethod
    async def get_rent_payment(self, payment_id: int) -> Optional[RentPaymentRecord]:
        """Get a rent payment by ID."""

    @abstractmethod
    async def list_rent_payments(self) -> List[RentPaymentRecord]:
        """List all rent payments in creation order."""

    @abstractmethod
    async def get_rent_payments_for_lease(self, lease_id: int) -> List[RentPaymentRecord]:
        """Payments recorded against a lease."""

    @abstractmethod
    async def get_rent_payments_for_tenant(
        self, tenant_id: int
    ) -> List[RentPaymentRecord]:
        """Payments recorded for a tenant."""

    @abstractmethod
    async def get_rent_payments_for_owner(self, owner_id: int) -> List[RentPaymentRecord]:
        """Payments on leases of any property the owner holds."""

    @abstractmethod
    async def create_rent_payment(self, data: Payload) -> RentPaymentRecord:
        """Create a rent payment."""

    @abstractmethod
    async def update_rent_payment(
        self, payment_id: int, changes: Payload
    ) -> Optional[RentPaymentRecord]:
        """Merge changes into a rent payment and refresh updated_at."""

    @abstractmethod
    async def delete_rent_payment(self, payment_id: int) -> bool:
        """Delete a rent payment."""

    # Dashboard queries
    @abstractmethod
    async def get_property_count(self) -> int:
        """Number of properties."""

    @abstractmethod
    async def get_active_lease_count(self) -> int:
        """Number of leases whose status is active."""

    @abstractmethod
    async def get_tenant_count(self) -> int:
        """Number of tenant profiles."""

    @abstractmethod
    async def get_maintenance_request_count(self) -> int:
        """Number of maintenance requests."""

    @abstractmethod
    async def get_recent_users(self, limit: Optional[int] = None) -> List[UserRecord]:
        """Newest users first, ties in creation order, at most ``limit``.

        ``limit`` defaults to ``settings.RECENT_USERS_LIMIT``; zero or less
        yields an empty list.
        """

    async def get_dashboard_stats(self) -> DashboardStats:
        """Bundle the four dashboard counts."""
        return DashboardStats(
            property_count=await self.get_property_count(),
            active_lease_count=await self.get_active_lease_count(),
            tenant_count=await self.get_tenant_count(),
            maintenance_request_count=await self.get_maintenance_request_count(),
        )
