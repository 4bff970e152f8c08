"""
In-process storage backend.

Records live in one insertion-ordered dict per entity kind and every query
is a linear scan over it. Ids come from a per-kind counter starting at 1 and
are never reused, even after deletes.

The public coroutines never await in the middle of an operation, so each
one is atomic with respect to other asyncio tasks; the instance lock covers
hosts that share one store across threads. Stored records are never handed
out, callers always receive deep copies.
"""

import itertools
import logging
import threading
from typing import Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel

from core.exceptions import DuplicateError
from core.mapper import ORMMapper
from core.settings import settings
from models.enums import LeaseStatus
from models.utils import utc_now
from schemas.schema import (
    LeaseApplicationCreate,
    LeaseApplicationRecord,
    LeaseApplicationUpdate,
    LeaseCreate,
    LeaseRecord,
    LeaseUpdate,
    MaintenanceRequestCreate,
    MaintenanceRequestRecord,
    MaintenanceRequestUpdate,
    PropertyCreate,
    PropertyRecord,
    PropertyUpdate,
    RentPaymentCreate,
    RentPaymentRecord,
    RentPaymentUpdate,
    TenantCreate,
    TenantRecord,
    TenantUpdate,
    TenantWithUser,
    UserCreate,
    UserRecord,
    UserUpdate,
)
from storage.interface import Payload, StorageInterface
from storage.seed import (
    DEMO_ADMIN,
    DEMO_PROPERTIES,
    DEMO_TENANT_USER,
    demo_maintenance_request,
    demo_property,
    demo_tenant,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

USERS = "user"
PROPERTIES = "property"
TENANTS = "tenant"
LEASES = "lease"
MAINTENANCE = "maintenance request"
APPLICATIONS = "lease application"
PAYMENTS = "rent payment"

KINDS = (USERS, PROPERTIES, TENANTS, LEASES, MAINTENANCE, APPLICATIONS, PAYMENTS)

# kinds whose records carry updated_at
TOUCHED_ON_UPDATE = {TENANTS, APPLICATIONS, PAYMENTS}


class MemStorage(StorageInterface):
    def __init__(self, seed_demo_data: Optional[bool] = None):
        self._lock = threading.RLock()
        self._tables: Dict[str, Dict[int, BaseModel]] = {kind: {} for kind in KINDS}
        self._counters = {kind: itertools.count(1) for kind in KINDS}

        if seed_demo_data is None:
            seed_demo_data = settings.SEED_DEMO_DATA
        if seed_demo_data:
            self._seed()

    # Internal helpers, synchronous so the constructor can seed

    def _seed(self) -> None:
        admin = self._insert_user(DEMO_ADMIN)
        tenant_user = self._insert_user(DEMO_TENANT_USER)
        properties = [
            self._insert(PROPERTIES, PropertyRecord, demo_property(admin.id, row))
            for row in DEMO_PROPERTIES
        ]
        tenant = self._insert(TENANTS, TenantRecord, demo_tenant(tenant_user.id))
        self._insert(
            MAINTENANCE,
            MaintenanceRequestRecord,
            demo_maintenance_request(properties[0].id, tenant.id),
        )
        logger.info("Memory storage seeded with demo data")

    def _insert(self, kind: str, record_cls: Type[R], payload: BaseModel) -> R:
        with self._lock:
            now = utc_now()
            values = payload.model_dump()
            values["id"] = next(self._counters[kind])
            values["created_at"] = now
            if kind in TOUCHED_ON_UPDATE:
                values["updated_at"] = now
            record = record_cls.model_validate(values)
            self._tables[kind][record.id] = record
            logger.info("Created %s %s", kind, record.id)
            return record.model_copy(deep=True)

    def _get(self, kind: str, item_id: int) -> Optional[R]:
        with self._lock:
            record = self._tables[kind].get(item_id)
            if record is None:
                logger.debug("%s %s not found", kind.capitalize(), item_id)
                return None
            return record.model_copy(deep=True)

    def _where(self, kind: str, predicate: Callable[[BaseModel], bool]) -> List[R]:
        with self._lock:
            return [
                record.model_copy(deep=True)
                for record in self._tables[kind].values()
                if predicate(record)
            ]

    def _count(self, kind: str, predicate: Callable[[BaseModel], bool] = None) -> int:
        with self._lock:
            if predicate is None:
                return len(self._tables[kind])
            return sum(1 for record in self._tables[kind].values() if predicate(record))

    def _patch(self, kind: str, item_id: int, changes: dict) -> Optional[R]:
        with self._lock:
            current = self._tables[kind].get(item_id)
            if current is None:
                logger.debug("%s %s not found, nothing to update", kind.capitalize(), item_id)
                return None
            if kind in TOUCHED_ON_UPDATE:
                changes = {**changes, "updated_at": utc_now()}
            updated = current.model_copy(update=changes, deep=True)
            self._tables[kind][item_id] = updated
            logger.info("Updated %s %s", kind, item_id)
            return updated.model_copy(deep=True)

    def _remove(self, kind: str, item_id: int) -> bool:
        with self._lock:
            if self._tables[kind].pop(item_id, None) is None:
                logger.debug("%s %s not found, nothing to delete", kind.capitalize(), item_id)
                return False
            logger.info("Deleted %s %s", kind, item_id)
            return True

    def _find_duplicate(
        self, username: Optional[str], email: Optional[str], exclude_id: Optional[int] = None
    ) -> Optional[DuplicateError]:
        for field, value in (("username", username), ("email", email)):
            if value is None:
                continue
            wanted = value.lower()
            for user in self._tables[USERS].values():
                if user.id != exclude_id and getattr(user, field).lower() == wanted:
                    return DuplicateError("User", field, value)
        return None

    def _insert_user(self, payload: UserCreate) -> UserRecord:
        with self._lock:
            duplicate = self._find_duplicate(payload.username, payload.email)
            if duplicate is not None:
                raise duplicate
            return self._insert(USERS, UserRecord, payload)

    def _first_user_by(self, field: str, value: str) -> Optional[UserRecord]:
        wanted = value.lower()
        matches = self._where(USERS, lambda u: getattr(u, field).lower() == wanted)
        return matches[0] if matches else None

    def _owned_property_ids(self, owner_id: int) -> set:
        return {
            p.id for p in self._tables[PROPERTIES].values() if p.owner_id == owner_id
        }

    def _owned_leases(self, owner_id: int) -> List[LeaseRecord]:
        property_ids = self._owned_property_ids(owner_id)
        return [
            lease
            for lease in self._tables[LEASES].values()
            if lease.property_id in property_ids
        ]

    def _owned_tenants(self, owner_id: int) -> List[TenantRecord]:
        tenant_ids = {lease.tenant_id for lease in self._owned_leases(owner_id)}
        return [t for t in self._tables[TENANTS].values() if t.id in tenant_ids]

    def _join_user(self, tenants: List[TenantRecord]) -> List[TenantWithUser]:
        joined = []
        for tenant in tenants:
            user = self._tables[USERS].get(tenant.user_id)
            if user is None:
                continue
            joined.append(
                TenantWithUser.model_validate(
                    {**tenant.model_dump(), "user": user.model_dump()}
                )
            )
        return joined

    # User operations

    async def get_user(self, user_id: int) -> Optional[UserRecord]:
        return self._get(USERS, user_id)

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        return self._first_user_by("username", username)

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        return self._first_user_by("email", email)

    async def list_users(self) -> List[UserRecord]:
        return self._where(USERS, lambda _: True)

    async def create_user(self, data: Payload) -> UserRecord:
        return self._insert_user(ORMMapper.coerce(data, UserCreate))

    async def update_user(self, user_id: int, changes: Payload) -> Optional[UserRecord]:
        values = ORMMapper.changes(changes, UserUpdate)
        with self._lock:
            if user_id not in self._tables[USERS]:
                return None
            duplicate = self._find_duplicate(
                values.get("username"), values.get("email"), exclude_id=user_id
            )
            if duplicate is not None:
                raise duplicate
            return self._patch(USERS, user_id, values)

    async def delete_user(self, user_id: int) -> bool:
        return self._remove(USERS, user_id)

    # Property operations

    async def get_property(self, property_id: int) -> Optional[PropertyRecord]:
        return self._get(PROPERTIES, property_id)

    async def list_properties(self) -> List[PropertyRecord]:
        return self._where(PROPERTIES, lambda _: True)

    async def get_properties_for_owner(self, owner_id: int) -> List[PropertyRecord]:
        return self._where(PROPERTIES, lambda p: p.owner_id == owner_id)

    async def create_property(self, data: Payload) -> PropertyRecord:
        return self._insert(PROPERTIES, PropertyRecord, ORMMapper.coerce(data, PropertyCreate))

    async def update_property(
        self, property_id: int, changes: Payload
    ) -> Optional[PropertyRecord]:
        return self._patch(PROPERTIES, property_id, ORMMapper.changes(changes, PropertyUpdate))

    async def delete_property(self, property_id: int) -> bool:
        return self._remove(PROPERTIES, property_id)

    # Tenant operations

    async def get_tenant(self, tenant_id: int) -> Optional[TenantRecord]:
        return self._get(TENANTS, tenant_id)

    async def get_tenant_by_user_id(self, user_id: int) -> Optional[TenantRecord]:
        matches = self._where(TENANTS, lambda t: t.user_id == user_id)
        return matches[0] if matches else None

    async def list_tenants(self) -> List[TenantRecord]:
        return self._where(TENANTS, lambda _: True)

    async def create_tenant(self, data: Payload) -> TenantRecord:
        return self._insert(TENANTS, TenantRecord, ORMMapper.coerce(data, TenantCreate))

    async def update_tenant(
        self, tenant_id: int, changes: Payload
    ) -> Optional[TenantRecord]:
        return self._patch(TENANTS, tenant_id, ORMMapper.changes(changes, TenantUpdate))

    async def delete_tenant(self, tenant_id: int) -> bool:
        return self._remove(TENANTS, tenant_id)

    async def get_tenants_for_owner(self, owner_id: int) -> List[TenantRecord]:
        with self._lock:
            return [t.model_copy(deep=True) for t in self._owned_tenants(owner_id)]

    async def get_tenant_with_user(self, tenant_id: int) -> Optional[TenantWithUser]:
        with self._lock:
            tenant = self._tables[TENANTS].get(tenant_id)
            if tenant is None:
                return None
            joined = self._join_user([tenant])
            return joined[0] if joined else None

    async def get_tenants_with_users(self) -> List[TenantWithUser]:
        with self._lock:
            return self._join_user(list(self._tables[TENANTS].values()))

    async def get_tenants_with_users_for_owner(
        self, owner_id: int
    ) -> List[TenantWithUser]:
        with self._lock:
            return self._join_user(self._owned_tenants(owner_id))

    # Lease operations

    async def get_lease(self, lease_id: int) -> Optional[LeaseRecord]:
        return self._get(LEASES, lease_id)

    async def list_leases(self) -> List[LeaseRecord]:
        return self._where(LEASES, lambda _: True)

    async def get_leases_for_property(self, property_id: int) -> List[LeaseRecord]:
        return self._where(LEASES, lambda lease: lease.property_id == property_id)

    async def get_leases_for_tenant(self, tenant_id: int) -> List[LeaseRecord]:
        return self._where(LEASES, lambda lease: lease.tenant_id == tenant_id)

    async def create_lease(self, data: Payload) -> LeaseRecord:
        return self._insert(LEASES, LeaseRecord, ORMMapper.coerce(data, LeaseCreate))

    async def update_lease(self, lease_id: int, changes: Payload) -> Optional[LeaseRecord]:
        return self._patch(LEASES, lease_id, ORMMapper.changes(changes, LeaseUpdate))

    async def delete_lease(self, lease_id: int) -> bool:
        return self._remove(LEASES, lease_id)

    # Maintenance operations

    async def get_maintenance_request(
        self, request_id: int
    ) -> Optional[MaintenanceRequestRecord]:
        return self._get(MAINTENANCE, request_id)

    async def list_maintenance_requests(self) -> List[MaintenanceRequestRecord]:
        return self._where(MAINTENANCE, lambda _: True)

    async def get_maintenance_requests_for_property(
        self, property_id: int
    ) -> List[MaintenanceRequestRecord]:
        return self._where(MAINTENANCE, lambda r: r.property_id == property_id)

    async def get_maintenance_requests_for_tenant(
        self, tenant_id: int
    ) -> List[MaintenanceRequestRecord]:
        return self._where(MAINTENANCE, lambda r: r.tenant_id == tenant_id)

    async def create_maintenance_request(self, data: Payload) -> MaintenanceRequestRecord:
        payload = ORMMapper.coerce(data, MaintenanceRequestCreate)
        return self._insert(MAINTENANCE, MaintenanceRequestRecord, payload)

    async def update_maintenance_request(
        self, request_id: int, changes: Payload
    ) -> Optional[MaintenanceRequestRecord]:
        values = ORMMapper.changes(changes, MaintenanceRequestUpdate)
        return self._patch(MAINTENANCE, request_id, values)

    async def delete_maintenance_request(self, request_id: int) -> bool:
        return self._remove(MAINTENANCE, request_id)

    # Lease application operations

    async def get_lease_application(
        self, application_id: int
    ) -> Optional[LeaseApplicationRecord]:
        return self._get(APPLICATIONS, application_id)

    async def list_lease_applications(self) -> List[LeaseApplicationRecord]:
        return self._where(APPLICATIONS, lambda _: True)

    async def get_lease_applications_for_property(
        self, property_id: int
    ) -> List[LeaseApplicationRecord]:
        return self._where(APPLICATIONS, lambda a: a.property_id == property_id)

    async def get_lease_applications_for_user(
        self, applicant_id: int
    ) -> List[LeaseApplicationRecord]:
        return self._where(APPLICATIONS, lambda a: a.applicant_id == applicant_id)

    async def create_lease_application(self, data: Payload) -> LeaseApplicationRecord:
        payload = ORMMapper.coerce(data, LeaseApplicationCreate)
        return self._insert(APPLICATIONS, LeaseApplicationRecord, payload)

    async def update_lease_application(
        self, application_id: int, changes: Payload
    ) -> Optional[LeaseApplicationRecord]:
        values = ORMMapper.changes(changes, LeaseApplicationUpdate)
        return self._patch(APPLICATIONS, application_id, values)

    async def delete_lease_application(self, application_id: int) -> bool:
        return self._remove(APPLICATIONS, application_id)

    # Rent payment operations

    async def get_rent_payment(self, payment_id: int) -> Optional[RentPaymentRecord]:
        return self._get(PAYMENTS, payment_id)

    async def list_rent_payments(self) -> List[RentPaymentRecord]:
        return self._where(PAYMENTS, lambda _: True)

    async def get_rent_payments_for_lease(self, lease_id: int) -> List[RentPaymentRecord]:
        return self._where(PAYMENTS, lambda p: p.lease_id == lease_id)

    async def get_rent_payments_for_tenant(
        self, tenant_id: int
    ) -> List[RentPaymentRecord]:
        return self._where(PAYMENTS, lambda p: p.tenant_id == tenant_id)

    async def get_rent_payments_for_owner(self, owner_id: int) -> List[RentPaymentRecord]:
        with self._lock:
            lease_ids = {lease.id for lease in self._owned_leases(owner_id)}
            return self._where(PAYMENTS, lambda p: p.lease_id in lease_ids)

    async def create_rent_payment(self, data: Payload) -> RentPaymentRecord:
        payload = ORMMapper.coerce(data, RentPaymentCreate)
        return self._insert(PAYMENTS, RentPaymentRecord, payload)

    async def update_rent_payment(
        self, payment_id: int, changes: Payload
    ) -> Optional[RentPaymentRecord]:
        values = ORMMapper.changes(changes, RentPaymentUpdate)
        return self._patch(PAYMENTS, payment_id, values)

    async def delete_rent_payment(self, payment_id: int) -> bool:
        return self._remove(PAYMENTS, payment_id)

    # Dashboard queries

    async def get_property_count(self) -> int:
        return self._count(PROPERTIES)

    async def get_active_lease_count(self) -> int:
        return self._count(LEASES, lambda lease: lease.status == LeaseStatus.ACTIVE)

    async def get_tenant_count(self) -> int:
        return self._count(TENANTS)

    async def get_maintenance_request_count(self) -> int:
        return self._count(MAINTENANCE)

    async def get_recent_users(self, limit: Optional[int] = None) -> List[UserRecord]:
        if limit is None:
            limit = settings.RECENT_USERS_LIMIT
        if limit <= 0:
            return []
        with self._lock:
            # sorted() is stable with reverse=True, so equal timestamps keep id order
            newest = sorted(
                self._tables[USERS].values(), key=lambda u: u.created_at, reverse=True
            )
            return [user.model_copy(deep=True) for user in newest[:limit]]
