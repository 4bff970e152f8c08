"""
SQL storage backend built on the async repositories.

Every public operation opens its own session from the injected
``async_sessionmaker``, runs one repository call and closes the session.
There is no transaction spanning several operations.
"""

import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import StorageBackendError
from core.mapper import ORMMapper
from core.settings import settings
from repos.lease_application_repo import LeaseApplicationRepo
from repos.lease_repo import LeaseRepo
from repos.maintenance_repo import MaintenanceRequestRepo
from repos.property_repo import PropertyRepo
from repos.rent_payment_repo import RentPaymentRepo
from repos.tenant_repo import TenantRepo
from repos.user_repo import UserRepo
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

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


class DatabaseStorage(StorageInterface):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str):
        async with self.session_factory() as db:
            try:
                yield db
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.exception("Storage operation %s failed", operation)
                raise StorageBackendError(
                    f"Storage operation {operation} failed",
                    operation=operation,
                    original_error=exc,
                ) from exc

    async def _one(
        self, operation: str, schema: Type[R], call: Callable[[AsyncSession], Awaitable]
    ) -> Optional[R]:
        async with self._session(operation) as db:
            item = await call(db)
            if item is None:
                logger.debug("%s: nothing found", operation)
                return None
            return ORMMapper.one(item, schema)

    async def _many(
        self, operation: str, schema: Type[R], call: Callable[[AsyncSession], Awaitable]
    ) -> List[R]:
        async with self._session(operation) as db:
            return ORMMapper.many(await call(db), schema)

    async def _scalar(self, operation: str, call: Callable[[AsyncSession], Awaitable]):
        async with self._session(operation) as db:
            return await call(db)

    async def _create(self, kind: str, repo_cls, schema: Type[R], values: dict) -> R:
        record = await self._one(
            f"create_{kind}", schema, lambda db: repo_cls(db).create(values)
        )
        logger.info("Created %s %s", kind.replace("_", " "), record.id)
        return record

    async def _update(
        self, kind: str, repo_cls, schema: Type[R], item_id: int, values: dict
    ) -> Optional[R]:
        record = await self._one(
            f"update_{kind}", schema, lambda db: repo_cls(db).update(item_id, values)
        )
        if record is not None:
            logger.info("Updated %s %s", kind.replace("_", " "), item_id)
        return record

    async def _delete(self, kind: str, repo_cls, item_id: int) -> bool:
        deleted = await self._scalar(
            f"delete_{kind}", lambda db: repo_cls(db).delete(item_id)
        )
        if deleted:
            logger.info("Deleted %s %s", kind.replace("_", " "), item_id)
        else:
            logger.debug("%s %s not found, nothing to delete", kind, item_id)
        return deleted

    @staticmethod
    def _with_users(rows) -> List[TenantWithUser]:
        return [
            TenantWithUser.model_validate(
                {
                    **ORMMapper.one(tenant, TenantRecord).model_dump(),
                    "user": ORMMapper.one(user, UserRecord).model_dump(),
                }
            )
            for tenant, user in rows
        ]

    # User operations

    async def get_user(self, user_id: int) -> Optional[UserRecord]:
        return await self._one("get_user", UserRecord, lambda db: UserRepo(db).get_by_id(user_id))

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        return await self._one(
            "get_user_by_username",
            UserRecord,
            lambda db: UserRepo(db).get_by_username(username),
        )

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        return await self._one(
            "get_user_by_email", UserRecord, lambda db: UserRepo(db).get_by_email(email)
        )

    async def list_users(self) -> List[UserRecord]:
        return await self._many("list_users", UserRecord, lambda db: UserRepo(db).list_all())

    async def create_user(self, data: Payload) -> UserRecord:
        values = ORMMapper.coerce(data, UserCreate).model_dump()
        return await self._create("user", UserRepo, UserRecord, values)

    async def update_user(self, user_id: int, changes: Payload) -> Optional[UserRecord]:
        values = ORMMapper.changes(changes, UserUpdate)
        return await self._update("user", UserRepo, UserRecord, user_id, values)

    async def delete_user(self, user_id: int) -> bool:
        return await self._delete("user", UserRepo, user_id)

    # Property operations

    async def get_property(self, property_id: int) -> Optional[PropertyRecord]:
        return await self._one(
            "get_property", PropertyRecord, lambda db: PropertyRepo(db).get_by_id(property_id)
        )

    async def list_properties(self) -> List[PropertyRecord]:
        return await self._many(
            "list_properties", PropertyRecord, lambda db: PropertyRepo(db).list_all()
        )

    async def get_properties_for_owner(self, owner_id: int) -> List[PropertyRecord]:
        return await self._many(
            "get_properties_for_owner",
            PropertyRecord,
            lambda db: PropertyRepo(db).for_owner(owner_id),
        )

    async def create_property(self, data: Payload) -> PropertyRecord:
        values = ORMMapper.coerce(data, PropertyCreate).model_dump()
        return await self._create("property", PropertyRepo, PropertyRecord, values)

    async def update_property(
        self, property_id: int, changes: Payload
    ) -> Optional[PropertyRecord]:
        values = ORMMapper.changes(changes, PropertyUpdate)
        return await self._update("property", PropertyRepo, PropertyRecord, property_id, values)

    async def delete_property(self, property_id: int) -> bool:
        return await self._delete("property", PropertyRepo, property_id)

    # Tenant operations

    async def get_tenant(self, tenant_id: int) -> Optional[TenantRecord]:
        return await self._one(
            "get_tenant", TenantRecord, lambda db: TenantRepo(db).get_by_id(tenant_id)
        )

    async def get_tenant_by_user_id(self, user_id: int) -> Optional[TenantRecord]:
        return await self._one(
            "get_tenant_by_user_id", TenantRecord, lambda db: TenantRepo(db).get_by_user(user_id)
        )

    async def list_tenants(self) -> List[TenantRecord]:
        return await self._many("list_tenants", TenantRecord, lambda db: TenantRepo(db).list_all())

    async def create_tenant(self, data: Payload) -> TenantRecord:
        values = ORMMapper.coerce(data, TenantCreate).model_dump()
        return await self._create("tenant", TenantRepo, TenantRecord, values)

    async def update_tenant(
        self, tenant_id: int, changes: Payload
    ) -> Optional[TenantRecord]:
        values = ORMMapper.changes(changes, TenantUpdate)
        return await self._update("tenant", TenantRepo, TenantRecord, tenant_id, values)

    async def delete_tenant(self, tenant_id: int) -> bool:
        return await self._delete("tenant", TenantRepo, tenant_id)

    async def get_tenants_for_owner(self, owner_id: int) -> List[TenantRecord]:
        return await self._many(
            "get_tenants_for_owner", TenantRecord, lambda db: TenantRepo(db).for_owner(owner_id)
        )

    async def get_tenant_with_user(self, tenant_id: int) -> Optional[TenantWithUser]:
        async with self._session("get_tenant_with_user") as db:
            row = await TenantRepo(db).with_user(tenant_id)
            if row is None:
                return None
            return self._with_users([row])[0]

    async def get_tenants_with_users(self) -> List[TenantWithUser]:
        async with self._session("get_tenants_with_users") as db:
            return self._with_users(await TenantRepo(db).all_with_users())

    async def get_tenants_with_users_for_owner(
        self, owner_id: int
    ) -> List[TenantWithUser]:
        async with self._session("get_tenants_with_users_for_owner") as db:
            return self._with_users(await TenantRepo(db).all_with_users(owner_id=owner_id))

    # Lease operations

    async def get_lease(self, lease_id: int) -> Optional[LeaseRecord]:
        return await self._one("get_lease", LeaseRecord, lambda db: LeaseRepo(db).get_by_id(lease_id))

    async def list_leases(self) -> List[LeaseRecord]:
        return await self._many("list_leases", LeaseRecord, lambda db: LeaseRepo(db).list_all())

    async def get_leases_for_property(self, property_id: int) -> List[LeaseRecord]:
        return await self._many(
            "get_leases_for_property",
            LeaseRecord,
            lambda db: LeaseRepo(db).for_property(property_id),
        )

    async def get_leases_for_tenant(self, tenant_id: int) -> List[LeaseRecord]:
        return await self._many(
            "get_leases_for_tenant", LeaseRecord, lambda db: LeaseRepo(db).for_tenant(tenant_id)
        )

    async def create_lease(self, data: Payload) -> LeaseRecord:
        values = ORMMapper.coerce(data, LeaseCreate).model_dump()
        return await self._create("lease", LeaseRepo, LeaseRecord, values)

    async def update_lease(self, lease_id: int, changes: Payload) -> Optional[LeaseRecord]:
        values = ORMMapper.changes(changes, LeaseUpdate)
        return await self._update("lease", LeaseRepo, LeaseRecord, lease_id, values)

    async def delete_lease(self, lease_id: int) -> bool:
        return await self._delete("lease", LeaseRepo, lease_id)

    # Maintenance operations

    async def get_maintenance_request(
        self, request_id: int
    ) -> Optional[MaintenanceRequestRecord]:
        return await self._one(
            "get_maintenance_request",
            MaintenanceRequestRecord,
            lambda db: MaintenanceRequestRepo(db).get_by_id(request_id),
        )

    async def list_maintenance_requests(self) -> List[MaintenanceRequestRecord]:
        return await self._many(
            "list_maintenance_requests",
            MaintenanceRequestRecord,
            lambda db: MaintenanceRequestRepo(db).list_all(),
        )

    async def get_maintenance_requests_for_property(
        self, property_id: int
    ) -> List[MaintenanceRequestRecord]:
        return await self._many(
            "get_maintenance_requests_for_property",
            MaintenanceRequestRecord,
            lambda db: MaintenanceRequestRepo(db).for_property(property_id),
        )

    async def get_maintenance_requests_for_tenant(
        self, tenant_id: int
    ) -> List[MaintenanceRequestRecord]:
        return await self._many(
            "get_maintenance_requests_for_tenant",
            MaintenanceRequestRecord,
            lambda db: MaintenanceRequestRepo(db).for_tenant(tenant_id),
        )

    async def create_maintenance_request(self, data: Payload) -> MaintenanceRequestRecord:
        values = ORMMapper.coerce(data, MaintenanceRequestCreate).model_dump()
        return await self._create(
            "maintenance_request", MaintenanceRequestRepo, MaintenanceRequestRecord, values
        )

    async def update_maintenance_request(
        self, request_id: int, changes: Payload
    ) -> Optional[MaintenanceRequestRecord]:
        values = ORMMapper.changes(changes, MaintenanceRequestUpdate)
        return await self._update(
            "maintenance_request",
            MaintenanceRequestRepo,
            MaintenanceRequestRecord,
            request_id,
            values,
        )

    async def delete_maintenance_request(self, request_id: int) -> bool:
        return await self._delete("maintenance_request", MaintenanceRequestRepo, request_id)

    # Lease application operations

    async def get_lease_application(
        self, application_id: int
    ) -> Optional[LeaseApplicationRecord]:
        return await self._one(
            "get_lease_application",
            LeaseApplicationRecord,
            lambda db: LeaseApplicationRepo(db).get_by_id(application_id),
        )

    async def list_lease_applications(self) -> List[LeaseApplicationRecord]:
        return await self._many(
            "list_lease_applications",
            LeaseApplicationRecord,
            lambda db: LeaseApplicationRepo(db).list_all(),
        )

    async def get_lease_applications_for_property(
        self, property_id: int
    ) -> List[LeaseApplicationRecord]:
        return await self._many(
            "get_lease_applications_for_property",
            LeaseApplicationRecord,
            lambda db: LeaseApplicationRepo(db).for_property(property_id),
        )

    async def get_lease_applications_for_user(
        self, applicant_id: int
    ) -> List[LeaseApplicationRecord]:
        return await self._many(
            "get_lease_applications_for_user",
            LeaseApplicationRecord,
            lambda db: LeaseApplicationRepo(db).for_applicant(applicant_id),
        )

    async def create_lease_application(self, data: Payload) -> LeaseApplicationRecord:
        values = ORMMapper.coerce(data, LeaseApplicationCreate).model_dump()
        return await self._create(
            "lease_application", LeaseApplicationRepo, LeaseApplicationRecord, values
        )

    async def update_lease_application(
        self, application_id: int, changes: Payload
    ) -> Optional[LeaseApplicationRecord]:
        values = ORMMapper.changes(changes, LeaseApplicationUpdate)
        return await self._update(
            "lease_application",
            LeaseApplicationRepo,
            LeaseApplicationRecord,
            application_id,
            values,
        )

    async def delete_lease_application(self, application_id: int) -> bool:
        return await self._delete("lease_application", LeaseApplicationRepo, application_id)

    # Rent payment operations

    async def get_rent_payment(self, payment_id: int) -> Optional[RentPaymentRecord]:
        return await self._one(
            "get_rent_payment",
            RentPaymentRecord,
            lambda db: RentPaymentRepo(db).get_by_id(payment_id),
        )

    async def list_rent_payments(self) -> List[RentPaymentRecord]:
        return await self._many(
            "list_rent_payments", RentPaymentRecord, lambda db: RentPaymentRepo(db).list_all()
        )

    async def get_rent_payments_for_lease(self, lease_id: int) -> List[RentPaymentRecord]:
        return await self._many(
            "get_rent_payments_for_lease",
            RentPaymentRecord,
            lambda db: RentPaymentRepo(db).for_lease(lease_id),
        )

    async def get_rent_payments_for_tenant(
        self, tenant_id: int
    ) -> List[RentPaymentRecord]:
        return await self._many(
            "get_rent_payments_for_tenant",
            RentPaymentRecord,
            lambda db: RentPaymentRepo(db).for_tenant(tenant_id),
        )

    async def get_rent_payments_for_owner(self, owner_id: int) -> List[RentPaymentRecord]:
        return await self._many(
            "get_rent_payments_for_owner",
            RentPaymentRecord,
            lambda db: RentPaymentRepo(db).for_owner(owner_id),
        )

    async def create_rent_payment(self, data: Payload) -> RentPaymentRecord:
        values = ORMMapper.coerce(data, RentPaymentCreate).model_dump()
        return await self._create("rent_payment", RentPaymentRepo, RentPaymentRecord, values)

    async def update_rent_payment(
        self, payment_id: int, changes: Payload
    ) -> Optional[RentPaymentRecord]:
        values = ORMMapper.changes(changes, RentPaymentUpdate)
        return await self._update(
            "rent_payment", RentPaymentRepo, RentPaymentRecord, payment_id, values
        )

    async def delete_rent_payment(self, payment_id: int) -> bool:
        return await self._delete("rent_payment", RentPaymentRepo, payment_id)

    # Dashboard queries

    async def get_property_count(self) -> int:
        return await self._scalar("get_property_count", lambda db: PropertyRepo(db).count())

    async def get_active_lease_count(self) -> int:
        return await self._scalar("get_active_lease_count", lambda db: LeaseRepo(db).count_active())

    async def get_tenant_count(self) -> int:
        return await self._scalar("get_tenant_count", lambda db: TenantRepo(db).count())

    async def get_maintenance_request_count(self) -> int:
        return await self._scalar(
            "get_maintenance_request_count", lambda db: MaintenanceRequestRepo(db).count()
        )

    async def get_recent_users(self, limit: Optional[int] = None) -> List[UserRecord]:
        if limit is None:
            limit = settings.RECENT_USERS_LIMIT
        return await self._many("get_recent_users", UserRecord, lambda db: UserRepo(db).recent(limit))
