"""
Replays one scripted session against both backends and compares every query.
"""
from datetime import datetime, timedelta, timezone

import pytest

from core.exceptions import DuplicateError
from helpers import (
    application_data,
    lease_data,
    maintenance_data,
    payment_data,
    property_data,
    tenant_data,
    user_data,
)
from storage.seed import seed_storage

TIMESTAMPS = {"created_at", "updated_at"}


def strip(value):
    """Drop store-assigned timestamps so records from both backends compare."""
    if value is None or isinstance(value, (bool, int)):
        return value
    if isinstance(value, list):
        return [strip(item) for item in value]
    dumped = value.model_dump(exclude=TIMESTAMPS)
    if "user" in dumped:
        dumped["user"].pop("created_at", None)
    return dumped


async def play(storage):
    """Run the script and return a snapshot of every query the interface offers."""
    await seed_storage(storage)
    owner = await storage.create_user(user_data("Owner", role="property_owner"))
    renter = await storage.create_user(user_data("renter"))
    gone = await storage.create_user(user_data("gone"))
    with pytest.raises(DuplicateError):
        await storage.create_user(user_data("OWNER", "owner2@example.com"))

    loft = await storage.create_property(property_data(owner.id, "Loft"))
    villa = await storage.create_property(property_data(owner.id, "Villa", price=5100))
    renter_tenant = await storage.create_tenant(tenant_data(renter.id))
    orphan_tenant = await storage.create_tenant(tenant_data(gone.id))
    lease = await storage.create_lease(lease_data(loft.id, renter_tenant.id))
    await storage.create_lease(lease_data(villa.id, renter_tenant.id))
    await storage.create_lease(lease_data(villa.id, orphan_tenant.id, status="ended"))
    await storage.create_maintenance_request(maintenance_data(loft.id, renter_tenant.id))
    application = await storage.create_lease_application(application_data(villa.id, renter.id))
    payment = await storage.create_rent_payment(payment_data(lease.id, renter_tenant.id))

    await storage.update_user(renter.id, {"first_name": "Rita", "status": "inactive"})
    await storage.update_property(villa.id, {"status": "leased"})
    await storage.update_lease_application(application.id, {"status": "approved"})
    await storage.update_rent_payment(payment.id, {"status": "paid"})
    await storage.delete_user(gone.id)
    await storage.delete_property(2)
    assert await storage.delete_property(2) is False
    assert await storage.update_lease(999, {"status": "ended"}) is None

    snapshot = {
        "users": await storage.list_users(),
        "user_by_name": await storage.get_user_by_username("owner"),
        "user_by_email": await storage.get_user_by_email("RENTER@example.com"),
        "properties": await storage.list_properties(),
        "owner_properties": await storage.get_properties_for_owner(owner.id),
        "tenants": await storage.list_tenants(),
        "tenant_by_user": await storage.get_tenant_by_user_id(renter.id),
        "owner_tenants": await storage.get_tenants_for_owner(owner.id),
        "tenants_with_users": await storage.get_tenants_with_users(),
        "owner_tenants_with_users": await storage.get_tenants_with_users_for_owner(owner.id),
        "tenant_with_user": await storage.get_tenant_with_user(orphan_tenant.id),
        "leases": await storage.list_leases(),
        "villa_leases": await storage.get_leases_for_property(villa.id),
        "renter_leases": await storage.get_leases_for_tenant(renter_tenant.id),
        "requests": await storage.list_maintenance_requests(),
        "loft_requests": await storage.get_maintenance_requests_for_property(loft.id),
        "tenant_requests": await storage.get_maintenance_requests_for_tenant(1),
        "applications": await storage.list_lease_applications(),
        "villa_applications": await storage.get_lease_applications_for_property(villa.id),
        "renter_applications": await storage.get_lease_applications_for_user(renter.id),
        "payments": await storage.list_rent_payments(),
        "lease_payments": await storage.get_rent_payments_for_lease(lease.id),
        "tenant_payments": await storage.get_rent_payments_for_tenant(renter_tenant.id),
        "owner_payments": await storage.get_rent_payments_for_owner(owner.id),
        "property_count": await storage.get_property_count(),
        "active_leases": await storage.get_active_lease_count(),
        "tenant_count": await storage.get_tenant_count(),
        "request_count": await storage.get_maintenance_request_count(),
        "recent_count": len(await storage.get_recent_users(3)),
        "recent_ids": sorted(u.id for u in await storage.get_recent_users(10)),
        "stats": await storage.get_dashboard_stats(),
    }
    return {key: strip(value) for key, value in snapshot.items()}


async def test_backends_agree(mem_storage, db_storage):
    memory = await play(mem_storage)
    database = await play(db_storage)

    assert memory.keys() == database.keys()
    for key in memory:
        assert memory[key] == database[key], key


async def test_explicit_none_is_kept(mem_storage, db_storage):
    """Test that an explicit None on a field with a schema default is stored as None."""
    results = []
    for storage in (mem_storage, db_storage):
        application = await storage.create_lease_application(
            application_data(1, 1, additional_occupants=None)
        )
        payment = await storage.create_rent_payment(payment_data(1, 1, late_fee=None))
        results.append(
            (
                (await storage.get_lease_application(application.id)).additional_occupants,
                (await storage.get_rent_payment(payment.id)).late_fee,
            )
        )

    assert results == [(None, None), (None, None)]


async def test_omitted_defaults_match(mem_storage, db_storage):
    results = []
    for storage in (mem_storage, db_storage):
        application = await storage.create_lease_application(application_data(1, 1))
        payment = await storage.create_rent_payment(payment_data(1, 1))
        results.append((application.additional_occupants, payment.late_fee))

    assert results == [(0, 0), (0, 0)]


async def test_aware_datetimes_stored_as_naive_utc(mem_storage, db_storage):
    """Test that both backends convert aware datetimes to the same naive UTC instant."""
    plus_two = timezone(timedelta(hours=2))
    for storage in (mem_storage, db_storage):
        lease = await storage.create_lease(
            lease_data(
                1,
                1,
                start_date=datetime(2024, 1, 1, 12, tzinfo=timezone.utc),
                end_date=datetime(2024, 12, 31, 14, tzinfo=plus_two),
            )
        )
        request = await storage.create_maintenance_request(maintenance_data(1))
        resolved = await storage.update_maintenance_request(
            request.id, {"resolved_at": datetime(2024, 3, 5, 16, 30, tzinfo=plus_two)}
        )

        stored = await storage.get_lease(lease.id)
        assert stored.start_date == datetime(2024, 1, 1, 12)
        assert stored.start_date.tzinfo is None
        assert stored.end_date == datetime(2024, 12, 31, 12)
        assert resolved.resolved_at == datetime(2024, 3, 5, 14, 30)
        assert (await storage.get_maintenance_request(request.id)).resolved_at == (
            datetime(2024, 3, 5, 14, 30)
        )
