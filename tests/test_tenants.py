"""
Tests for tenant operations and the owner-scoped traversals.
"""
import pytest
from pydantic import ValidationError

from helpers import lease_data, property_data, tenant_data, user_data
from models.enums import TenantStatus
from schemas.schema import TenantWithUser


async def make_owner_with_tenant(storage, owner_name="owner", tenant_name="tenant"):
    owner = await storage.create_user(user_data(owner_name, role="property_owner"))
    tenant_user = await storage.create_user(user_data(tenant_name))
    prop = await storage.create_property(property_data(owner.id))
    tenant = await storage.create_tenant(tenant_data(tenant_user.id))
    return owner, tenant_user, prop, tenant


async def test_create_and_get_tenant(storage):
    user = await storage.create_user(user_data())

    created = await storage.create_tenant(
        tenant_data(user.id, emergency_contact="Jane Doe: 555-987-6543")
    )

    assert created.status == TenantStatus.ACTIVE
    assert created.occupation is None
    assert created.updated_at == created.created_at
    assert await storage.get_tenant(created.id) == created
    assert await storage.get_tenant_by_user_id(user.id) == created
    assert await storage.get_tenant_by_user_id(999) is None


async def test_update_tenant_refreshes_updated_at(storage):
    user = await storage.create_user(user_data())
    created = await storage.create_tenant(tenant_data(user.id))

    updated = await storage.update_tenant(created.id, {"occupation": "Engineer"})

    assert updated.occupation == "Engineer"
    assert updated.phone == created.phone
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at


async def test_update_tenant_rejects_null_user(storage):
    user = await storage.create_user(user_data())
    created = await storage.create_tenant(tenant_data(user.id))

    with pytest.raises(ValidationError):
        await storage.update_tenant(created.id, {"user_id": None})


async def test_delete_tenant(storage):
    user = await storage.create_user(user_data())
    created = await storage.create_tenant(tenant_data(user.id))

    assert await storage.delete_tenant(created.id) is True
    assert await storage.get_tenant(created.id) is None
    assert await storage.delete_tenant(created.id) is False
    assert await storage.update_tenant(created.id, {"notes": "gone"}) is None


async def test_tenants_for_owner_listed_once(storage):
    """Test that two leases for the same tenant list that tenant once."""
    owner, _, prop, tenant = await make_owner_with_tenant(storage)
    second_prop = await storage.create_property(property_data(owner.id, "Marina Lofts"))
    await storage.create_lease(lease_data(prop.id, tenant.id))
    await storage.create_lease(lease_data(prop.id, tenant.id, status="ended"))
    await storage.create_lease(lease_data(second_prop.id, tenant.id))

    tenants = await storage.get_tenants_for_owner(owner.id)

    assert [t.id for t in tenants] == [tenant.id]


async def test_tenants_for_owner_in_creation_order(storage):
    owner = await storage.create_user(user_data("owner"))
    prop = await storage.create_property(property_data(owner.id))
    tenants = []
    for name in ("t1", "t2", "t3"):
        user = await storage.create_user(user_data(name))
        tenants.append(await storage.create_tenant(tenant_data(user.id)))

    # leases created in reverse order
    for tenant in reversed(tenants):
        await storage.create_lease(lease_data(prop.id, tenant.id))

    listed = await storage.get_tenants_for_owner(owner.id)
    assert [t.id for t in listed] == [t.id for t in tenants]


async def test_tenants_for_other_owner_excluded(storage):
    owner, _, prop, tenant = await make_owner_with_tenant(storage)
    other = await storage.create_user(user_data("other"))
    await storage.create_lease(lease_data(prop.id, tenant.id))

    assert await storage.get_tenants_for_owner(other.id) == []
    assert await storage.get_tenants_for_owner(999) == []


async def test_tenants_with_users_drops_orphans(storage):
    """Test that a tenant whose user was deleted is left out of the join."""
    kept_user = await storage.create_user(user_data("kept"))
    gone_user = await storage.create_user(user_data("gone"))
    kept = await storage.create_tenant(tenant_data(kept_user.id))
    orphan = await storage.create_tenant(tenant_data(gone_user.id))

    await storage.delete_user(gone_user.id)

    joined = await storage.get_tenants_with_users()

    assert [t.id for t in joined] == [kept.id]
    assert isinstance(joined[0], TenantWithUser)
    assert joined[0].user == kept_user
    assert joined[0].phone == kept.phone
    # the orphan itself is still stored
    assert await storage.get_tenant(orphan.id) is not None


async def test_tenant_with_user(storage):
    user = await storage.create_user(user_data())
    tenant = await storage.create_tenant(tenant_data(user.id))

    joined = await storage.get_tenant_with_user(tenant.id)

    assert joined.id == tenant.id
    assert joined.user.username == "alice"
    assert await storage.get_tenant_with_user(999) is None

    await storage.delete_user(user.id)
    assert await storage.get_tenant_with_user(tenant.id) is None


async def test_tenants_with_users_for_owner(storage):
    owner, tenant_user, prop, tenant = await make_owner_with_tenant(storage)
    await storage.create_lease(lease_data(prop.id, tenant.id))

    joined = await storage.get_tenants_with_users_for_owner(owner.id)

    assert [(t.id, t.user.id) for t in joined] == [(tenant.id, tenant_user.id)]

    await storage.delete_user(tenant_user.id)
    assert await storage.get_tenants_with_users_for_owner(owner.id) == []


async def test_owner_scenario(storage):
    """Owner with one property, one tenant and one active lease."""
    owner, _, prop, tenant = await make_owner_with_tenant(storage)
    await storage.create_lease(lease_data(prop.id, tenant.id))

    assert await storage.get_active_lease_count() == 1
    assert [t.id for t in await storage.get_tenants_for_owner(owner.id)] == [tenant.id]

    await storage.delete_property(prop.id)

    # the lease now points at a missing property, so the owner has no tenants
    assert await storage.get_tenants_for_owner(owner.id) == []
    assert len(await storage.list_leases()) == 1
