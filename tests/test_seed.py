"""
Tests for the demo data.
"""
from models.enums import MaintenancePriority, UserRole
from storage.memory_storage import MemStorage
from storage.seed import seed_storage


async def test_memory_storage_seeds_on_construction():
    storage = MemStorage(seed_demo_data=True)

    users = await storage.list_users()
    properties = await storage.list_properties()
    tenants = await storage.list_tenants()
    requests = await storage.list_maintenance_requests()

    assert [u.username for u in users] == ["admin", "tenant"]
    assert users[0].role == UserRole.ADMIN
    assert [p.name for p in properties] == ["Urban Heights", "Sunset Villa", "Marina Lofts"]
    assert all(p.owner_id == users[0].id for p in properties)
    assert properties[1].zip_code == "98101"
    assert properties[2].zip_code == "02110"
    assert len(properties[0].images) == 2
    assert [t.user_id for t in tenants] == [users[1].id]
    assert tenants[0].emergency_contact == "Jane Doe: 555-987-6543"
    assert requests[0].priority == MaintenancePriority.HIGH
    assert requests[0].property_id == properties[0].id
    assert requests[0].tenant_id == tenants[0].id


async def test_unseeded_memory_storage_is_empty(mem_storage):
    assert await mem_storage.list_users() == []
    assert await mem_storage.get_property_count() == 0


async def test_seed_storage_matches_constructor_seed(db_storage):
    """Test that replaying the seed into the database gives the same rows."""
    seeded = MemStorage(seed_demo_data=True)
    await seed_storage(db_storage)

    def rows(records):
        return [r.model_dump(exclude={"created_at", "updated_at"}) for r in records]

    assert rows(await db_storage.list_users()) == rows(await seeded.list_users())
    assert rows(await db_storage.list_properties()) == rows(await seeded.list_properties())
    assert rows(await db_storage.list_tenants()) == rows(await seeded.list_tenants())
    assert rows(await db_storage.list_maintenance_requests()) == rows(
        await seeded.list_maintenance_requests()
    )


async def test_seeded_admin_can_be_found_case_insensitively():
    storage = MemStorage(seed_demo_data=True)

    admin = await storage.get_user_by_email("ADMIN@propertypro.com")

    assert admin.username == "admin"
    assert admin.first_name == "Admin"
