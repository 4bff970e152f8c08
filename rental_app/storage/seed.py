"""
Demo rows loaded into a fresh store: an admin, one tenant user with a
tenant profile, three listings owned by the admin and one open
maintenance request.

References between the rows are resolved from the ids the store hands
back, so the same rows can be replayed into any backend.
"""

import logging

from models.enums import (
    MaintenancePriority,
    MaintenanceStatus,
    PropertyStatus,
    PropertyTypes,
    UserRole,
    UserStatus,
)
from schemas.schema import (
    MaintenanceRequestCreate,
    PropertyCreate,
    TenantCreate,
    UserCreate,
)

logger = logging.getLogger(__name__)

# bcrypt hash of "password"
DEMO_PASSWORD_HASH = "$2b$10$FxgUCcGy7geZoHgY8.Zs2eJ5LpNF7wpJaEiLoM7z.D2bc5NxNMRqG"

IMAGE_URL = "https://images.unsplash.com/photo-{}?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=450"

DEMO_ADMIN = UserCreate(
    username="admin",
    email="admin@propertypro.com",
    password=DEMO_PASSWORD_HASH,
    first_name="Admin",
    last_name="User",
    role=UserRole.ADMIN,
    status=UserStatus.ACTIVE,
)

DEMO_TENANT_USER = UserCreate(
    username="tenant",
    email="tenant@example.com",
    password=DEMO_PASSWORD_HASH,
    first_name="John",
    last_name="Doe",
    role=UserRole.TENANT,
    status=UserStatus.ACTIVE,
)

DEMO_PROPERTIES = [
    dict(
        name="Urban Heights",
        address="234 Main St",
        city="San Francisco",
        state="CA",
        zip_code="94105",
        description="Modern luxury apartments in downtown",
        property_type=PropertyTypes.APARTMENT,
        price=2450,
        bedrooms=2,
        bathrooms=2,
        square_meters=88,
        features=["Pet friendly", "Gym", "Pool"],
        images=[
            IMAGE_URL.format("1545324418-cc1a3fa10c00"),
            IMAGE_URL.format("1522708323590-d24dbb6b0267"),
        ],
        status=PropertyStatus.AVAILABLE,
    ),
    dict(
        name="Sunset Villa",
        address="567 Oak Drive",
        city="Seattle",
        state="WA",
        zip_code="98101",
        description="Beautiful single family home with yard",
        property_type=PropertyTypes.HOUSE,
        price=3200,
        bedrooms=4,
        bathrooms=3,
        square_meters=195,
        features=["Garage", "Backyard", "Fireplace"],
        images=[IMAGE_URL.format("1564013799919-ab600027ffc6")],
        status=PropertyStatus.AVAILABLE,
    ),
    dict(
        name="Marina Lofts",
        address="789 Harbor Blvd",
        city="Boston",
        state="MA",
        zip_code="02110",
        description="Modern loft apartments near the harbor",
        property_type=PropertyTypes.APARTMENT,
        price=1850,
        bedrooms=1,
        bathrooms=1,
        square_meters=70,
        features=["Gym", "Rooftop Deck", "Laundry"],
        images=[IMAGE_URL.format("1522708323590-d24dbb6b0267")],
        status=PropertyStatus.AVAILABLE,
    ),
]


def demo_property(owner_id: int, row: dict) -> PropertyCreate:
    return PropertyCreate(owner_id=owner_id, **row)


def demo_tenant(user_id: int) -> TenantCreate:
    return TenantCreate(
        user_id=user_id,
        phone="555-123-4567",
        emergency_contact="Jane Doe: 555-987-6543",
    )


def demo_maintenance_request(property_id: int, tenant_id: int) -> MaintenanceRequestCreate:
    return MaintenanceRequestCreate(
        property_id=property_id,
        tenant_id=tenant_id,
        title="Broken heater",
        description="The heater in the living room is not working",
        priority=MaintenancePriority.HIGH,
        status=MaintenanceStatus.PENDING,
    )


async def seed_storage(storage) -> None:
    """Replay the demo rows through the public storage interface."""
    admin = await storage.create_user(DEMO_ADMIN)
    tenant_user = await storage.create_user(DEMO_TENANT_USER)

    properties = [
        await storage.create_property(demo_property(admin.id, row))
        for row in DEMO_PROPERTIES
    ]
    tenant = await storage.create_tenant(demo_tenant(tenant_user.id))
    await storage.create_maintenance_request(
        demo_maintenance_request(properties[0].id, tenant.id)
    )
    logger.info("Demo data seeded (%d properties)", len(properties))
