from datetime import datetime


def user_data(username="alice", email=None, **overrides):
    data = {
        "username": username,
        "email": email or f"{username}@example.com",
        "password": "hashed-password",
        "first_name": "Alice",
        "last_name": "Smith",
    }
    data.update(overrides)
    return data


def property_data(owner_id=1, name="Urban Heights", **overrides):
    data = {
        "owner_id": owner_id,
        "name": name,
        "address": "234 Main St",
        "city": "San Francisco",
        "state": "CA",
        "zip_code": "94105",
        "property_type": "apartment",
        "price": 2450,
        "bedrooms": 2,
        "bathrooms": 2,
        "square_meters": 88,
        "features": ["Pet friendly", "Gym", "Pool"],
        "images": ["https://example.com/a.jpg", "https://example.com/b.jpg"],
    }
    data.update(overrides)
    return data


def tenant_data(user_id, **overrides):
    data = {"user_id": user_id, "phone": "555-123-4567"}
    data.update(overrides)
    return data


def lease_data(property_id, tenant_id, **overrides):
    data = {
        "property_id": property_id,
        "tenant_id": tenant_id,
        "start_date": datetime(2024, 1, 1),
        "end_date": datetime(2024, 12, 31),
        "monthly_rent": 2450,
        "security_deposit": 2450,
    }
    data.update(overrides)
    return data


def maintenance_data(property_id, tenant_id=None, **overrides):
    data = {
        "property_id": property_id,
        "tenant_id": tenant_id,
        "title": "Broken heater",
        "description": "The heater in the living room is not working",
        "priority": "high",
    }
    data.update(overrides)
    return data


def application_data(property_id, applicant_id, **overrides):
    data = {
        "property_id": property_id,
        "applicant_id": applicant_id,
        "first_name": "John",
        "last_name": "Doe",
        "email": "john@example.com",
        "phone": "555-000-1111",
        "date_of_birth": "1990-05-01",
        "employment_status": "employed",
        "employer": "Acme",
        "monthly_income": 7000,
        "emergency_contact": "Jane Doe",
        "emergency_contact_phone": "555-987-6543",
        "desired_move_in_date": "2024-02-01",
        "lease_duration": 12,
    }
    data.update(overrides)
    return data


def payment_data(lease_id, tenant_id, **overrides):
    data = {
        "lease_id": lease_id,
        "tenant_id": tenant_id,
        "amount": 2450,
        "due_date": datetime(2024, 2, 1),
    }
    data.update(overrides)
    return data
