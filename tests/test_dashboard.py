import pytest

from aqua.core.roles import UserRole


@pytest.mark.asyncio
async def test_overview_for_staff(client, make_user, make_customer, headers_for):
    admin = await make_user(UserRole.Admin)
    await make_user(UserRole.Technician, is_active=False)
    customer = await make_customer()
    await client.post(
        "/api/services/",
        json={"service_type": "repair", "description": "Burst pipe", "customer_id": str(customer.id)},
        headers=headers_for(admin),
    )

    res = await client.get("/api/dashboard/stats", headers=headers_for(admin))
    assert res.status_code == 200
    body = res.json()
    assert body["view"] == "overview"
    assert body["refresh_interval_seconds"] == 30
    assert "timestamp" in body

    stats = body["stats"]
    assert stats["total_users"] == 2
    assert stats["active_users"] == 1
    assert stats["total_customers"] == 1
    assert stats["pending_services"] == 1


@pytest.mark.asyncio
async def test_customer_view_counts_only_own_records(client, make_user, make_customer, headers_for):
    desk = await make_user(UserRole.ServiceManager)
    owner = await make_user(UserRole.Customer)
    mine = await make_customer(user=owner)
    other = await make_customer()

    for customer in (mine, other):
        await client.post(
            "/api/complaints/",
            json={"title": "Leak", "description": "Dripping", "customer_id": str(customer.id)},
            headers=headers_for(desk),
        )

    body = (await client.get("/api/dashboard/stats", headers=headers_for(owner))).json()
    assert body["view"] == "customer"
    assert body["stats"] == {
        "active_services": 0,
        "completed_services": 0,
        "pending_complaints": 1,
        "resolved_complaints": 0,
    }


@pytest.mark.asyncio
async def test_technician_view(client, make_user, headers_for):
    tech = await make_user(UserRole.Technician)
    body = (await client.get("/api/dashboard/stats", headers=headers_for(tech))).json()
    assert body["view"] == "technician"
    assert body["stats"]["total_hours"] == 0


@pytest.mark.asyncio
async def test_stats_need_a_principal(client):
    res = await client.get("/api/dashboard/stats")
    assert res.status_code == 401
