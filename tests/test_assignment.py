import pytest

from aqua.core.roles import UserRole


async def _service(client, headers, customer_id, **extra):
    payload = {"service_type": "inspection", "description": "Annual check", "customer_id": str(customer_id), **extra}
    res = await client.post("/api/services/", json=payload, headers=headers)
    return res.json()


@pytest.mark.asyncio
async def test_assign_notifies_and_audits(client, make_user, make_customer, headers_for):
    admin = await make_user(UserRole.Admin)
    tech = await make_user(UserRole.Technician)
    customer = await make_customer()
    service = await _service(client, headers_for(admin), customer.id)

    res = await client.post(
        "/api/services/assign",
        json={"service_id": service["id"], "technician_id": str(tech.id)},
        headers=headers_for(admin),
    )
    assert res.status_code == 200
    assert res.json()["status"] == "assigned"
    assert res.json()["assigned_technician"] == str(tech.id)

    inbox = await client.get("/api/notifications/", headers=headers_for(tech))
    body = inbox.json()
    assert body["unread_count"] == 1
    assert body["notifications"][0]["type"] == "assignment"
    assert body["notifications"][0]["related_id"] == service["id"]

    logs = await client.get("/api/audit-logs/", params={"action": "SERVICE_ASSIGNED"}, headers=headers_for(admin))
    assert len(logs.json()) == 1


@pytest.mark.asyncio
async def test_reassign_appends_reason(client, make_user, make_customer, headers_for):
    desk = await make_user(UserRole.ServiceManager)
    first = await make_user(UserRole.Technician)
    second = await make_user(UserRole.Technician, full_name="Sam Spanner")
    customer = await make_customer()
    service = await _service(client, headers_for(desk), customer.id)

    await client.post(
        "/api/services/assign",
        json={"service_id": service["id"], "technician_id": str(first.id)},
        headers=headers_for(desk),
    )
    res = await client.put(
        "/api/services/assign",
        json={"service_id": service["id"], "new_technician_id": str(second.id), "reason": "Closer to site"},
        headers=headers_for(desk),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["assigned_technician"] == str(second.id)
    assert body["service_notes"].startswith("[")
    assert body["service_notes"].endswith("Reassigned to Sam Spanner. Reason: Closer to site")


@pytest.mark.asyncio
async def test_assign_rejects_non_technicians(client, make_user, make_customer, headers_for):
    desk = await make_user(UserRole.ServiceManager)
    not_tech = await make_user(UserRole.AccountsManager)
    idle_tech = await make_user(UserRole.Technician, is_active=False)
    customer = await make_customer()
    service = await _service(client, headers_for(desk), customer.id)

    for target in (not_tech, idle_tech):
        res = await client.post(
            "/api/services/assign",
            json={"service_id": service["id"], "technician_id": str(target.id)},
            headers=headers_for(desk),
        )
        assert res.status_code == 400


@pytest.mark.asyncio
async def test_assignment_closed_to_technicians(client, make_user, headers_for):
    tech = await make_user(UserRole.Technician)
    res = await client.get("/api/services/assign/technicians", headers=headers_for(tech))
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_technician_workload_for_day(client, make_user, make_customer, headers_for):
    desk = await make_user(UserRole.Admin)
    busy = await make_user(UserRole.Technician, full_name="Bea Busy")
    await make_user(UserRole.Technician, full_name="Fred Free")
    customer = await make_customer()

    service = await _service(
        client, headers_for(desk), customer.id,
        scheduled_date="2026-05-04T09:00:00", estimated_hours=8,
    )
    await client.post(
        "/api/services/assign",
        json={"service_id": service["id"], "technician_id": str(busy.id)},
        headers=headers_for(desk),
    )

    res = await client.get(
        "/api/services/assign/technicians", params={"date": "2026-05-04"}, headers=headers_for(desk)
    )
    assert res.status_code == 200
    board = {t["full_name"]: t for t in res.json()["technicians"]}
    assert board["Bea Busy"]["availability"] == "busy"
    assert board["Bea Busy"]["scheduled_hours"] == 8
    assert board["Fred Free"]["availability"] == "available"

    other_day = await client.get(
        "/api/services/assign/technicians", params={"date": "2026-05-05"}, headers=headers_for(desk)
    )
    assert all(t["availability"] == "available" for t in other_day.json()["technicians"])


@pytest.mark.asyncio
async def test_availability_toggle(client, make_user, headers_for):
    desk = await make_user(UserRole.ServiceManager)
    tech = await make_user(UserRole.Technician)

    res = await client.post(
        f"/api/technicians/{tech.id}/availability", json={"is_available": False}, headers=headers_for(desk)
    )
    assert res.status_code == 200
    assert res.json()["is_available"] is False
