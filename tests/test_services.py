from datetime import datetime

import pytest

from aqua.core.roles import UserRole


async def _new_service(client, headers, customer_id, **extra):
    payload = {"service_type": "repair", "description": "Replace valve", "customer_id": str(customer_id), **extra}
    res = await client.post("/api/services/", json=payload, headers=headers)
    assert res.status_code == 201
    return res.json()


@pytest.mark.asyncio
async def test_create_service_numbering_and_status(client, make_user, make_customer, headers_for):
    desk = await make_user(UserRole.ServiceManager)
    customer = await make_customer()

    service = await _new_service(client, headers_for(desk), customer.id)
    stamp = datetime.utcnow()
    assert service["service_number"] == f"SRV{stamp.year}{stamp.month:02d}0001"
    assert service["status"] == "pending"


@pytest.mark.asyncio
async def test_customer_requests_service_for_self(client, make_user, make_customer, headers_for):
    owner = await make_user(UserRole.Customer)
    mine = await make_customer(user=owner)

    res = await client.post(
        "/api/services/",
        json={"service_type": "installation", "description": "New meter"},
        headers=headers_for(owner),
    )
    assert res.status_code == 201
    assert res.json()["customer_id"] == str(mine.id)


@pytest.mark.asyncio
async def test_get_service_permissions(client, make_user, make_customer, headers_for):
    desk = await make_user(UserRole.Admin)
    owner = await make_user(UserRole.Customer)
    stranger = await make_user(UserRole.Customer)
    tech = await make_user(UserRole.Technician)
    await make_customer(user=stranger)
    customer = await make_customer(user=owner)

    service = await _new_service(client, headers_for(desk), customer.id)
    url = f"/api/services/{service['id']}"

    assert (await client.get(url, headers=headers_for(owner))).status_code == 200
    assert (await client.get(url, headers=headers_for(stranger))).status_code == 403
    assert (await client.get(url, headers=headers_for(tech))).status_code == 403

    accounts = await make_user(UserRole.AccountsManager)
    assert (await client.get(url, headers=headers_for(accounts))).status_code == 403


@pytest.mark.asyncio
async def test_technician_may_only_progress_own_job(client, make_user, make_customer, headers_for):
    desk = await make_user(UserRole.ServiceManager)
    tech = await make_user(UserRole.Technician)
    customer = await make_customer()

    service = await _new_service(client, headers_for(desk), customer.id, estimated_hours=3)
    url = f"/api/services/{service['id']}"

    # not assigned yet
    assert (await client.patch(url, json={"status": "in_progress"}, headers=headers_for(tech))).status_code == 403

    await client.post(
        "/api/services/assign",
        json={"service_id": service["id"], "technician_id": str(tech.id)},
        headers=headers_for(desk),
    )

    res = await client.patch(
        url,
        json={"status": "completed", "actual_hours": 2.5, "description": "rewritten", "priority": "critical"},
        headers=headers_for(tech),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "completed"
    assert body["actual_hours"] == 2.5
    assert body["completed_date"] is not None
    assert body["description"] == "Replace valve"
    assert body["priority"] == "medium"


@pytest.mark.asyncio
async def test_setting_technician_marks_assigned(client, make_user, make_customer, headers_for):
    desk = await make_user(UserRole.DeptHead)
    tech = await make_user(UserRole.Technician)
    customer = await make_customer()

    service = await _new_service(client, headers_for(desk), customer.id)
    res = await client.patch(
        f"/api/services/{service['id']}", json={"assigned_technician": str(tech.id)}, headers=headers_for(desk)
    )
    assert res.status_code == 200
    assert res.json()["status"] == "assigned"


@pytest.mark.asyncio
async def test_list_scoping(client, make_user, make_customer, headers_for):
    desk = await make_user(UserRole.Admin)
    tech = await make_user(UserRole.Technician)
    orphan = await make_user(UserRole.Customer)
    customer = await make_customer()

    first = await _new_service(client, headers_for(desk), customer.id)
    await _new_service(client, headers_for(desk), customer.id)
    await client.post(
        "/api/services/assign",
        json={"service_id": first["id"], "technician_id": str(tech.id)},
        headers=headers_for(desk),
    )

    assert len((await client.get("/api/services/", headers=headers_for(desk))).json()) == 2
    mine = (await client.get("/api/services/", headers=headers_for(tech))).json()
    assert [s["id"] for s in mine] == [first["id"]]
    assert (await client.get("/api/services/", headers=headers_for(orphan))).json() == []

    pending = await client.get("/api/services/", params={"status": "pending"}, headers=headers_for(desk))
    assert len(pending.json()) == 1


@pytest.mark.asyncio
async def test_delete_is_admin_only(client, make_user, make_customer, headers_for):
    admin = await make_user(UserRole.Admin)
    head = await make_user(UserRole.DeptHead)
    customer = await make_customer()

    service = await _new_service(client, headers_for(admin), customer.id)
    url = f"/api/services/{service['id']}"

    assert (await client.delete(url, headers=headers_for(head))).status_code == 403
    assert (await client.delete(url, headers=headers_for(admin))).status_code == 200
    assert (await client.get(url, headers=headers_for(admin))).status_code == 404


@pytest.mark.asyncio
async def test_null_on_required_field_is_ignored(client, make_user, make_customer, headers_for):
    desk = await make_user(UserRole.ServiceManager)
    customer = await make_customer()
    service = await _new_service(client, headers_for(desk), customer.id, estimated_hours=2)

    res = await client.patch(
        f"/api/services/{service['id']}",
        json={"status": None, "service_type": None, "estimated_hours": None},
        headers=headers_for(desk),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "pending"
    assert body["service_type"] == "repair"
    assert body["estimated_hours"] is None


@pytest.mark.asyncio
async def test_patch_assignment_notifies_technician(client, make_user, make_customer, headers_for):
    desk = await make_user(UserRole.ServiceManager)
    tech = await make_user(UserRole.Technician)
    customer = await make_customer()
    service = await _new_service(client, headers_for(desk), customer.id)

    url = f"/api/services/{service['id']}"
    await client.patch(url, json={"assigned_technician": str(tech.id)}, headers=headers_for(desk))
    # same technician again: no duplicate notice
    await client.patch(url, json={"assigned_technician": str(tech.id)}, headers=headers_for(desk))

    inbox = (await client.get("/api/notifications/", headers=headers_for(tech))).json()
    assert inbox["unread_count"] == 1
    assert inbox["notifications"][0]["type"] == "assignment"
    assert inbox["notifications"][0]["related_id"] == service["id"]
