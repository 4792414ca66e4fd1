import uuid

import pytest

from aqua.core.roles import UserRole


async def _send(client, sender_headers, user, title="Heads up"):
    res = await client.post(
        "/api/notifications/",
        json={"user_id": str(user.id), "title": title, "message": "Scheduled outage tonight", "type": "warning"},
        headers=sender_headers,
    )
    assert res.status_code == 201
    return res.json()


@pytest.mark.asyncio
async def test_only_notifiers_can_send(client, make_user, headers_for):
    head = await make_user(UserRole.DeptHead)
    customer = await make_user(UserRole.Customer)

    res = await client.post(
        "/api/notifications/",
        json={"user_id": str(customer.id), "title": "t", "message": "m"},
        headers=headers_for(head),
    )
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_read_state_and_bulk_mark(client, make_user, headers_for):
    sender = await make_user(UserRole.ServiceManager)
    customer = await make_user(UserRole.Customer)
    headers = headers_for(customer)

    first = await _send(client, headers_for(sender), customer, "One")
    await _send(client, headers_for(sender), customer, "Two")
    await _send(client, headers_for(sender), customer, "Three")

    inbox = (await client.get("/api/notifications/", headers=headers)).json()
    assert inbox["unread_count"] == 3

    read = await client.patch(f"/api/notifications/{first['id']}", json={"is_read": True}, headers=headers)
    assert read.status_code == 200
    assert read.json()["is_read"] is True
    assert read.json()["read_at"] is not None

    unread_only = (await client.get("/api/notifications/", params={"unread_only": True}, headers=headers)).json()
    assert len(unread_only["notifications"]) == 2

    bulk = await client.post("/api/notifications/mark-read", json={"mark_all": True}, headers=headers)
    assert bulk.json() == {"updated_count": 2}

    assert (await client.post("/api/notifications/mark-read", json={}, headers=headers)).status_code == 400


@pytest.mark.asyncio
async def test_cannot_touch_someone_elses_notification(client, make_user, headers_for):
    sender = await make_user(UserRole.Admin)
    owner = await make_user(UserRole.Customer)
    snoop = await make_user(UserRole.Customer)

    note = await _send(client, headers_for(sender), owner)

    patch = await client.patch(f"/api/notifications/{note['id']}", json={"is_read": True}, headers=headers_for(snoop))
    assert patch.status_code == 404

    delete = await client.delete(f"/api/notifications/{note['id']}", headers=headers_for(snoop))
    assert delete.status_code == 404

    bulk = await client.post(
        "/api/notifications/mark-read", json={"notification_ids": [note["id"]]}, headers=headers_for(snoop)
    )
    assert bulk.json() == {"updated_count": 0}

    own_delete = await client.delete(f"/api/notifications/{note['id']}", headers=headers_for(owner))
    assert own_delete.status_code == 200


@pytest.mark.asyncio
async def test_unknown_recipient(client, make_user, headers_for):
    admin = await make_user(UserRole.Admin)
    res = await client.post(
        "/api/notifications/",
        json={"user_id": str(uuid.uuid4()), "title": "t", "message": "m"},
        headers=headers_for(admin),
    )
    assert res.status_code == 404
