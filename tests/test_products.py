import pytest

from aqua.core.roles import UserRole


@pytest.mark.asyncio
async def test_product_lifecycle(client, make_user, headers_for):
    pm = await make_user(UserRole.ProductManager)
    headers = headers_for(pm)

    res = await client.post(
        "/api/products/",
        json={"name": "Water Filter", "category": "filters", "unit_price": 49.5},
        headers=headers,
    )
    assert res.status_code == 201
    product = res.json()
    assert product["unit_type"] == "piece"
    assert product["is_active"] is True

    patched = await client.patch(f"/api/products/{product['id']}", json={"unit_price": 45}, headers=headers)
    assert patched.json()["unit_price"] == 45

    soft = await client.delete(f"/api/products/{product['id']}", headers=headers)
    assert soft.status_code == 200
    still_there = await client.get(f"/api/products/{product['id']}", headers=headers)
    assert still_there.json()["is_active"] is False

    hard = await client.delete(f"/api/products/{product['id']}", params={"hard_delete": True}, headers=headers)
    assert hard.status_code == 200
    gone = await client.get(f"/api/products/{product['id']}", headers=headers)
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_negative_price_rejected(client, make_user, headers_for):
    admin = await make_user(UserRole.Admin)
    res = await client.post(
        "/api/products/",
        json={"name": "Bad", "category": "x", "unit_price": -1},
        headers=headers_for(admin),
    )
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_any_principal_can_browse_but_not_edit(client, make_user, headers_for):
    pm = await make_user(UserRole.ProductManager)
    customer = await make_user(UserRole.Customer)

    await client.post(
        "/api/products/",
        json={"name": "Pipe Wrench", "description": "Heavy duty", "category": "tools", "unit_price": 20},
        headers=headers_for(pm),
    )
    await client.post(
        "/api/products/",
        json={"name": "Chlorine Tabs", "category": "chemicals", "unit_price": 5},
        headers=headers_for(pm),
    )

    listing = await client.get("/api/products/", params={"search": "wrench"}, headers=headers_for(customer))
    assert listing.status_code == 200
    body = listing.json()
    assert body["pagination"]["total"] == 1
    assert body["products"][0]["name"] == "Pipe Wrench"

    denied = await client.post(
        "/api/products/",
        json={"name": "Nope", "category": "x", "unit_price": 1},
        headers=headers_for(customer),
    )
    assert denied.status_code == 403


@pytest.mark.asyncio
async def test_null_on_required_product_fields_is_ignored(client, make_user, headers_for):
    pm = await make_user(UserRole.ProductManager)
    created = await client.post(
        "/api/products/",
        json={"name": "Valve", "description": "Brass", "category": "fittings", "unit_price": 12},
        headers=headers_for(pm),
    )
    pid = created.json()["id"]

    res = await client.patch(
        f"/api/products/{pid}",
        json={"name": None, "unit_price": None, "is_active": None, "description": None},
        headers=headers_for(pm),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "Valve"
    assert body["unit_price"] == 12
    assert body["is_active"] is True
    assert body["description"] is None
