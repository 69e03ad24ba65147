async def test_collector_crud(client, auth_headers):
    for name in ("  Ravi ", "Meena"):
        res = await client.post(
            "/api/rent-collectors/", json={"name": name}, headers=auth_headers
        )
        assert res.status_code == 201

    listed = (await client.get("/api/rent-collectors/", headers=auth_headers)).json()["data"]
    assert [c["name"] for c in listed] == ["Meena", "Ravi"]

    ravi = listed[1]
    renamed = await client.put(
        f"/api/rent-collectors/{ravi['id']}", json={"name": "Ravi K"}, headers=auth_headers
    )
    assert renamed.json()["data"]["name"] == "Ravi K"

    deleted = await client.delete(f"/api/rent-collectors/{ravi['id']}", headers=auth_headers)
    assert deleted.status_code == 200
    missing = await client.get(f"/api/rent-collectors/{ravi['id']}", headers=auth_headers)
    assert missing.status_code == 404


async def test_collector_name_cannot_be_blank(client, auth_headers):
    res = await client.post(
        "/api/rent-collectors/", json={"name": "   "}, headers=auth_headers
    )
    assert res.status_code == 400
    assert res.json()["message"].startswith("name")


async def test_collectors_are_scoped_per_user(client, auth_headers, other_headers):
    await client.post("/api/rent-collectors/", json={"name": "Ravi"}, headers=auth_headers)
    res = await client.get("/api/rent-collectors/", headers=other_headers)
    assert res.json()["data"] == []


async def test_update_default_unit_price(client, auth_headers):
    res = await client.put(
        "/api/settings/", json={"default_unit_price": 9.5}, headers=auth_headers
    )
    assert res.status_code == 200
    assert res.json()["data"]["default_unit_price"] == 9.5

    res = await client.get("/api/settings/", headers=auth_headers)
    assert res.json()["data"]["default_unit_price"] == 9.5

    negative = await client.put(
        "/api/settings/", json={"default_unit_price": -1}, headers=auth_headers
    )
    assert negative.status_code == 400
