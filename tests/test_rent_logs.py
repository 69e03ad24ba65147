from conftest import rent_log_payload, tenant_payload


async def _create(client, headers, tenant_id, **overrides):
    res = await client.post(
        "/api/rent-logs/", json=rent_log_payload(tenant_id, **overrides), headers=headers
    )
    assert res.status_code == 201, res.text
    return res.json()["data"]


async def test_meter_scenario_is_persisted(client, auth_headers, tenant):
    log = await _create(client, auth_headers, tenant["id"])

    assert log["units"] == 130
    assert log["meter_bill"] == 1040
    assert log["total"] == 16040
    assert log["tenant_name"] == "Asha Verma"

    res = await client.get(f"/api/rent-logs/{log['id']}", headers=auth_headers)
    assert res.json()["data"]["total"] == 16040


async def test_inconsistent_derived_fields_are_rejected(client, auth_headers, tenant):
    res = await client.post(
        "/api/rent-logs/",
        json=rent_log_payload(tenant["id"], total=16000),
        headers=auth_headers,
    )
    assert res.status_code == 400
    assert "total should be 16040.00" in res.json()["message"]


async def test_meter_cannot_run_backwards(client, auth_headers, tenant):
    res = await client.post(
        "/api/rent-logs/",
        json=rent_log_payload(
            tenant["id"],
            current_meter_reading=1200,
            units=0,
            meter_bill=0,
            total=15000,
        ),
        headers=auth_headers,
    )
    assert res.status_code == 400
    assert "current_meter_reading" in res.json()["message"]


async def test_missing_required_field_is_a_validation_error(client, auth_headers, tenant):
    payload = rent_log_payload(tenant["id"])
    del payload["collector"]
    res = await client.post("/api/rent-logs/", json=payload, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["message"].startswith("collector")


async def test_log_for_foreign_tenant_is_not_found(client, auth_headers, other_headers, tenant):
    res = await client.post(
        "/api/rent-logs/", json=rent_log_payload(tenant["id"]), headers=other_headers
    )
    assert res.status_code == 404
    assert res.json()["message"] == "Tenant not found"


async def test_list_is_ordered_by_date_then_creation(client, auth_headers, tenant):
    for day in ("2025-01-05", "2025-03-05", "2025-02-05", "2025-03-05"):
        await _create(client, auth_headers, tenant["id"], date=day, notes=day)

    res = await client.get("/api/rent-logs/", headers=auth_headers)
    logs = res.json()["data"]
    assert [log["date"] for log in logs] == [
        "2025-03-05",
        "2025-03-05",
        "2025-02-05",
        "2025-01-05",
    ]
    assert logs[0]["created_at"] >= logs[1]["created_at"]


async def test_update_recomputes_derived_fields(client, auth_headers, tenant):
    log = await _create(client, auth_headers, tenant["id"])

    res = await client.put(
        f"/api/rent-logs/{log['id']}",
        json={"current_meter_reading": 1400, "notes": "corrected reading"},
        headers=auth_headers,
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["units"] == 150
    assert data["meter_bill"] == 1200
    assert data["total"] == 16200
    assert data["notes"] == "corrected reading"


async def test_update_rejects_supplied_mismatches(client, auth_headers, tenant):
    log = await _create(client, auth_headers, tenant["id"])

    res = await client.put(
        f"/api/rent-logs/{log['id']}",
        json={"unit_price": 10, "meter_bill": 1040},
        headers=auth_headers,
    )
    assert res.status_code == 400
    assert res.json()["message"].startswith("meter_bill")

    backwards = await client.put(
        f"/api/rent-logs/{log['id']}",
        json={"previous_meter_reading": 1500},
        headers=auth_headers,
    )
    assert backwards.status_code == 400


async def test_readings_beyond_cents_are_rejected(client, auth_headers, tenant):
    res = await client.post(
        "/api/rent-logs/",
        json=rent_log_payload(
            tenant["id"],
            previous_meter_reading=100.004,
            current_meter_reading=200.006,
            units=100.002,
            meter_bill=800.016,
            total=15800.016,
        ),
        headers=auth_headers,
    )
    assert res.status_code == 400
    assert res.json()["message"].startswith("previous_meter_reading")

    update = await client.put(
        f"/api/rent-logs/{(await _create(client, auth_headers, tenant['id']))['id']}",
        json={"unit_price": 8.125},
        headers=auth_headers,
    )
    assert update.status_code == 400
    assert update.json()["message"].startswith("unit_price")


async def test_fractional_readings_stay_consistent_when_read_back(
    client, auth_headers, tenant
):
    log = await _create(
        client,
        auth_headers,
        tenant["id"],
        previous_meter_reading=100.25,
        current_meter_reading=200.75,
        units=100.5,
        meter_bill=804,
        total=15804,
    )

    res = await client.get(f"/api/rent-logs/{log['id']}", headers=auth_headers)
    stored = res.json()["data"]
    assert stored["units"] == stored["current_meter_reading"] - stored["previous_meter_reading"]
    assert stored["meter_bill"] == stored["units"] * stored["unit_price"]
    assert stored["total"] == stored["rent_paid"] + stored["meter_bill"]


async def test_log_name_is_taken_from_the_tenant(client, auth_headers, tenant):
    named = await _create(client, auth_headers, tenant["id"], tenant_name="Someone Else")
    assert named["tenant_name"] == "Asha Verma"

    payload = rent_log_payload(tenant["id"])
    del payload["tenant_name"]
    res = await client.post("/api/rent-logs/", json=payload, headers=auth_headers)
    assert res.status_code == 201, res.text
    assert res.json()["data"]["tenant_name"] == "Asha Verma"


async def test_moving_a_log_to_another_tenant_renames_it(client, auth_headers, tenant):
    other = (
        await client.post(
            "/api/tenants/", json=tenant_payload(name="Bilal Khan"), headers=auth_headers
        )
    ).json()["data"]
    log = await _create(client, auth_headers, tenant["id"])

    res = await client.put(
        f"/api/rent-logs/{log['id']}",
        json={"tenant_id": other["id"]},
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert res.json()["data"]["tenant_id"] == other["id"]
    assert res.json()["data"]["tenant_name"] == "Bilal Khan"

    by_tenant = await client.get(f"/api/rent-logs/tenant/{other['id']}", headers=auth_headers)
    assert [row["tenant_name"] for row in by_tenant.json()["data"]] == ["Bilal Khan"]

    by_id = await client.get("/api/tenants/pending-payments", headers=auth_headers)
    by_name = await client.get(
        "/api/tenants/pending-payments?by_name=true", headers=auth_headers
    )
    assert [t["name"] for t in by_id.json()["data"]["tenants"]] == ["Asha Verma"]
    assert [t["name"] for t in by_name.json()["data"]["tenants"]] == ["Asha Verma"]


async def test_delete_log(client, auth_headers, tenant):
    log = await _create(client, auth_headers, tenant["id"])

    res = await client.delete(f"/api/rent-logs/{log['id']}", headers=auth_headers)
    assert res.status_code == 200
    missing = await client.get(f"/api/rent-logs/{log['id']}", headers=auth_headers)
    assert missing.status_code == 404


async def test_queries(client, auth_headers, tenant, today):
    other = (
        await client.post(
            "/api/tenants/", json=tenant_payload(name="Bilal Khan"), headers=auth_headers
        )
    ).json()["data"]
    await _create(client, auth_headers, tenant["id"], date="2025-01-10", collector="Ravi")
    await _create(
        client,
        auth_headers,
        other["id"],
        tenant_name="Bilal Khan",
        date="2025-01-31",
        collector="ravi",
        notes="Paid late, WATER included",
    )
    await _create(client, auth_headers, tenant["id"], date=today.isoformat())

    by_collector = await client.get("/api/rent-logs/collector/Ravi", headers=auth_headers)
    assert len(by_collector.json()["data"]) == 2

    by_tenant = await client.get(f"/api/rent-logs/tenant/{other['id']}", headers=auth_headers)
    assert [log["tenant_name"] for log in by_tenant.json()["data"]] == ["Bilal Khan"]

    search = await client.get("/api/rent-logs/search?q=water", headers=auth_headers)
    assert [log["date"] for log in search.json()["data"]] == ["2025-01-31"]

    in_range = await client.post(
        "/api/rent-logs/date-range",
        json={"start": "2025-01-10", "end": "2025-01-31"},
        headers=auth_headers,
    )
    assert [log["date"] for log in in_range.json()["data"]] == ["2025-01-31", "2025-01-10"]

    current = await client.get("/api/rent-logs/current-month", headers=auth_headers)
    assert [log["date"] for log in current.json()["data"]] == [today.isoformat()]

    recent = await client.get("/api/rent-logs/recent?limit=2", headers=auth_headers)
    assert [log["date"] for log in recent.json()["data"]] == [
        today.isoformat(),
        "2025-01-31",
    ]


async def test_stats_endpoints_agree(client, auth_headers, tenant):
    await _create(client, auth_headers, tenant["id"], date="2025-01-10")
    await _create(client, auth_headers, tenant["id"], date="2025-02-10")
    await _create(client, auth_headers, tenant["id"], date="2025-04-10")
    window = {"start": "2025-01-01", "end": "2025-02-28"}

    stats = await client.post(
        "/api/rent-logs/dashboard-stats", json=window, headers=auth_headers
    )
    assert stats.json()["data"] == {
        "total_rent_collected": 30000,
        "total_electricity_bill": 2080,
        "total_logs": 2,
    }

    monthly = await client.post(
        "/api/rent-logs/monthly-stats", json=window, headers=auth_headers
    )
    assert monthly.json()["data"] == [
        {"month": "2025-01", "rent": 15000, "electricity": 1040},
        {"month": "2025-02", "rent": 15000, "electricity": 1040},
    ]


async def test_dashboard_combines_stats_and_pending(client, auth_headers, tenant, today):
    await client.post(
        "/api/tenants/", json=tenant_payload(name="Bilal Khan"), headers=auth_headers
    )
    await _create(client, auth_headers, tenant["id"], date=today.isoformat())

    res = await client.get(
        "/api/rent-logs/dashboard",
        params={"filter": "custom", "start": "2020-01-01", "end": "2099-12-31"},
        headers=auth_headers,
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["filter"] == "custom"
    assert data["stats"]["total_logs"] == 1
    assert data["total_tenants"] == 2
    assert data["tenants_with_dues"] == 1
    assert [p["name"] for p in data["pending"]["tenants"]] == ["Bilal Khan"]
    assert len(data["recent_logs"]) == 1

    default = await client.get("/api/rent-logs/dashboard", headers=auth_headers)
    assert default.json()["data"]["filter"] == "30days"
