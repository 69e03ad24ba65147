from conftest import register


async def test_register_returns_user_and_token(client):
    body = await register(client, email="  Owner@Example.COM ")

    assert body["success"] is True
    assert body["token"]
    assert body["user"]["email"] == "owner@example.com"
    assert body["user"]["phone_number"] is None


async def test_register_creates_default_settings(client):
    body = await register(client)
    headers = {"Authorization": f"Bearer {body['token']}"}

    res = await client.get("/api/settings/", headers=headers)
    assert res.status_code == 200
    assert res.json()["data"]["default_unit_price"] == 8


async def test_register_with_local_phone_number_is_normalised(client):
    res = await client.post(
        "/api/auth/register", json={"phone_number": "98765 43210", "password": "secret123"}
    )
    assert res.status_code == 201, res.text
    assert res.json()["user"]["phone_number"] == "+919876543210"

    login = await client.post(
        "/api/auth/login", json={"phone_number": "+91 98765 43210", "password": "secret123"}
    )
    assert login.status_code == 200


async def test_duplicate_email_is_rejected(client):
    await register(client)
    res = await client.post(
        "/api/auth/register",
        json={"email": "landlord@example.com", "password": "another1"},
    )
    assert res.status_code == 400
    assert res.json()["success"] is False
    assert res.json()["message"] == "Email already registered"


async def test_register_validation_errors(client):
    missing_identity = await client.post("/api/auth/register", json={"password": "secret123"})
    assert missing_identity.status_code == 400
    assert missing_identity.json()["error"] == "Validation failed"

    short = await client.post(
        "/api/auth/register", json={"email": "a@example.com", "password": "123"}
    )
    assert short.status_code == 400
    assert short.json()["message"].startswith("password")

    mismatch = await client.post(
        "/api/auth/register",
        json={"email": "a@example.com", "password": "secret123", "confirm_password": "nope"},
    )
    assert mismatch.status_code == 400
    assert "Passwords do not match" in mismatch.json()["message"]


async def test_login_and_me(client):
    await register(client)
    res = await client.post(
        "/api/auth/login", json={"email": "LANDLORD@example.com", "password": "secret123"}
    )
    assert res.status_code == 200
    token = res.json()["token"]

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "landlord@example.com"


async def test_wrong_password_is_unauthorised(client):
    await register(client)
    res = await client.post(
        "/api/auth/login", json={"email": "landlord@example.com", "password": "wrong-pass"}
    )
    assert res.status_code == 401
    assert res.json() == {
        "success": False,
        "error": "Invalid credentials",
        "message": "Invalid credentials",
    }


async def test_protected_routes_need_a_valid_token(client):
    client.cookies.clear()
    assert (await client.get("/api/tenants/")).status_code == 401

    res = await client.get("/api/tenants/", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid token"


async def test_health(client):
    res = await client.get("/health")
    assert res.json() == {"status": "ok"}
