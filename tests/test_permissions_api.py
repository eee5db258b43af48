from contentkosh_api.db.seed import PERMISSIONS


async def _permissions_of(client, world, name):
    resp = await client.get(
        "/api/permission", params={"user_id": world.users[name]}, headers=world.header("admin_a")
    )
    assert resp.status_code == 200
    return set(resp.json()["data"]["permissions"])


async def test_list_permission_catalogue(client, world):
    resp = await client.get("/api/permission/list", headers=world.header("student_a"))
    assert resp.status_code == 200
    assert {p["code"] for p in resp.json()["data"]} == set(PERMISSIONS)


async def test_own_permissions_default_to_caller(client, world):
    resp = await client.get("/api/permission", headers=world.header("teacher_a"))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["user"] == {"id": world.users["teacher_a"], "role": "TEACHER"}
    assert data["permissions"] == []


async def test_assign_is_idempotent(client, world):
    payload = {"userId": world.users["teacher_a"], "permissions": ["CONTENT_VIEW", "CONTENT_VIEW"]}
    first = await client.post("/api/permission", json=payload, headers=world.header("admin_a"))
    assert first.status_code == 200
    second = await client.post("/api/permission", json=payload, headers=world.header("admin_a"))
    assert second.status_code == 200
    assert second.json()["data"]["permissions"] == ["CONTENT_VIEW"]


async def test_assign_requires_codes(client, world):
    resp = await client.post(
        "/api/permission", json={"userId": world.users["teacher_a"], "permissions": []}, headers=world.header("admin_a")
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Permissions are required"


async def test_assign_requires_user(client, world):
    resp = await client.post("/api/permission", json={"permissions": ["CONTENT_VIEW"]}, headers=world.header("admin_a"))
    assert resp.status_code == 400
    assert resp.json()["message"] == "User ID is required"


async def test_invalid_codes_change_nothing(client, world):
    await client.post(
        "/api/permission",
        json={"userId": world.users["teacher_a"], "permissions": ["CONTENT_VIEW"]},
        headers=world.header("admin_a"),
    )
    resp = await client.put(
        "/api/permission",
        json={"userId": world.users["teacher_a"], "permissions": ["CONTENT_EDIT", "NOT_A_CODE"]},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Some permissions are invalid"
    assert await _permissions_of(client, world, "teacher_a") == {"CONTENT_VIEW"}


async def test_replace_converges_to_exact_set(client, world):
    await client.post(
        "/api/permission",
        json={"userId": world.users["teacher_a"], "permissions": ["CONTENT_VIEW", "CONTENT_EDIT"]},
        headers=world.header("admin_a"),
    )
    resp = await client.put(
        "/api/permission",
        json={"userId": world.users["teacher_a"], "permissions": ["CONTENT_EDIT", "ANNOUNCEMENT_CREATE"]},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 200
    assert set(resp.json()["data"]["permissions"]) == {"CONTENT_EDIT", "ANNOUNCEMENT_CREATE"}

    cleared = await client.put(
        "/api/permission",
        json={"userId": world.users["teacher_a"], "permissions": []},
        headers=world.header("admin_a"),
    )
    assert cleared.status_code == 200
    assert cleared.json()["data"]["permissions"] == []


async def test_remove_selected_and_all(client, world):
    await client.post(
        "/api/permission",
        json={"userId": world.users["student_a"], "permissions": ["CONTENT_VIEW", "ANNOUNCEMENT_VIEW"]},
        headers=world.header("admin_a"),
    )
    resp = await client.request(
        "DELETE",
        "/api/permission",
        json={"userId": world.users["student_a"], "permissions": ["CONTENT_VIEW"]},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["permissions"] == ["ANNOUNCEMENT_VIEW"]

    resp = await client.request(
        "DELETE", "/api/permission", json={"userId": world.users["student_a"]}, headers=world.header("admin_a")
    )
    assert resp.json()["data"]["permissions"] == []


async def test_cannot_grant_across_tenants(client, world):
    resp = await client.post(
        "/api/permission",
        json={"userId": world.users["student_b"], "permissions": ["CONTENT_VIEW"]},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 403


async def test_teacher_cannot_assign(client, world):
    resp = await client.post(
        "/api/permission",
        json={"userId": world.users["student_a"], "permissions": ["CONTENT_VIEW"]},
        headers=world.header("teacher_a"),
    )
    assert resp.status_code == 403


async def test_granted_permission_opens_announcement_creation(client, world):
    payload = {
        "heading": "Holiday",
        "content": "Institute closed on Monday",
        "startDate": "2026-01-01T00:00:00Z",
        "endDate": "2026-01-31T00:00:00Z",
    }
    denied = await client.post("/api/announcements", json=payload, headers=world.header("teacher_a"))
    assert denied.status_code == 403
    assert denied.json()["message"] == "Missing required permission: ANNOUNCEMENT_CREATE"

    await client.post(
        "/api/permission",
        json={"userId": world.users["teacher_a"], "permissions": ["ANNOUNCEMENT_CREATE"]},
        headers=world.header("admin_a"),
    )
    allowed = await client.post("/api/announcements", json=payload, headers=world.header("teacher_a"))
    assert allowed.status_code == 201
    assert allowed.json()["data"]["businessId"] == world.business_a
