import pytest

from contentkosh_api.core.security import create_access_token

PROTECTED_ROUTES = [
    ("GET", "/api/auth/me"),
    ("GET", "/api/business/{business}/exams"),
    ("GET", "/api/business/{business}/users"),
    ("GET", "/api/exams/{exam}/courses"),
    ("GET", "/api/exams/{exam}/courses/{course}/subjects"),
    ("GET", "/api/batches"),
    ("GET", "/api/batches/{batch}"),
    ("GET", "/api/batches/{batch}/contents"),
    ("GET", "/api/permission"),
    ("GET", "/api/permission/list"),
    ("GET", "/api/teachers"),
    ("GET", "/api/announcements"),
    ("GET", "/api/users/{user}"),
]


async def test_missing_token_is_unauthorized(client, world):
    resp = await client.get(f"/api/business/{world.business_a}")
    assert resp.status_code == 401
    body = resp.json()
    assert body["message"] == "No token provided"
    assert body["error"]["type"] == "unauthorized"
    assert body["data"] is None


@pytest.mark.parametrize("method, template", PROTECTED_ROUTES)
async def test_protected_routes_require_token(client, world, method, template):
    url = template.format(
        business=world.business_a,
        exam=world.exam_a,
        course=world.course_a,
        batch=world.batch_a,
        user=world.users["student_a"],
    )
    resp = await client.request(method, url)
    assert resp.status_code == 401
    assert resp.json()["message"] == "No token provided"


async def test_garbage_token_is_unauthorized(client, world):
    resp = await client.get(
        f"/api/business/{world.business_a}", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid or expired token"


async def test_expired_token_is_unauthorized(client, world):
    token = create_access_token(
        world.users["admin_a"], world.business_a, "ADMIN", world.emails["admin_a"], expires_minutes=-5
    )

    resp = await client.get(
        f"/api/business/{world.business_a}", headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid or expired token"


async def test_cross_tenant_business_is_forbidden(client, world):
    resp = await client.get(f"/api/business/{world.business_b}", headers=world.header("admin_a"))
    assert resp.status_code == 403
    assert resp.json()["message"] == "You do not have access to this business"


async def test_cross_tenant_exam_is_forbidden(client, world):
    resp = await client.get(
        f"/api/exams/{world.exam_a}/courses", headers=world.header("admin_b")
    )
    assert resp.status_code == 403
    assert resp.json()["message"] == "You do not have access to this exam"


async def test_cross_tenant_batch_is_forbidden(client, world):
    resp = await client.get(f"/api/batches/{world.batch_a}", headers=world.header("student_b"))
    assert resp.status_code == 403
    assert resp.json()["message"] == "You do not have access to this batch"


async def test_cross_tenant_user_is_forbidden(client, world):
    resp = await client.get(f"/api/users/{world.users['student_a']}", headers=world.header("admin_b"))
    assert resp.status_code == 403
    assert resp.json()["message"] == "You do not have access to this user"


async def test_missing_resource_is_not_found_before_ownership(client, world):
    resp = await client.get("/api/batches/999999", headers=world.header("student_b"))
    assert resp.status_code == 404
    body = resp.json()
    assert body["message"] == "Batch not found"
    assert body["error"]["type"] == "not_found"


async def test_superadmin_reaches_every_tenant(client, world):
    for business_id in (world.business_a, world.business_b):
        resp = await client.get(f"/api/business/{business_id}", headers=world.header("superadmin"))
        assert resp.status_code == 200
        assert resp.json()["data"]["id"] == business_id

    resp = await client.get(f"/api/batches/{world.batch_a}", headers=world.header("superadmin"))
    assert resp.status_code == 200


async def test_role_gate_rejects_student(client, world):
    resp = await client.post(
        f"/api/business/{world.business_a}/exams",
        json={"name": "NEET"},
        headers=world.header("student_a"),
    )
    assert resp.status_code == 403
    assert resp.json()["error"]["type"] == "forbidden"


async def test_non_positive_path_id_is_bad_request(client, world):
    resp = await client.get("/api/business/0", headers=world.header("admin_a"))
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Invalid businessId: must be a positive integer"
    assert body["error"]["type"] == "validation_error"
