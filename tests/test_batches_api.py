from contentkosh_api.core.security import create_access_token
from contentkosh_api.db.models import User, UserRole


def _batch_payload(world, **overrides):
    payload = {
        "codeName": "JEE-2026-B",
        "displayName": "JEE 2026 Evening",
        "startDate": "2026-04-01T00:00:00Z",
        "endDate": "2026-12-31T00:00:00Z",
        "courseId": world.course_a,
    }
    payload.update(overrides)
    return payload


async def _add_user(client, world, user_id, batch_id=None, as_user="admin_a"):
    return await client.post(
        "/api/batches/add-user",
        json={"userId": user_id, "batchId": batch_id or world.batch_a},
        headers=world.header(as_user),
    )


async def test_create_batch(client, world):
    resp = await client.post("/api/batches", json=_batch_payload(world), headers=world.header("admin_a"))
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["codeName"] == "JEE-2026-B"
    assert data["isActive"] is True
    assert data["createdBy"] == world.users["admin_a"]


async def test_create_batch_duplicate_code_name(client, world):
    resp = await client.post(
        "/api/batches", json=_batch_payload(world, codeName="JEE-2026-A"), headers=world.header("admin_a")
    )
    assert resp.status_code == 409
    assert resp.json()["message"] == "Batch with this code name already exists"


async def test_create_batch_rejects_reversed_dates(client, world):
    resp = await client.post(
        "/api/batches",
        json=_batch_payload(world, startDate="2026-12-31T00:00:00Z", endDate="2026-01-01T00:00:00Z"),
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "End date must be after start date"


async def test_create_batch_for_foreign_course_is_forbidden(client, world):
    resp = await client.post("/api/batches", json=_batch_payload(world), headers=world.header("admin_b"))
    assert resp.status_code == 403
    assert resp.json()["message"] == "You do not have access to this course"


async def test_add_user_rejects_admins(client, world):
    resp = await _add_user(client, world, world.users["admin_a"])
    assert resp.status_code == 400
    assert resp.json()["message"] == "Only Teachers and Students can be added to a batch"


async def test_add_user_rejects_other_business(client, world):
    resp = await _add_user(client, world, world.users["student_b"])
    assert resp.status_code == 400
    assert resp.json()["message"] == "User is not part of this business"


async def test_add_user_twice_conflicts(client, world):
    first = await _add_user(client, world, world.users["outsider_a"])
    assert first.status_code == 201
    member = first.json()["data"]
    assert member["userId"] == world.users["outsider_a"]
    assert member["user"]["email"] == world.emails["outsider_a"]

    again = await _add_user(client, world, world.users["outsider_a"])
    assert again.status_code == 409
    assert again.json()["message"] == "User is already in this batch"


async def test_add_unknown_user(client, world):
    resp = await _add_user(client, world, 999999)
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found"


async def test_remove_user(client, world):
    resp = await client.post(
        "/api/batches/remove-user",
        json={"userId": world.users["student_a"], "batchId": world.batch_a},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 200

    again = await client.post(
        "/api/batches/remove-user",
        json={"userId": world.users["student_a"], "batchId": world.batch_a},
        headers=world.header("admin_a"),
    )
    assert again.status_code == 404
    assert again.json()["message"] == "User is not in this batch"


async def test_membership_changes_on_foreign_batch_are_forbidden(client, world):
    resp = await _add_user(client, world, world.users["student_b"], as_user="admin_b")
    assert resp.status_code == 403


async def test_list_members_by_role(client, world):
    resp = await client.get(
        f"/api/batches/{world.batch_a}/users", params={"role": "STUDENT"}, headers=world.header("admin_a")
    )
    assert resp.status_code == 200
    members = resp.json()["data"]
    assert [m["userId"] for m in members] == [world.users["student_a"]]
    assert members[0]["user"]["role"] == "STUDENT"


async def test_batch_with_users(client, world):
    resp = await client.get(f"/api/batches/{world.batch_a}/with-users", headers=world.header("admin_a"))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert {m["userId"] for m in data["batchUsers"]} == {world.users["teacher_a"], world.users["student_a"]}


async def test_deactivated_member_loses_visibility(client, world):
    resp = await client.put(
        f"/api/batches/{world.batch_a}/users/{world.users['student_a']}",
        json={"isActive": False},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["isActive"] is False

    listing = await client.get("/api/batches", headers=world.header("student_a"))
    assert listing.status_code == 200
    assert listing.json()["data"] == []


async def test_list_active_batches_by_role(client, world):
    await client.post(
        "/api/batches", json=_batch_payload(world, codeName="JEE-2026-C"), headers=world.header("admin_a")
    )

    admin_view = await client.get("/api/batches", headers=world.header("admin_a"))
    assert len(admin_view.json()["data"]) == 2

    student_view = await client.get("/api/batches", headers=world.header("student_a"))
    assert [b["id"] for b in student_view.json()["data"]] == [world.batch_a]

    other_tenant = await client.get("/api/batches", headers=world.header("admin_b"))
    assert other_tenant.json()["data"] == []

    superadmin_view = await client.get("/api/batches", headers=world.header("superadmin"))
    assert len(superadmin_view.json()["data"]) == 2


async def test_list_batches_requires_member_role(client, world):
    async with world.session_factory() as session:
        user = User(
            email="plain.user@example.com",
            password="x",
            name="Plain User",
            role=UserRole.USER,
            business_id=world.business_a,
        )
        session.add(user)
        await session.commit()
        user_id = user.id

    token = create_access_token(user_id, world.business_a, "USER", "plain.user@example.com")
    resp = await client.get("/api/batches", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403
    assert resp.json()["message"] == "You do not have access to view batches"


async def test_teacher_sees_only_own_batches_of_course(client, world):
    await client.post(
        "/api/batches", json=_batch_payload(world, codeName="JEE-2026-D"), headers=world.header("admin_a")
    )
    admin_view = await client.get(f"/api/batches/course/{world.course_a}", headers=world.header("admin_a"))
    assert len(admin_view.json()["data"]) == 2

    teacher_view = await client.get(f"/api/batches/course/{world.course_a}", headers=world.header("teacher_a"))
    assert [b["id"] for b in teacher_view.json()["data"]] == [world.batch_a]


async def test_batches_of_user(client, world):
    resp = await client.get(f"/api/batches/user/{world.users['student_a']}", headers=world.header("admin_a"))
    assert resp.status_code == 200
    assert [b["id"] for b in resp.json()["data"]] == [world.batch_a]


async def test_update_batch_rejects_reversed_dates(client, world):
    resp = await client.put(
        f"/api/batches/{world.batch_a}",
        json={"endDate": "2000-01-01T00:00:00Z"},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "End date must be after start date"


async def test_update_and_delete_batch(client, world):
    updated = await client.put(
        f"/api/batches/{world.batch_a}", json={"displayName": "Renamed"}, headers=world.header("admin_a")
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["displayName"] == "Renamed"
    assert updated.json()["data"]["updatedBy"] == world.users["admin_a"]

    deleted = await client.delete(f"/api/batches/{world.batch_a}", headers=world.header("admin_a"))
    assert deleted.status_code == 200
    gone = await client.get(f"/api/batches/{world.batch_a}", headers=world.header("admin_a"))
    assert gone.status_code == 404
