from datetime import datetime, timedelta, timezone


def _window(start_days: int, end_days: int) -> dict:
    now = datetime.now(tz=timezone.utc)
    return {
        "startDate": (now + timedelta(days=start_days)).isoformat(),
        "endDate": (now + timedelta(days=end_days)).isoformat(),
    }


async def _announce(client, world, heading, start_days=-1, end_days=1, **flags):
    payload = {"heading": heading, "content": f"{heading} details"}
    payload.update(_window(start_days, end_days))
    payload.update(flags)
    resp = await client.post("/api/announcements", json=payload, headers=world.header("admin_a"))
    assert resp.status_code == 201
    return resp.json()["data"]


async def test_create_announcement(client, world):
    data = await _announce(client, world, "Exam schedule")
    assert data["businessId"] == world.business_a
    assert data["createdBy"] == world.users["admin_a"]
    assert data["isActive"] is True
    assert data["visibleToStudents"] is True


async def test_create_announcement_validates_window(client, world):
    payload = {"heading": "Backwards", "content": "x"}
    payload.update(_window(2, 1))
    resp = await client.post("/api/announcements", json=payload, headers=world.header("admin_a"))
    assert resp.status_code == 400
    assert resp.json()["message"] == "End date must be after start date"


async def test_audience_and_window_filtering(client, world):
    await _announce(client, world, "For everyone")
    await _announce(client, world, "Teachers only", visibleToStudents=False)
    await _announce(client, world, "Next month", start_days=30, end_days=40)

    admin_view = await client.get("/api/announcements", headers=world.header("admin_a"))
    assert len(admin_view.json()["data"]) == 3

    teacher_view = await client.get("/api/announcements", headers=world.header("teacher_a"))
    assert {a["heading"] for a in teacher_view.json()["data"]} == {"For everyone", "Teachers only"}

    student_view = await client.get("/api/announcements", headers=world.header("student_a"))
    assert [a["heading"] for a in student_view.json()["data"]] == ["For everyone"]

    other_tenant = await client.get("/api/announcements", headers=world.header("student_b"))
    assert other_tenant.json()["data"] == []


async def test_get_announcement_of_other_business(client, world):
    data = await _announce(client, world, "Private")
    resp = await client.get(f"/api/announcements/{data['id']}", headers=world.header("admin_b"))
    assert resp.status_code == 403
    assert resp.json()["message"] == "You do not have access to this announcement"


async def test_update_announcement(client, world):
    data = await _announce(client, world, "Typo hedaing")
    resp = await client.put(
        f"/api/announcements/{data['id']}", json={"heading": "Fixed heading"}, headers=world.header("admin_a")
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["heading"] == "Fixed heading"


async def test_delete_announcement_deactivates(client, world):
    data = await _announce(client, world, "Short lived")
    resp = await client.delete(f"/api/announcements/{data['id']}", headers=world.header("admin_a"))
    assert resp.status_code == 200

    fetched = await client.get(f"/api/announcements/{data['id']}", headers=world.header("admin_a"))
    assert fetched.status_code == 200
    assert fetched.json()["data"]["isActive"] is False

    student_view = await client.get("/api/announcements", headers=world.header("student_a"))
    assert student_view.json()["data"] == []


async def test_student_cannot_update(client, world):
    data = await _announce(client, world, "Locked")
    resp = await client.put(
        f"/api/announcements/{data['id']}", json={"heading": "Hacked"}, headers=world.header("student_a")
    )
    assert resp.status_code == 403


async def test_get_announcement_follows_audience_and_window(client, world):
    staff = await _announce(client, world, "Staff only", visibleToStudents=False, visibleToTeachers=False)
    later = await _announce(client, world, "Next term", start_days=30, end_days=40)
    shared = await _announce(client, world, "Holiday")

    for announcement in (staff, later):
        resp = await client.get(f"/api/announcements/{announcement['id']}", headers=world.header("student_a"))
        assert resp.status_code == 404
        assert resp.json()["message"] == "Announcement not found"

    teacher_resp = await client.get(f"/api/announcements/{staff['id']}", headers=world.header("teacher_a"))
    assert teacher_resp.status_code == 404

    ok_resp = await client.get(f"/api/announcements/{shared['id']}", headers=world.header("student_a"))
    assert ok_resp.status_code == 200
    assert ok_resp.json()["data"]["heading"] == "Holiday"

    admin_resp = await client.get(f"/api/announcements/{staff['id']}", headers=world.header("admin_a"))
    assert admin_resp.status_code == 200
