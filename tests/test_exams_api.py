from sqlalchemy import func, select

from contentkosh_api.db.models import Exam, Status


def _exams_url(world, business_id=None):
    return f"/api/business/{business_id or world.business_a}/exams"


async def test_create_exam(client, world):
    resp = await client.post(
        _exams_url(world),
        json={"name": "  NEET UG  ", "code": "NEET", "startDate": "2026-05-01T00:00:00Z"},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["name"] == "NEET UG"
    assert data["businessId"] == world.business_a
    assert data["createdBy"] == world.users["admin_a"]
    assert data["status"] == "ACTIVE"


async def test_create_exam_ignores_body_business_id(client, world):
    resp = await client.post(
        _exams_url(world),
        json={"name": "GATE", "businessId": world.business_b},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["businessId"] == world.business_a


async def test_create_exam_requires_name(client, world):
    resp = await client.post(_exams_url(world), json={"code": "X"}, headers=world.header("admin_a"))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Exam name is required"

    empty = await client.post(
        _exams_url(world), json={"name": "", "businessId": world.business_a}, headers=world.header("admin_a")
    )
    assert empty.status_code == 400
    assert "Exam name is required" in empty.json()["message"]


async def test_duplicate_exam_name_is_rejected_once(client, world):
    resp = await client.post(_exams_url(world), json={"name": "JEE Main"}, headers=world.header("admin_a"))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Exam with this name already exists for this business"

    async with world.session_factory() as session:
        count = await session.scalar(
            select(func.count()).select_from(Exam).where(Exam.business_id == world.business_a, Exam.name == "JEE Main")
        )
    assert count == 1


async def test_same_exam_name_in_other_business_is_allowed(client, world):
    resp = await client.post(
        _exams_url(world, world.business_b), json={"name": "JEE Main"}, headers=world.header("admin_b")
    )
    assert resp.status_code == 201


async def test_rename_onto_existing_exam_is_rejected(client, world):
    created = await client.post(_exams_url(world), json={"name": "BITSAT"}, headers=world.header("admin_a"))
    exam_id = created.json()["data"]["id"]

    resp = await client.put(
        f"{_exams_url(world)}/{exam_id}", json={"name": "JEE Main"}, headers=world.header("admin_a")
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Exam with this name already exists for this business"

    ok_resp = await client.put(
        f"{_exams_url(world)}/{exam_id}", json={"description": "Birla entrance"}, headers=world.header("admin_a")
    )
    assert ok_resp.status_code == 200
    assert ok_resp.json()["data"]["description"] == "Birla entrance"
    assert ok_resp.json()["data"]["updatedBy"] == world.users["admin_a"]


async def test_soft_delete_keeps_row_and_frees_name(client, world):
    resp = await client.delete(f"{_exams_url(world)}/{world.exam_a}", headers=world.header("admin_a"))
    assert resp.status_code == 200

    async with world.session_factory() as session:
        exam = await session.get(Exam, world.exam_a)
    assert exam is not None
    assert exam.status == Status.INACTIVE

    listing = await client.get(_exams_url(world), headers=world.header("admin_a"))
    assert all(e["id"] != world.exam_a for e in listing.json()["data"])

    recreated = await client.post(_exams_url(world), json={"name": "JEE Main"}, headers=world.header("admin_a"))
    assert recreated.status_code == 201


async def test_exam_from_other_business_is_not_found(client, world):
    resp = await client.get(
        f"{_exams_url(world, world.business_b)}/{world.exam_a}", headers=world.header("admin_b")
    )
    assert resp.status_code == 404
    assert resp.json()["message"] == "Exam not found"


async def test_teacher_lists_only_exams_they_teach(client, world):
    await client.post(_exams_url(world), json={"name": "CAT"}, headers=world.header("admin_a"))

    admin_view = await client.get(_exams_url(world), headers=world.header("admin_a"))
    assert {e["name"] for e in admin_view.json()["data"]} == {"JEE Main", "CAT"}

    teacher_view = await client.get(_exams_url(world), headers=world.header("teacher_a"))
    assert teacher_view.status_code == 200
    assert [e["id"] for e in teacher_view.json()["data"]] == [world.exam_a]


async def test_list_exams_paginates_and_sorts(client, world):
    for name in ("A-Exam", "B-Exam", "C-Exam"):
        await client.post(_exams_url(world), json={"name": name}, headers=world.header("admin_a"))

    resp = await client.get(
        _exams_url(world),
        params={"page": 1, "limit": 2, "sort": "name:asc"},
        headers=world.header("admin_a"),
    )
    assert [e["name"] for e in resp.json()["data"]] == ["A-Exam", "B-Exam"]


async def test_update_exam_can_clear_optional_fields(client, world):
    created = await client.post(
        _exams_url(world),
        json={"name": "KVPY", "code": "KV", "description": "Fellowship", "startDate": "2026-11-01T00:00:00Z"},
        headers=world.header("admin_a"),
    )
    exam_id = created.json()["data"]["id"]

    resp = await client.put(
        f"{_exams_url(world)}/{exam_id}",
        json={"code": None, "description": None, "startDate": None, "name": None},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "KVPY"
    assert data["code"] is None
    assert data["description"] is None
    assert data["startDate"] is None
