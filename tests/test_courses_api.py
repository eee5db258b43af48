from contentkosh_api.db.models import Course, Exam


def _courses_url(exam_id):
    return f"/api/exams/{exam_id}/courses"


async def _second_exam(world) -> int:
    async with world.session_factory() as session:
        exam = Exam(name="NEET UG", business_id=world.business_a)
        session.add(exam)
        await session.flush()
        session.add(Course(name="NEET Biology", exam_id=exam.id))
        await session.commit()
        return exam.id


async def test_create_and_get_course(client, world):
    resp = await client.post(
        _courses_url(world.exam_a),
        json={"name": "JEE Advanced Prep", "duration": "12 months"},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 201
    course = resp.json()["data"]
    assert course["examId"] == world.exam_a
    assert course["status"] == "ACTIVE"

    fetched = await client.get(f"{_courses_url(world.exam_a)}/{course['id']}", headers=world.header("admin_a"))
    assert fetched.status_code == 200
    assert fetched.json()["data"]["duration"] == "12 months"


async def test_duplicate_course_name_is_case_insensitive(client, world):
    resp = await client.post(
        _courses_url(world.exam_a), json={"name": "jee foundation"}, headers=world.header("admin_a")
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Course with this name already exists for this exam"


async def test_course_requires_name(client, world):
    resp = await client.post(_courses_url(world.exam_a), json={"name": "   "}, headers=world.header("admin_a"))
    assert resp.status_code == 400
    assert resp.json()["message"] == "Course name is required"


async def test_course_of_another_exam_is_not_found(client, world):
    other_exam = await _second_exam(world)
    resp = await client.get(f"{_courses_url(other_exam)}/{world.course_a}", headers=world.header("admin_a"))
    assert resp.status_code == 404
    assert resp.json()["message"] == "Course not found in this exam"


async def test_student_cannot_create_course(client, world):
    resp = await client.post(_courses_url(world.exam_a), json={"name": "Crash"}, headers=world.header("student_a"))
    assert resp.status_code == 403


async def test_list_courses_active_filter(client, world):
    await client.post(
        _courses_url(world.exam_a),
        json={"name": "Old Syllabus", "status": "INACTIVE"},
        headers=world.header("admin_a"),
    )
    everything = await client.get(_courses_url(world.exam_a), headers=world.header("admin_a"))
    assert len(everything.json()["data"]) == 2

    active = await client.get(
        _courses_url(world.exam_a), params={"active": "true"}, headers=world.header("admin_a")
    )
    assert [c["name"] for c in active.json()["data"]] == ["JEE Foundation"]


async def test_update_and_delete_course(client, world):
    url = f"{_courses_url(world.exam_a)}/{world.course_a}"
    updated = await client.put(url, json={"description": "Two year program"}, headers=world.header("admin_a"))
    assert updated.status_code == 200
    assert updated.json()["data"]["description"] == "Two year program"

    deleted = await client.delete(url, headers=world.header("admin_a"))
    assert deleted.status_code == 200

    gone = await client.get(url, headers=world.header("admin_a"))
    assert gone.status_code == 404


async def test_subject_crud(client, world):
    base = f"{_courses_url(world.exam_a)}/{world.course_a}/subjects"
    created = await client.post(base, json={"name": "Physics"}, headers=world.header("admin_a"))
    assert created.status_code == 201
    subject_id = created.json()["data"]["id"]
    assert created.json()["data"]["courseId"] == world.course_a

    dup = await client.post(base, json={"name": "PHYSICS"}, headers=world.header("admin_a"))
    assert dup.status_code == 400
    assert dup.json()["message"] == "Subject with this name already exists for this course"

    listing = await client.get(base, headers=world.header("teacher_a"))
    assert [s["name"] for s in listing.json()["data"]] == ["Physics"]

    renamed = await client.put(f"{base}/{subject_id}", json={"name": "Physics I"}, headers=world.header("admin_a"))
    assert renamed.json()["data"]["name"] == "Physics I"

    removed = await client.delete(f"{base}/{subject_id}", headers=world.header("admin_a"))
    assert removed.status_code == 200
    missing = await client.get(f"{base}/{subject_id}", headers=world.header("admin_a"))
    assert missing.status_code == 404
    assert missing.json()["message"] == "Subject not found"


async def test_subjects_under_foreign_course_path(client, world):
    other_exam = await _second_exam(world)
    resp = await client.get(
        f"{_courses_url(other_exam)}/{world.course_a}/subjects", headers=world.header("admin_a")
    )
    assert resp.status_code == 404
    assert resp.json()["message"] == "Course not found in this exam"
