from sqlalchemy import select

from contentkosh_api.db.models import Business, User


async def test_create_business_links_creator(client, world):
    register = await client.post(
        "/api/auth/register",
        json={"email": "founder@example.com", "password": "secret1", "name": "Founder"},
    )
    token = register.json()["data"]["accessToken"]
    founder_id = register.json()["data"]["user"]["id"]

    resp = await client.post(
        "/api/business",
        json={"instituteName": "Gamma Tutorials", "slug": "gamma-tutorials", "contactNumber": "+919876543210"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["slug"] == "gamma-tutorials"
    assert data["contactNumber"] == "+919876543210"

    async with world.session_factory() as session:
        founder = await session.get(User, founder_id)
    assert founder.business_id == data["id"]


async def test_create_business_duplicate_slug(client, world):
    resp = await client.post(
        "/api/business",
        json={"instituteName": "Copycat", "slug": "alpha-academy"},
        headers=world.header("superadmin"),
    )
    assert resp.status_code == 409
    assert resp.json()["message"] == "Business with this slug already exists"


async def test_create_business_rejects_bad_slug(client, world):
    resp = await client.post(
        "/api/business",
        json={"instituteName": "Bad Slug", "slug": "Bad Slug!"},
        headers=world.header("superadmin"),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Slug must contain only lowercase letters, numbers, and hyphens"


async def test_create_business_requires_fields(client, world):
    resp = await client.post("/api/business", json={}, headers=world.header("superadmin"))
    assert resp.status_code == 400
    assert resp.json()["message"] == "instituteName is required, slug is required"


async def test_get_business_by_slug(client, world):
    resp = await client.get("/api/business/slug/beta-classes", headers=world.header("student_a"))
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == world.business_b

    missing = await client.get("/api/business/slug/nope", headers=world.header("student_a"))
    assert missing.status_code == 404
    assert missing.json()["message"] == "Business not found"


async def test_update_business(client, world):
    resp = await client.put(
        f"/api/business/{world.business_a}",
        json={"tagline": "Crack it", "youtubeUrl": "https://youtube.com/@alpha"},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["tagline"] == "Crack it"
    assert data["youtubeUrl"].startswith("https://youtube.com/")
    assert data["instituteName"] == "Alpha Academy"


async def test_update_business_slug_conflict(client, world):
    resp = await client.put(
        f"/api/business/{world.business_a}",
        json={"slug": "beta-classes"},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 409


async def test_delete_business_cascades_exams(client, world):
    resp = await client.delete(f"/api/business/{world.business_a}", headers=world.header("superadmin"))
    assert resp.status_code == 200

    async with world.session_factory() as session:
        assert await session.get(Business, world.business_a) is None
        admin = (await session.execute(select(User).where(User.id == world.users["admin_a"]))).scalar_one()
    assert admin.business_id is None


async def test_business_users_create_and_list(client, world):
    resp = await client.post(
        f"/api/business/{world.business_a}/users",
        json={
            "name": "Second Teacher",
            "email": "teacher.two@example.com",
            "password": "secret1",
            "role": "TEACHER",
        },
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["businessId"] == world.business_a

    teachers = await client.get(
        f"/api/business/{world.business_a}/users",
        params={"role": "TEACHER"},
        headers=world.header("admin_a"),
    )
    assert teachers.status_code == 200
    emails = {u["email"] for u in teachers.json()["data"]}
    assert emails == {world.emails["teacher_a"], "teacher.two@example.com"}


async def test_business_users_duplicate_email(client, world):
    resp = await client.post(
        f"/api/business/{world.business_a}/users",
        json={"name": "Dup", "email": world.emails["student_b"], "password": "secret1", "role": "STUDENT"},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 409
    assert resp.json()["message"] == "User with this email already exists"


async def test_business_users_cannot_be_superadmin(client, world):
    resp = await client.post(
        f"/api/business/{world.business_a}/users",
        json={"name": "Root", "email": "root@example.com", "password": "secret1", "role": "SUPERADMIN"},
        headers=world.header("admin_a"),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Role must be one of ADMIN, TEACHER, STUDENT, USER"

    login = await client.post("/api/auth/login", json={"email": "root@example.com", "password": "secret1"})
    assert login.status_code == 401
