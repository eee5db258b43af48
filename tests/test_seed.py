from sqlalchemy import func, select

from contentkosh_api.db import seed
from contentkosh_api.db.models import Business, Permission, User, UserRole


async def _count(session_factory, stmt):
    async with session_factory() as session:
        return await session.scalar(stmt)


async def test_seed_is_repeatable(session_factory, monkeypatch):
    async def _session():
        async with session_factory() as session:
            yield session

    monkeypatch.setattr(seed, "get_async_session", _session)

    await seed.seed_all()
    assert await _count(session_factory, select(func.count()).select_from(Permission)) == len(seed.PERMISSIONS)
    assert await _count(session_factory, select(func.count()).select_from(User)) == 0

    await seed.seed_all(demo=True)
    await seed.seed_all(demo=True)
    assert await _count(session_factory, select(func.count()).select_from(Permission)) == len(seed.PERMISSIONS)
    assert await _count(session_factory, select(func.count()).select_from(User)) == len(seed.DEMO_USERS)

    async with session_factory() as session:
        business = (
            await session.execute(select(Business).where(Business.slug == seed.DEMO_BUSINESS_SLUG))
        ).scalar_one()
        users = (await session.execute(select(User))).scalars().all()
    for user in users:
        if user.role == UserRole.SUPERADMIN:
            assert user.business_id is None
        else:
            assert user.business_id == business.id
