"""
Tests for the applications repository against an in-memory SQLite database.
"""
import unittest
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from config import Settings
from database import _get_engine_kwargs, build_engine, build_session_factory, init_db
from models import SocialSupportApplication
from schemas.application import ApplicationDraft
from services.exceptions import PersistenceError
from services.repository import ApplicationRepository


def _draft(**overrides):
    data = {
        "name": "Layla Hassan",
        "email": "layla@example.com",
        "dependents": 0,
        "monthly_income": Decimal("0"),
        "reason_for_applying": "Need help with rent.",
        "current_step": 2,
    }
    data.update(overrides)
    return ApplicationDraft(**data)


class _BrokenSession:
    async def __aenter__(self):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    async def __aexit__(self, *exc):
        return False


class TestApplicationRepository(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.engine = build_engine("sqlite+aiosqlite://")
        await init_db(self.engine)
        self.session_factory = build_session_factory(self.engine)
        self.repo = ApplicationRepository(self.session_factory)

    async def asyncTearDown(self):
        await self.engine.dispose()

    async def _count(self):
        async with self.session_factory() as session:
            return (await session.execute(select(func.count()).select_from(SocialSupportApplication))).scalar_one()

    async def test_upsert_creates_record(self):
        app_id = await self.repo.upsert(_draft())
        self.assertTrue(app_id.startswith("app-"))
        stored = await self.repo.fetch(app_id)
        self.assertEqual(stored.name, "Layla Hassan")
        self.assertEqual(stored.status, "draft")
        self.assertEqual(stored.current_step, 2)
        self.assertEqual(stored.dependents, 0)
        self.assertIsNotNone(stored.updated_at)

    async def test_upsert_with_returned_id_does_not_duplicate(self):
        app_id = await self.repo.upsert(_draft())
        again = await self.repo.upsert(_draft(id=app_id, name="Layla H."))
        self.assertEqual(again, app_id)
        self.assertEqual(await self._count(), 1)
        self.assertEqual((await self.repo.fetch(app_id)).name, "Layla H.")

    async def test_upsert_with_unknown_id_creates_under_that_id(self):
        app_id = await self.repo.upsert(_draft(id="app-fixed"))
        self.assertEqual(app_id, "app-fixed")
        self.assertIsNotNone(await self.repo.fetch("app-fixed"))

    async def test_submit_marks_record_submitted(self):
        app_id = await self.repo.upsert(_draft())
        await self.repo.submit(app_id, _draft(id=app_id, current_step=3))
        stored = await self.repo.fetch(app_id)
        self.assertEqual(stored.status, "submitted")
        self.assertIsNotNone(stored.submitted_at)
        self.assertEqual(stored.current_step, 3)

    async def test_submit_missing_record_fails(self):
        with self.assertRaises(PersistenceError):
            await self.repo.submit("app-missing", _draft())

    async def test_fetch_missing_is_none(self):
        self.assertIsNone(await self.repo.fetch("app-missing"))

    async def test_list_newest_first(self):
        first = await self.repo.upsert(_draft(name="First"))
        second = await self.repo.upsert(_draft(name="Second"))
        await self.repo.upsert(_draft(id=first, name="First again"))
        ids = [a.id for a in await self.repo.list_applications()]
        self.assertEqual(ids, [first, second])

    async def test_backend_errors(self):
        repo = ApplicationRepository(lambda: _BrokenSession())
        with self.assertRaises(PersistenceError):
            await repo.upsert(_draft())
        with self.assertRaises(PersistenceError):
            await repo.submit("app-1", _draft())
        self.assertIsNone(await repo.fetch("app-1"))


class TestEngineOptions(unittest.TestCase):
    def test_sqlite_urls_share_one_connection(self):
        kwargs = _get_engine_kwargs("sqlite+aiosqlite:///./x.db")
        self.assertIs(kwargs["poolclass"], StaticPool)
        self.assertEqual(kwargs["connect_args"], {"check_same_thread": False})

    def test_other_backends_use_default_pool(self):
        kwargs = _get_engine_kwargs("postgresql+asyncpg://user@db/app")
        self.assertNotIn("poolclass", kwargs)
        self.assertNotIn("connect_args", kwargs)

    def test_settings_expose_no_backend_flag(self):
        self.assertFalse(hasattr(Settings(), "is_sqlite"))


if __name__ == "__main__":
    unittest.main()
