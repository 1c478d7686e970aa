from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from models import SocialSupportApplication
from schemas.application import ApplicationDraft
from services.exceptions import PersistenceError

logger = logging.getLogger(__name__)

MSG_SAVE_FAILED = "Failed to save application"
MSG_SUBMIT_FAILED = "Failed to submit application"
MSG_NOT_FOUND = "Application not found"


def new_application_id() -> str:
    return f"app-{uuid.uuid4().hex[:12]}"


def _row_values(draft: ApplicationDraft) -> dict:
    values = draft.form_values()
    values["current_step"] = draft.current_step
    return values


class ApplicationRepository:
    """Create/update/read access to the ``applications`` resource."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def upsert(self, draft: ApplicationDraft) -> str:
        """
        Update the record at ``draft.id`` (creating it under that id if the backend has none),
        or create a new record when the draft has no id yet. Returns the record id.
        """
        now = datetime.now(timezone.utc)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    row = await session.get(SocialSupportApplication, draft.id) if draft.id else None
                    if row is None:
                        row = SocialSupportApplication(
                            id=draft.id or new_application_id(),
                            status="draft",
                            created_at=now,
                        )
                        session.add(row)
                    for key, value in _row_values(draft).items():
                        setattr(row, key, value)
                    row.updated_at = now
                return row.id
        except SQLAlchemyError as e:
            logger.error("Error saving application %s: %s", draft.id or "<new>", e)
            raise PersistenceError(MSG_SAVE_FAILED) from e

    async def submit(self, application_id: str, draft: ApplicationDraft) -> None:
        """Write the final field values and mark the record submitted."""
        now = datetime.now(timezone.utc)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    row = await session.get(SocialSupportApplication, application_id)
                    if row is None:
                        raise PersistenceError(MSG_NOT_FOUND)
                    for key, value in _row_values(draft).items():
                        setattr(row, key, value)
                    row.status = "submitted"
                    row.submitted_at = now
                    row.updated_at = now
        except SQLAlchemyError as e:
            logger.error("Error submitting application %s: %s", application_id, e)
            raise PersistenceError(MSG_SUBMIT_FAILED) from e
        logger.info("Application %s submitted", application_id)

    async def fetch(self, application_id: str) -> ApplicationDraft | None:
        """Read-only lookup. Missing records and backend errors both come back as None."""
        try:
            async with self._session_factory() as session:
                row = await session.get(SocialSupportApplication, application_id)
                if row is None:
                    return None
                return ApplicationDraft.model_validate(row)
        except SQLAlchemyError as e:
            logger.error("Error fetching application %s: %s", application_id, e)
            return None

    async def list_applications(self, limit: int = 50) -> list[ApplicationDraft]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(SocialSupportApplication)
                    .order_by(SocialSupportApplication.updated_at.desc())
                    .limit(limit)
                )
                return [ApplicationDraft.model_validate(r) for r in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Error listing applications: %s", e)
            raise PersistenceError("Failed to list applications") from e
