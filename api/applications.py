from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_repository
from schemas.application import ApplicationDraft, ApplicationSaved
from services.exceptions import PersistenceError
from services.repository import MSG_NOT_FOUND, ApplicationRepository

router = APIRouter(prefix="/api/applications", tags=["applications"])


def _app_to_response(app: ApplicationDraft) -> dict[str, Any]:
    return app.model_dump(mode="json")


@router.get("")
async def list_applications(limit: int = 50, repo: ApplicationRepository = Depends(get_repository)):
    try:
        apps = await repo.list_applications(limit=limit)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=e.message) from e
    return [_app_to_response(a) for a in apps]


@router.get("/{application_id}")
async def get_application(application_id: str, repo: ApplicationRepository = Depends(get_repository)):
    app = await repo.fetch(application_id)
    if not app:
        raise HTTPException(status_code=404, detail=MSG_NOT_FOUND)
    return _app_to_response(app)


@router.post("", status_code=201, response_model=ApplicationSaved)
async def save_application(body: ApplicationDraft, repo: ApplicationRepository = Depends(get_repository)):
    """Create, or update when the body carries an id. Saving the same id twice never creates a second record."""
    try:
        app_id = await repo.upsert(body)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=e.message) from e
    return ApplicationSaved(id=app_id)


@router.post("/{application_id}/submit")
async def submit_application(
    application_id: str,
    body: ApplicationDraft,
    repo: ApplicationRepository = Depends(get_repository),
):
    if not await repo.fetch(application_id):
        raise HTTPException(status_code=404, detail=MSG_NOT_FOUND)
    try:
        await repo.submit(application_id, body)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=e.message) from e
    app = await repo.fetch(application_id)
    if not app:
        raise HTTPException(status_code=404, detail=MSG_NOT_FOUND)
    return _app_to_response(app)
