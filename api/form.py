from __future__ import annotations

from contextlib import contextmanager
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from api.deps import get_form_controller
from schemas.application import FieldEdit, SuggestionAccept
from services.exceptions import InvalidTransitionError
from services.form_controller import NOTICE_VALIDATION_FAILED, FormController, TransitionResult

router = APIRouter(prefix="/api/form", tags=["form"])


@contextmanager
def _translate_errors():
    """Wrong-state actions are conflicts; unknown fields / bad values are bad requests."""
    try:
        yield
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=e.message) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _result_body(result: TransitionResult) -> dict[str, Any]:
    body = result.state.to_dict()
    body.update({"ok": result.ok, "notice": result.notice, "message": result.message})
    return body


def _respond(result: TransitionResult):
    body = _result_body(result)
    if not result.ok and result.notice == NOTICE_VALIDATION_FAILED:
        return JSONResponse(status_code=422, content=body)
    # save/submit failures are reported in-body; the draft is kept and the user can retry
    return body


@router.get("")
async def get_form_state(controller: FormController = Depends(get_form_controller)):
    return controller.state.to_dict()


@router.patch("/fields")
async def edit_field(body: FieldEdit, controller: FormController = Depends(get_form_controller)):
    with _translate_errors():
        result = controller.edit(body.field, body.value)
    return _respond(result)


@router.post("/suggestions/accept")
async def accept_suggestion(body: SuggestionAccept, controller: FormController = Depends(get_form_controller)):
    with _translate_errors():
        result = controller.accept_suggestion(body.field, body.text)
    return _respond(result)


@router.post("/next")
async def next_step(controller: FormController = Depends(get_form_controller)):
    with _translate_errors():
        result = controller.next()
    return _respond(result)


@router.post("/previous")
async def previous_step(controller: FormController = Depends(get_form_controller)):
    with _translate_errors():
        result = controller.previous()
    return _respond(result)


@router.post("/save")
async def save_progress(controller: FormController = Depends(get_form_controller)):
    with _translate_errors():
        result = await controller.save_progress()
    return _respond(result)


@router.post("/submit")
async def submit_form(controller: FormController = Depends(get_form_controller)):
    with _translate_errors():
        result = await controller.submit()
    return _respond(result)


@router.post("/acknowledge")
async def acknowledge_success(controller: FormController = Depends(get_form_controller)):
    with _translate_errors():
        result = controller.acknowledge_success()
    return _respond(result)
