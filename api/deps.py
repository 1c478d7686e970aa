from fastapi import Request

from services.form_controller import FormController
from services.repository import ApplicationRepository
from services.suggestions import SuggestionClient


def get_repository(request: Request) -> ApplicationRepository:
    return request.app.state.repository


def get_form_controller(request: Request) -> FormController:
    return request.app.state.form_controller


def get_suggestion_client() -> SuggestionClient:
    return SuggestionClient()
