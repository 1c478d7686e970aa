from schemas.application import (
    ApplicationDraft,
    ApplicationSaved,
    FieldEdit,
    SuggestionAccept,
    SuggestionRequest,
    SuggestionResponse,
)

__all__ = [
    "ApplicationDraft",
    "ApplicationSaved",
    "FieldEdit",
    "SuggestionAccept",
    "SuggestionRequest",
    "SuggestionResponse",
]
