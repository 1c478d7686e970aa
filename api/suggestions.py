from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_suggestion_client
from schemas.application import SuggestionRequest, SuggestionResponse
from services.exceptions import SuggestionError
from services.suggestions import SuggestionClient

router = APIRouter(prefix="/api/suggestions", tags=["suggestions"])


@router.post("", response_model=SuggestionResponse)
async def create_suggestion(body: SuggestionRequest, client: SuggestionClient = Depends(get_suggestion_client)):
    """
    Generate a candidate text for one situation field. Nothing is written to the draft;
    the applicant reviews the text and accepts it via /api/form/suggestions/accept.
    """
    try:
        text = await client.generate(body.field_type, body.prompt)
    except SuggestionError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    return SuggestionResponse(text=text)
