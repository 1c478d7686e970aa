import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import AsyncSessionLocal, init_db
from api.applications import router as applications_router
from api.form import router as form_router
from api.suggestions import router as suggestions_router
from services.draft_store import DraftStore
from services.form_controller import FormController
from services.repository import ApplicationRepository

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    repository = ApplicationRepository(AsyncSessionLocal)
    controller = FormController(DraftStore(settings.draft_store_path), repository)
    controller.start()
    app.state.repository = repository
    app.state.form_controller = controller
    if not settings.has_openai_key:
        logger.warning("OPENAI_API_KEY is not set; AI suggestions are disabled")
    yield


app = FastAPI(
    title=settings.app_name,
    description="Social support application form: drafts, validation, submission and AI writing help",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(applications_router)
app.include_router(form_router)
app.include_router(suggestions_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
