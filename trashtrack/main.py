"""TrashTrack: FastAPI app."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trashtrack.config import settings
from trashtrack.report_store import ReportStore
from trashtrack.routers import classify, dashboard, files, geocode, reports, seed, ws
from trashtrack.services import gemini

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report classifier availability on startup."""
    if gemini.is_available():
        logger.info("Gemini classifier ready (%s)", settings.gemini_model)
    else:
        logger.info("GEMINI_API_KEY not set, photo classification will return default suggestions")
    logger.info("TrashTrack backend started (%d reports in store)", len(app.state.report_store))
    yield
    logger.info("TrashTrack backend stopped")


app = FastAPI(
    title="TrashTrack",
    description="Citizen waste reporting and municipal cleanup tracking",
    version="1.0.0",
    lifespan=lifespan,
)
app.state.report_store = ReportStore(
    token_prefix=settings.token_prefix,
    token_region=settings.token_region,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reports.router)
app.include_router(classify.router)
app.include_router(files.router)
app.include_router(geocode.router)
app.include_router(dashboard.router)
app.include_router(seed.router)
app.include_router(ws.router)


@app.get("/health")
async def health():
    """Health check."""
    return {
        "status": "ok",
        "reports": len(app.state.report_store),
        "classifier_available": gemini.is_available(),
    }
