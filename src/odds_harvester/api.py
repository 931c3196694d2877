"""
HTTP trigger for the harvest pipeline.

``POST /api/analyze-leon`` runs one harvest and answers once it returns.
There is no progress query and no cancellation. A run whose report could
not be written is still acknowledged with 200; ``report_written`` tells the
caller whether the file exists. Pipeline failures map to 502.

Serve with any ASGI server, e.g. ``odds_harvester.api:app``.
"""

from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .errors import HarvestError
from .harvest_logging import configure_logging, get_logger
from .pipelines.harvest import run_harvest

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["harvest"])


@router.post("/analyze-leon")
async def analyze_leon():
    logger.debug("REST request to analyze bookmaker leon")
    summary = await run_harvest(get_settings())
    return {
        "message": "Data successfully processed",
        "matches": summary.match_count,
        "report_written": summary.report_written,
        "report_path": str(summary.report_path),
    }


async def harvest_error_handler(request: Request, exc: HarvestError) -> JSONResponse:
    logger.error("Harvest request failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging(get_settings())
    yield


def create_app() -> FastAPI:
    application = FastAPI(title="Odds Harvester", lifespan=lifespan)
    application.include_router(router)
    application.add_exception_handler(HarvestError, harvest_error_handler)
    return application


app = create_app()
