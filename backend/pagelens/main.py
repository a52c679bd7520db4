from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pagelens import database
from pagelens.config import get_settings
from pagelens.errors import AnalysisError
from pagelens.models import AnalysisReport, WireModel
from pagelens.service import run_analysis

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not (settings.supabase_url and settings.supabase_key):
        logger.warning("[store] Supabase is not configured; analyses will not be stored")
    yield


app = FastAPI(title="PageLens API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]


@app.exception_handler(RequestValidationError)
async def invalid_request_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request data", "errors": jsonable_errors(exc)},
    )


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class AnalyzeRequest(WireModel):
    url: str
    refresh: bool = False


class UpdateAnalysisRequest(WireModel):
    title: str | None = None
    is_public: bool | None = None


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/")
def root():
    return {"message": "PageLens is running"}


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/analyze", response_model=AnalysisReport)
async def analyze_endpoint(request: AnalyzeRequest):
    """Analyze a URL: content/SEO/technical report plus attention heatmap."""
    try:
        return await run_analysis(request.url, refresh=request.refresh)
    except AnalysisError as e:
        logger.warning(f"[analyze] {type(e).__name__} for {request.url!r}: {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception(f"[analyze] Unexpected failure for {request.url!r}: {e}")
        raise HTTPException(status_code=500, detail="Failed to process request")


@app.get("/analyses", response_model=list[AnalysisReport])
async def list_analyses(limit: int = 20):
    """List recent public analyses."""
    try:
        return await database.list_public_analyses(limit=max(1, min(limit, 50)))
    except Exception as e:
        logger.warning(f"[store] Listing analyses failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch analyses")


@app.get("/analysis/{analysis_id}", response_model=AnalysisReport)
async def get_analysis_detail(analysis_id: str):
    try:
        report = await database.get_public_analysis(analysis_id)
    except Exception as e:
        logger.warning(f"[store] Fetching analysis {analysis_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch analysis")
    if report is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return report


@app.patch("/analysis/{analysis_id}", response_model=AnalysisReport)
async def update_analysis_endpoint(analysis_id: str, request: UpdateAnalysisRequest):
    """Rename an analysis or change its visibility."""
    changes = request.model_dump(exclude_none=True)
    try:
        report = await database.update_analysis(analysis_id, changes)
    except Exception as e:
        logger.warning(f"[store] Updating analysis {analysis_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to update analysis")
    if report is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return report


@app.delete("/analysis/{analysis_id}")
async def delete_analysis_endpoint(analysis_id: str):
    try:
        await database.delete_analysis(analysis_id)
    except Exception as e:
        logger.warning(f"[store] Deleting analysis {analysis_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete analysis")
    return {"status": "deleted"}
