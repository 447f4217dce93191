"""
FastAPI Endpoints for the Sales Intelligence Engine
===================================================
RESTful API behind the sales dashboard.

Base URL: http://localhost:8000

Endpoints:
- GET    /                                - API info
- GET    /api/health                      - Health check
- POST   /api/datasets/{kind}             - Load companies/people rows (JSON)
- POST   /api/datasets/{kind}/upload      - Load companies/people from CSV/Excel
- DELETE /api/datasets                    - Drop both datasets
- GET    /api/merged                      - Merged & scored companies
- GET    /api/stats                       - Dashboard statistics
- POST   /api/filter                      - Filter merged companies
- GET    /api/filter/options              - Values available to filters
- GET    /api/map                         - Map points
- GET    /api/export.csv                  - CSV export of merged companies
- POST   /api/ask                         - Ask the assistant about a company
- GET    /api/companies/{id}/jobs         - Open job postings for a company
- GET    /api/engine/stats                - Engine diagnostics
"""

import logging
import zipfile
from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from .. import __version__
from ..models.schemas import (
    AskRequest,
    AssistantAnswer,
    DashboardStats,
    DatasetLoadResponse,
    DatasetRowsRequest,
    FilterCriteria,
    FilterOptions,
    JobPostingsResult,
    MapPoint,
    MergedRecord,
)
from ..engine import SalesIntelligenceEngine
from ..io_utils import read_table

logger = logging.getLogger(__name__)

DATASET_KINDS = ("companies", "people")


# =============================================================================
# FastAPI App Initialization
# =============================================================================

app = FastAPI(
    title="Sales Intelligence Engine API",
    description="""
## Company & Contact Sales Intelligence

Upload a companies dataset and a people dataset; the engine joins them on
normalized company name, scores each company for sales fit and assigns a
priority tier.

### Quick Start:
1. `POST /api/datasets/companies` and `POST /api/datasets/people` with rows
2. `GET /api/merged` for the ranked companies
3. `POST /api/filter` and `GET /api/stats` for dashboard views
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - Allow all origins for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Engine Initialization
# =============================================================================

# In-memory datasets (replaced wholesale on each upload)
def get_default_engine() -> SalesIntelligenceEngine:
    return SalesIntelligenceEngine()

engine = get_default_engine()


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@app.get("/", tags=["Info"])
async def root():
    """API information and available endpoints"""
    return {
        "service": "Sales Intelligence Engine",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "Load Dataset": "POST /api/datasets/{companies|people}",
            "Upload Dataset": "POST /api/datasets/{companies|people}/upload",
            "Merged": "GET /api/merged",
            "Stats": "GET /api/stats",
            "Filter": "POST /api/filter",
            "Ask": "POST /api/ask",
            "Jobs": "GET /api/companies/{id}/jobs",
            "Health": "GET /api/health",
        }
    }


@app.get("/api/health", tags=["Info"])
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "Sales Intelligence Engine",
        "version": __version__,
        "timestamp": datetime.utcnow().isoformat(),
        "llm_configured": engine.assistant.llm_enabled,
    }


# =============================================================================
# Dataset Endpoints
# =============================================================================

def _load(kind: str, rows: List[dict]) -> DatasetLoadResponse:
    if kind not in DATASET_KINDS:
        raise HTTPException(status_code=404, detail=f"Unknown dataset: {kind}")

    if kind == "companies":
        summary = engine.load_companies(rows)
    else:
        summary = engine.load_people(rows)

    return DatasetLoadResponse(
        kind=kind,
        total_rows=summary.total_rows,
        kept_rows=summary.kept_rows,
        dropped_rows=summary.dropped_rows,
        merged_companies=len(engine.merged()),
    )


@app.post("/api/datasets/{kind}", response_model=DatasetLoadResponse, tags=["Datasets"])
async def load_dataset(kind: str, request: DatasetRowsRequest):
    """
    Replace a dataset with parsed rows.

    Rows failing validation are dropped and reported in `dropped_rows`.
    """
    return _load(kind, request.rows)


@app.post("/api/datasets/{kind}/upload", response_model=DatasetLoadResponse, tags=["Datasets"])
async def upload_dataset(
    kind: str,
    request: Request,
    filename: str = Query(..., description="Original file name (.csv, .xlsx, .xls)"),
):
    """Replace a dataset from a raw CSV or Excel request body"""
    if kind not in DATASET_KINDS:
        raise HTTPException(status_code=404, detail=f"Unknown dataset: {kind}")

    body = await request.body()
    try:
        rows = read_table(body, filename)
    except (ValueError, zipfile.BadZipFile) as e:
        logger.warning("Could not parse %s upload %s: %s", kind, filename, e)
        raise HTTPException(status_code=400, detail=f"Error processing file: {e}")

    return _load(kind, rows)


@app.delete("/api/datasets", tags=["Datasets"])
async def reset_datasets():
    """Drop both datasets"""
    engine.reset()
    return {"status": "cleared"}


# =============================================================================
# Dashboard Endpoints
# =============================================================================

@app.get("/api/merged", response_model=List[MergedRecord], tags=["Dashboard"])
async def get_merged(limit: Optional[int] = Query(None, ge=1, description="Return the top N companies")):
    """Merged companies ordered by sales fit score"""
    records = engine.merged()
    return records[:limit] if limit else records


@app.get("/api/stats", response_model=DashboardStats, tags=["Dashboard"])
async def get_dashboard_stats():
    """Totals and distributions for the dashboard"""
    return engine.dashboard_stats()


@app.post("/api/filter", response_model=List[MergedRecord], tags=["Dashboard"])
async def filter_records(criteria: FilterCriteria):
    """Merged companies matching every given criterion"""
    return engine.filter(criteria)


@app.get("/api/filter/options", response_model=FilterOptions, tags=["Dashboard"])
async def get_filter_options():
    """Distinct values present in the merged data"""
    return engine.filter_options()


@app.get("/api/map", response_model=List[MapPoint], tags=["Dashboard"])
async def get_map_data():
    """Top companies placed on the map"""
    return engine.map_data()


@app.get("/api/export.csv", tags=["Dashboard"])
async def export_csv():
    """Download merged companies as CSV"""
    return Response(
        content=engine.export_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="sales_intelligence.csv"'},
    )


# =============================================================================
# Assistant
# =============================================================================

@app.post("/api/ask", response_model=AssistantAnswer, tags=["Assistant"])
async def ask_assistant(request: AskRequest):
    """
    Ask a question about one merged company.

    Uses the configured LLM when available, otherwise answers from the data.
    """
    answer = engine.ask(request.company_id, request.question)
    if answer is None:
        raise HTTPException(status_code=404, detail="Company not found in merged data")
    return answer


@app.get("/api/companies/{company_id}/jobs", response_model=JobPostingsResult, tags=["Assistant"])
async def get_job_postings(company_id: str):
    """
    Open roles at one merged company.

    Returns an empty list with an `error` when no job source is configured
    or the search fails.
    """
    result = engine.job_postings(company_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Company not found in merged data")
    return result


# =============================================================================
# Statistics
# =============================================================================

@app.get("/api/engine/stats", tags=["Info"])
async def get_engine_stats():
    """Get engine statistics"""
    return engine.get_stats()


# =============================================================================
# Error Handlers
# =============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "type": type(exc).__name__,
        }
    )
