# app.py
"""
Fleet Standard Report API - FastAPI application for inspection report scoring.

Upload an inspection report (PDF) or post its text; the report is scored
against the fleet standards rubric (1 = Good ... 4 = Unacceptable) and returned
with per-item evidence and recommendations.

Run with: uvicorn app:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import base64
import binascii
import logging
import secrets
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fleetscore import config
from fleetscore.errors import FleetScoreError, InvalidInputError
from fleetscore.extract.ocr import ocr_pdf
from fleetscore.extract.pdf_text import ReportText, extract_pdf_text
from fleetscore.extract.quality import text_quality_ok
from fleetscore.pipeline import analyze
from fleetscore.rubrics.standards import get_default_standards

config.configure_logging()
logger = logging.getLogger("fleetscore.api")

VERSION = "1.0.0"

# =============================================================================
# BASIC AUTH CONFIGURATION
# =============================================================================

AUTHORIZED_USERS: Dict[str, str] = dict(config.AUTHORIZED_USERS)
AUTH_REALM = 'Basic realm="Fleet Standard Report API"'


def _unauthorized(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        headers={"WWW-Authenticate": AUTH_REALM},
        content={"detail": detail},
    )


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class TextAnalysisRequest(BaseModel):
    """Report text that has already been extracted from its PDF."""
    text: str = Field(..., description="Plain text of the whole inspection report")


class RecommendationModel(BaseModel):
    scope: str
    priority: str
    text: str
    timeline: Optional[str] = None
    criteria: Optional[str] = None


class ItemContext(BaseModel):
    good: int
    deficiency: int


class ItemScoreModel(BaseModel):
    score: float = Field(..., ge=1.0, le=4.0)
    status: str
    weight: float
    criteria: str
    improvement_action: Optional[str] = None
    praise_comment: Optional[str] = None
    findings: List[str]
    matched_keywords: List[str]
    context: ItemContext


class SubcategoryDetail(BaseModel):
    score: float = Field(..., ge=1.0, le=4.0)
    status: str
    weight: float
    recommendations: List[RecommendationModel]


class CategoryModel(BaseModel):
    score: float = Field(..., ge=1.0, le=4.0)
    status: str
    weight: float
    subcategory_details: Dict[str, SubcategoryDetail]
    item_scores: Dict[str, Dict[str, ItemScoreModel]]


class FindingsModel(BaseModel):
    good_practices: List[str]
    deficiencies: List[str]
    source: str


class ExtractedDataModel(BaseModel):
    vessel_name: str
    inspection_date: str
    inspector: str
    findings: FindingsModel
    observations: List[str]
    reported_deficiencies: List[str]


class AnalysisData(BaseModel):
    extracted_data: Optional[ExtractedDataModel] = None
    analysis: Dict[str, CategoryModel]
    overall_score: float = Field(..., ge=1.0, le=4.0)
    overall_status: str
    recommendations: List[RecommendationModel]
    report_date: str


class AnalysisResponse(BaseModel):
    success: bool = True
    data: AnalysisData
    document_info: Optional[Dict[str, Any]] = None
    processing_info: Dict[str, Any]


# =============================================================================
# FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Fleet Standard Report API",
    description="""
    Rubric-based scoring of vessel inspection reports against the fleet standards guide.

    ## Scoring

    Every rubric item is scored on a 1-4 scale (1 = Good, 2 = Satisfactory,
    3 = Unsatisfactory, 4 = Unacceptable) from the report text, then rolled up
    by weighted mean into subcategory, category and overall scores.

    ## Authentication

    Basic HTTP authentication is enforced when `FLEET_AUTH_USERS` and
    `FLEET_AUTH_PASSWORD` are set.
    """,
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Loaded once; shared read-only by every request
STANDARDS = get_default_standards()


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def read_report_text(contents: bytes) -> tuple[ReportText, Dict[str, Any]]:
    """Text layer of an uploaded PDF, with OCR fallback for scanned reports."""
    doc = extract_pdf_text(data=contents)
    quality = text_quality_ok(doc.text)

    if not quality.ok and config.OCR_ENABLED:
        logger.info("Text layer unusable (%s), falling back to OCR", quality.reason)
        try:
            doc = ocr_pdf(data=contents, lang=config.OCR_LANG, max_pages=config.OCR_MAX_PAGES)
        except Exception as e:
            # Keep whatever the text layer gave us; scoring degrades to defaults
            logger.warning("OCR fallback failed, using text layer: %s", e)

    return doc, {
        "pages": doc.pages,
        "source": doc.source,
        "text_length": len(doc.text),
        "text_quality": {"ok": quality.ok, "reason": quality.reason, **quality.metrics},
    }


def build_response(
    text: str,
    *,
    document_info: Optional[Dict[str, Any]],
    start_time: float,
) -> AnalysisResponse:
    result = analyze(STANDARDS, text)
    return AnalysisResponse(
        success=True,
        data=AnalysisData(**result.to_dict()),
        document_info=document_info,
        processing_info={"processing_time_ms": round((time.time() - start_time) * 1000, 2)},
    )


# =============================================================================
# API ENDPOINTS
# =============================================================================

@app.middleware("http")
async def auth_middleware(request: Request, call_next):
    """
    Enforce Basic Auth on every request when users are configured.
    OPTIONS (CORS preflight) is always let through.
    """
    if not AUTHORIZED_USERS or request.method == "OPTIONS":
        return await call_next(request)

    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Basic "):
        return _unauthorized("Authentication required")

    try:
        decoded = base64.b64decode(auth_header.split(" ", 1)[1]).decode("utf-8")
        username, password = decoded.split(":", 1)
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return _unauthorized("Invalid authentication format")

    stored_password = AUTHORIZED_USERS.get(username)
    if stored_password is None or not secrets.compare_digest(password, stored_password):
        return _unauthorized("Invalid credentials")

    request.state.username = username
    return await call_next(request)


@app.get("/")
async def root(request: Request):
    """Root endpoint with API info."""
    return {
        "name": "Fleet Standard Report API",
        "version": VERSION,
        "authenticated_user": getattr(request.state, "username", "anonymous"),
        "auth_enabled": bool(AUTHORIZED_USERS),
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
async def health(request: Request):
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": VERSION,
        "timestamp": datetime.utcnow().isoformat(),
        "authenticated_user": getattr(request.state, "username", "anonymous"),
        "standards": {
            "categories": len(STANDARDS.categories),
            "items": STANDARDS.item_count(),
        },
        "ocr_enabled": config.OCR_ENABLED,
    }


@app.get("/standards")
async def list_standards():
    """The fleet standards tree the reports are scored against."""
    return {
        "standards": STANDARDS.to_dict(),
        "categories": len(STANDARDS.categories),
        "items": STANDARDS.item_count(),
    }


@app.post("/analyze", response_model=AnalysisResponse)
async def analyze_endpoint(
    file: UploadFile = File(..., description="Inspection report PDF"),
):
    """Score an uploaded inspection report PDF."""
    start_time = time.time()
    filename = file.filename or "unknown.pdf"

    if not filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=415, detail="Only PDF files are allowed")

    contents = await file.read()
    if not contents:
        raise HTTPException(status_code=400, detail="No PDF file uploaded")
    if len(contents) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {config.MAX_UPLOAD_BYTES // (1024 * 1024)}MB.",
        )

    try:
        doc, document_info = read_report_text(contents)
        document_info["filename"] = filename
        return build_response(doc.text, document_info=document_info, start_time=start_time)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (FleetScoreError, RuntimeError, ValueError) as e:
        logger.exception("Analysis of %s failed", filename)
        raise HTTPException(status_code=500, detail=f"Analysis failed: {e}")


@app.post("/analyze/text", response_model=AnalysisResponse)
async def analyze_text_endpoint(
    payload: TextAnalysisRequest,
    include_text_stats: bool = Query(True, description="Include text length in document_info"),
):
    """Score inspection report text that was extracted elsewhere."""
    start_time = time.time()
    document_info = {"source": "text", "text_length": len(payload.text)} if include_text_stats else None
    try:
        return build_response(payload.text, document_info=document_info, start_time=start_time)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
