from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from typing import Dict, List, Any

from loguru import logger

from verification.checks import FieldValidator
from verification.comparison import ComparisonEngine
from verification.log import configure_logging
from verification.models import (
    ClaimRecord, ExtractionRecord, FieldComparisonResult, RecognitionResult
)
from verification.run_pipeline import run_pipeline
from config import settings


configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    description="Cross-verification of identity claims against document extractions",
    version=settings.APP_VERSION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CompareRequest(BaseModel):
    claim: ClaimRecord = Field(default_factory=ClaimRecord)
    extraction: ExtractionRecord = Field(default_factory=ExtractionRecord)


class ValidateRequest(BaseModel):
    fields: Dict[str, Any]


class ReportRequest(BaseModel):
    claim: ClaimRecord = Field(default_factory=ClaimRecord)
    recognition: RecognitionResult = Field(default_factory=RecognitionResult)


# ------------------------
# Verification API
# ------------------------
@app.post("/verify/compare", response_model=List[FieldComparisonResult])
async def compare_fields(request: CompareRequest):
    """Per-field comparison of a claim against extracted fields, in canonical order."""
    return ComparisonEngine().compare(request.claim, request.extraction)


@app.post("/verify/validate")
async def validate_fields(request: ValidateRequest):
    """Advisory format checks for arbitrary field values."""
    validator = FieldValidator()
    return {
        "errors": {
            key: validator.validate(key, value)
            for key, value in request.fields.items()
        }
    }


@app.post("/verify/report")
async def verify_report(request: ReportRequest) -> Dict[str, Any]:
    """
    Full verification report: per-field results, validation flags,
    capture quality and the overall decision.
    """
    try:
        return run_pipeline(request.claim, request.recognition)
    except Exception as e:
        logger.exception("Verification report failed")
        raise HTTPException(
            status_code=500,
            detail=f"Verification failed: {str(e)}"
        )


# ------------------------
# Health Check
# ------------------------
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "claim-verification"
    }


# ------------------------
# Local Dev Entry
# ------------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
