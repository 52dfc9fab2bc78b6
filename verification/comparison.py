from collections import OrderedDict
from typing import Dict, List, Any

from loguru import logger

from config import (
    HIGH_CONFIDENCE_THRESHOLD, MATCH_THRESHOLD, MEDIUM_CONFIDENCE_THRESHOLD,
    PARTIAL_THRESHOLD
)
from .fields import CANONICAL_FIELDS
from .models import (
    ClaimRecord, ConfidenceTier, ExtractionRecord, FieldComparisonResult, MatchStatus
)
from .similarity import similarity


def classify_match(score: int, extracted_value: str) -> MatchStatus:
    """Status for one field; an empty extracted value is MISSING whatever the score"""
    if not extracted_value:
        return MatchStatus.MISSING
    if score >= MATCH_THRESHOLD:
        return MatchStatus.MATCH
    if score >= PARTIAL_THRESHOLD:
        return MatchStatus.PARTIAL
    return MatchStatus.MISMATCH


def confidence_tier(confidence: float) -> ConfidenceTier:
    """How far to trust the recognized value itself, independent of the claim"""
    if confidence >= HIGH_CONFIDENCE_THRESHOLD:
        return ConfidenceTier.HIGH
    if confidence >= MEDIUM_CONFIDENCE_THRESHOLD:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


class ComparisonEngine:
    """
    Compares a claim against an extraction field by field.

    Produces exactly one result per canonical field, in canonical order,
    no matter which fields either side populated.
    """

    def compare_field(self, key, claimed_value: str, extraction: ExtractionRecord) -> FieldComparisonResult:
        extracted = extraction.get(key)
        extracted_value = extracted.value if extracted else ""

        score = similarity(claimed_value, extracted_value)
        status = classify_match(score, extracted_value)

        return FieldComparisonResult(
            field_key=key,
            claimed_value=claimed_value,
            extracted_value=extracted_value,
            match_score=score,
            status=status,
            is_handwritten=extracted.is_handwritten if extracted else None,
            confidence=extracted.confidence if extracted else 0.0,
        )

    def compare(self, claim: ClaimRecord, extraction: ExtractionRecord) -> List[FieldComparisonResult]:
        results = [
            self.compare_field(key, claim.get(key), extraction)
            for key in CANONICAL_FIELDS
        ]
        logger.debug(
            "Compared {} fields: {}",
            len(results),
            ", ".join(f"{r.field_key.value}={r.status.value}" for r in results),
        )
        return results


def compare(claim: ClaimRecord, extraction: ExtractionRecord) -> List[FieldComparisonResult]:
    return ComparisonEngine().compare(claim, extraction)


def results_by_field(results: List[FieldComparisonResult]) -> Dict[str, Dict[str, Any]]:
    """Record-of-records export keyed by field name, preserving result order"""
    return OrderedDict(
        (r.field_key.value, r.model_dump(by_alias=True, mode="json"))
        for r in results
    )
