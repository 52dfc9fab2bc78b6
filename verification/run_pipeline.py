from collections import Counter
from typing import Any, Dict, List, Optional

from loguru import logger

from .checks import FieldValidator
from .comparison import ComparisonEngine, confidence_tier
from .decision import DecisionEngine
from .extractor import DocumentExtractor
from .models import ClaimRecord, RecognitionResult
from .quality import QualityGate


def run_pipeline(claim: ClaimRecord, recognition: RecognitionResult) -> Dict[str, Any]:
    """
    Main pipeline function that cross-checks a claim against one recognized document

    Args:
        claim: Identity data submitted by the user
        recognition: Fields and capture quality produced by the recognition backend

    Returns:
        Verification report with status, confidence, per-field results and signals
    """

    # Initialize components
    quality_gate = QualityGate()
    validator = FieldValidator()
    engine = ComparisonEngine()
    decision_engine = DecisionEngine()

    # Step 1: Capture quality
    quality = quality_gate.evaluate(recognition.quality)

    # Step 2: Field-by-field comparison
    results = engine.compare(claim, recognition.fields)

    # Step 3: Advisory format checks, independent of the match status
    validation = validator.validate_extraction(recognition.fields)
    claim_validation = validator.validate_claim(claim)

    # Step 4: Final decision
    final_result = decision_engine.make_decision(
        results=results,
        validation=validation,
        quality=quality
    )
    logger.info(
        "Verification finished: {} (confidence {})",
        final_result["status"],
        final_result["confidence"],
    )

    final_result["results"] = [r.model_dump(by_alias=True, mode="json") for r in results]
    final_result["signals"] = {
        "validation": validation,
        "claim_validation": claim_validation,
        "confidence_tiers": {
            r.field_key.value: confidence_tier(r.confidence).value
            for r in results if r.extracted_value
        },
        "handwritten": [r.field_key.value for r in results if r.is_handwritten],
        "quality": quality
    }
    final_result["pipeline_metadata"] = {
        "fields_compared": [r.field_key.value for r in results],
        "status_summary": dict(Counter(r.status.value for r in results)),
        "document_type": recognition.document_type,
        "detected_language": recognition.detected_language
    }

    return final_result


def extract_and_verify(image_paths: List[str],
                       claim: ClaimRecord,
                       extractor: Optional[DocumentExtractor] = None) -> Dict[str, Any]:
    """Run recognition on the document images, then verify the claim against it"""
    extractor = extractor or DocumentExtractor()
    recognition = extractor.extract(image_paths)
    return run_pipeline(claim, recognition)
