from typing import Any, Dict, List, Optional

from loguru import logger

from .comparison import confidence_tier
from .models import ConfidenceTier, FieldComparisonResult, MatchStatus


def _issue_code(result: FieldComparisonResult, suffix: str) -> str:
    return f"{result.field_key.name}_{suffix}"


class DecisionEngine:
    """
    Makes the overall verdict for one claim/document pair.
    Per-field results are read, never changed.
    """

    ISSUE_PENALTY = 10.0

    def collect_issues(self,
                       results: List[FieldComparisonResult],
                       validation: Dict[str, str]) -> Dict[str, List[str]]:
        """Group issue codes by the rule that raised them"""
        mismatches = []
        invalid = []
        review = []

        for result in results:
            if result.status == MatchStatus.MISMATCH:
                mismatches.append(_issue_code(result, "MISMATCH"))

            if result.field_key.value in validation:
                invalid.append(_issue_code(result, "INVALID"))

            if result.status == MatchStatus.PARTIAL:
                review.append(_issue_code(result, "PARTIAL"))
            elif result.status == MatchStatus.MISSING and result.claimed_value.strip():
                # Only a gap if the user actually claimed something
                review.append(_issue_code(result, "MISSING"))

            if result.extracted_value and confidence_tier(result.confidence) == ConfidenceTier.LOW:
                review.append(_issue_code(result, "LOW_CONFIDENCE"))

        return {"mismatch": mismatches, "invalid": invalid, "review": review}

    def calculate_confidence(self,
                             results: List[FieldComparisonResult],
                             issues: List[str]) -> float:
        """Mean match score over populated fields, less a fixed penalty per issue"""
        scores = [
            r.match_score for r in results
            if r.claimed_value.strip() or r.extracted_value.strip()
        ]
        if not scores:
            return 0.0

        average = sum(scores) / len(scores)
        confidence = max(0.0, average - len(issues) * self.ISSUE_PENALTY)
        return round(confidence, 1)

    def make_decision(self,
                      results: List[FieldComparisonResult],
                      validation: Optional[Dict[str, str]] = None,
                      quality: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Rules:
        - unreadable / bad capture -> REUPLOAD
        - any claimed value contradicting the document -> NEEDS_REVIEW
        - implausible extracted values -> NEEDS_REVIEW
        - partial matches, claimed-but-missing fields, low OCR confidence -> NEEDS_REVIEW
        - all good -> VERIFIED
        """
        validation = validation or {}
        quality = quality or {}

        grouped = self.collect_issues(results, validation)
        all_issues = grouped["mismatch"] + grouped["invalid"] + grouped["review"]

        if quality.get("quality") == "bad":
            logger.info("Capture quality is bad, asking for a new upload")
            return self._build_response(
                status="REUPLOAD",
                confidence=0.0,
                reasons=["Document image quality too poor to verify"],
                issues=all_issues + ["POOR_QUALITY"]
            )

        confidence = self.calculate_confidence(results, all_issues)

        if grouped["mismatch"]:
            fields = self._field_names(results, MatchStatus.MISMATCH)
            return self._build_response(
                status="NEEDS_REVIEW",
                confidence=confidence,
                reasons=[f"Claimed values do not match the document: {', '.join(fields)}"],
                issues=all_issues
            )

        if grouped["invalid"]:
            return self._build_response(
                status="NEEDS_REVIEW",
                confidence=confidence,
                reasons=[f"Extracted values look implausible: {', '.join(validation)}"],
                issues=all_issues
            )

        if grouped["review"]:
            return self._build_response(
                status="NEEDS_REVIEW",
                confidence=confidence,
                reasons=["Partial matches, missing fields or low recognition confidence"],
                issues=all_issues
            )

        if not any(r.status == MatchStatus.MATCH for r in results):
            return self._build_response(
                status="NEEDS_REVIEW",
                confidence=confidence,
                reasons=["No claimed field could be compared with the document"],
                issues=["NOTHING_COMPARED"]
            )

        return self._build_response(
            status="VERIFIED",
            confidence=confidence,
            reasons=["All claimed fields match the document"],
            issues=[]
        )

    def _field_names(self, results: List[FieldComparisonResult], status: MatchStatus) -> List[str]:
        return [r.field_key.value for r in results if r.status == status]

    def _build_response(self,
                        status: str,
                        confidence: float,
                        reasons: List[str],
                        issues: List[str]) -> Dict[str, Any]:
        return {
            "status": status,
            "confidence": confidence,
            "reasons": reasons,
            "issues": issues
        }
