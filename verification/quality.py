from typing import Any, Dict, Optional

from config import QUALITY_FAIR_THRESHOLD, QUALITY_GOOD_THRESHOLD
from .models import QualityMetrics

_TIER_RANK = {"poor": 0, "fair": 1, "good": 2}


class QualityGate:
    """
    Buckets the capture quality reported by the recognition backend.
    Returns quality assessment with actionable recommendations
    """

    def __init__(self):
        self.good_threshold = QUALITY_GOOD_THRESHOLD
        self.fair_threshold = QUALITY_FAIR_THRESHOLD

    def score_tier(self, score: float) -> str:
        """Tier for a 0-10 blur or lighting score"""
        if score >= self.good_threshold:
            return "good"
        if score >= self.fair_threshold:
            return "fair"
        return "poor"

    def evaluate(self, metrics: Optional[QualityMetrics]) -> Dict[str, Any]:
        if metrics is None:
            return {
                "quality": "unknown",
                "blur": None,
                "lighting": None,
                "issues": ["Quality metrics not available"],
                "recommended_action": "proceed_with_caution"
            }

        blur = self.score_tier(metrics.blur_score)
        lighting = self.score_tier(metrics.lighting_score)
        issues = list(metrics.issues)

        # Hard fail: backend says the document cannot be read
        if not metrics.is_readable:
            quality = "bad"
            action = "reupload"
            if "Document not readable" not in issues:
                issues.append("Document not readable")
        else:
            worst = min(blur, lighting, key=_TIER_RANK.get)
            if worst == "good":
                quality = "good"
                action = "proceed"
            elif worst == "fair":
                quality = "risky"
                action = "proceed_with_caution"
            else:
                quality = "bad"
                action = "reupload"

        return {
            "quality": quality,
            "blur": blur,
            "lighting": lighting,
            "issues": issues,
            "recommended_action": action
        }
