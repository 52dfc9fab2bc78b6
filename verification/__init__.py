"""
Document Claim Verification

This package cross-checks a user's identity claim against the fields a
recognition service extracted from a scanned document:
- Text normalization and fuzzy similarity scoring
- Field format validation
- Per-field match classification
- Capture quality tiering and the overall verification decision
"""

__version__ = "1.0.0"
