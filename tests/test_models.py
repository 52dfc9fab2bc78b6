"""Tests for the record models and their input-shape tolerance."""

import pytest
from pydantic import ValidationError
from verification.fields import CANONICAL_FIELDS, FIELD_LABELS, FieldKey, resolve_field_key
from verification.models import (
    ClaimRecord,
    ExtractedField,
    ExtractionRecord,
    FieldComparisonResult,
    MatchStatus,
    QualityMetrics,
    RecognitionResult,
)


class TestFieldKeys:
    def test_canonical_order(self):
        assert [k.value for k in CANONICAL_FIELDS] == [
            "name", "age", "gender", "address", "idNumber", "email", "phone",
        ]

    def test_every_key_has_a_label(self):
        assert set(FIELD_LABELS) == set(FieldKey)

    def test_resolve(self):
        assert resolve_field_key("idNumber") is FieldKey.ID_NUMBER
        assert resolve_field_key("phoneNumber") is FieldKey.PHONE
        assert resolve_field_key(FieldKey.AGE) is FieldKey.AGE
        assert resolve_field_key("dateOfBirth") is None


class TestExtractedField:
    def test_camel_case_input(self):
        field = ExtractedField.model_validate({
            "value": "Ananya",
            "confidence": 88.5,
            "label": "Name",
            "isHandwritten": True,
            "boundingBox": [10, 20, 30, 40],
            "sourcePageIndex": 2,
        })
        assert field.is_handwritten is True
        assert field.bounding_box == (10, 20, 30, 40)
        assert field.source_page_index == 2

    def test_legacy_page_key(self):
        assert ExtractedField.model_validate({"sourcePageIdx": 1}).source_page_index == 1

    def test_none_value_becomes_empty(self):
        assert ExtractedField.model_validate({"value": None}).value == ""

    def test_numeric_value_becomes_text(self):
        assert ExtractedField(value=29).value == "29"

    @pytest.mark.parametrize("raw,expected", [(150, 100), (-3, 0), ("87", 87), ("high", 0), (None, 0)])
    def test_confidence_is_clamped(self, raw, expected):
        assert ExtractedField(confidence=raw).confidence == expected

    def test_bounding_box_is_clamped_or_dropped(self):
        assert ExtractedField(bounding_box=[-5, 0, 1200, 500]).bounding_box == (0, 0, 1000, 500)
        assert ExtractedField(bounding_box=[1, 2, 3]).bounding_box is None
        assert ExtractedField(bounding_box="top-left").bounding_box is None

    def test_negative_page_is_dropped(self):
        assert ExtractedField(source_page_index=-1).source_page_index is None

    def test_frozen(self):
        field = ExtractedField(value="x")
        with pytest.raises(ValidationError):
            field.value = "y"

    def test_serializes_camel_case(self):
        dumped = ExtractedField(value="x", is_handwritten=False).model_dump(by_alias=True)
        assert "isHandwritten" in dumped
        assert "sourcePageIndex" in dumped


class TestExtractionRecord:
    def test_unknown_and_malformed_entries_are_ignored(self):
        record = ExtractionRecord.model_validate({
            "name": {"value": "Ananya"},
            "dateOfBirth": {"value": "01-01-1995"},
            "age": "29",
            "phoneNumber": {"value": "+91 98450 12345"},
        })
        assert record.value_of(FieldKey.NAME) == "Ananya"
        assert record.age is None
        assert record.value_of(FieldKey.PHONE) == "+91 98450 12345"

    def test_id_number_alias(self):
        record = ExtractionRecord.model_validate({"idNumber": {"value": "X1"}})
        assert record.get(FieldKey.ID_NUMBER).value == "X1"

    def test_items_in_canonical_order(self):
        record = ExtractionRecord.model_validate({"phone": {"value": "1"}, "name": {"value": "2"}})
        assert [k for k, _ in record.items()] == [FieldKey.NAME, FieldKey.PHONE]

    def test_with_value_on_absent_field(self):
        record = ExtractionRecord().with_value(FieldKey.EMAIL, "a@b.com")
        assert record.value_of(FieldKey.EMAIL) == "a@b.com"
        assert record.email.confidence == 0


class TestQualityMetrics:
    def test_scores_clamped_and_issues_coerced(self):
        quality = QualityMetrics.model_validate({
            "blurScore": 14,
            "lightingScore": -1,
            "isReadable": True,
            "issues": "Glare",
        })
        assert quality.blur_score == 10
        assert quality.lighting_score == 0
        assert quality.issues == ["Glare"]


class TestRecognitionResult:
    def test_defaults(self):
        result = RecognitionResult.model_validate({"fields": None, "detectedLanguage": None})
        assert result.detected_language == "Unknown"
        assert result.document_type == "Unknown"
        assert result.quality is None
        assert list(result.fields.items()) == []


class TestClaimRecord:
    def test_missing_and_non_text_values_degrade_to_text(self):
        claim = ClaimRecord.model_validate({"name": None, "age": 29, "idNumber": 123456})
        assert claim.name == ""
        assert claim.age == "29"
        assert claim.get(FieldKey.ID_NUMBER) == "123456"
        assert claim.email == ""


class TestFieldComparisonResult:
    def test_score_bounds(self):
        with pytest.raises(ValidationError):
            FieldComparisonResult(
                field_key=FieldKey.NAME,
                claimed_value="a",
                extracted_value="b",
                match_score=101,
                status=MatchStatus.MATCH,
            )


class TestOddRecognizerValues:
    @pytest.mark.parametrize("raw,expected", [("unclear", None), ("true", True), ("No", False), (2, None), (True, True)])
    def test_handwritten_flag(self, raw, expected):
        assert ExtractedField.model_validate({"value": "A", "isHandwritten": raw}).is_handwritten is expected

    def test_scalar_issues(self):
        quality = QualityMetrics.model_validate({"isReadable": True, "issues": 3})
        assert quality.issues == ["3"]

    def test_unclear_readability_counts_as_unreadable(self):
        assert QualityMetrics.model_validate({"isReadable": "maybe"}).is_readable is False
        assert QualityMetrics.model_validate({"isReadable": "yes"}).is_readable is True
