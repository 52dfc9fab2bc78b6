from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .fields import FieldKey, resolve_field_key


class MatchStatus(str, Enum):
    MATCH = "MATCH"
    PARTIAL = "PARTIAL"
    MISMATCH = "MISMATCH"
    MISSING = "MISSING"


class ConfidenceTier(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Record(BaseModel):
    """Immutable snapshot with camelCase keys on the wire"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _clamp(value: Any, low: float, high: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    if number != number:  # NaN
        return low
    return min(max(number, low), high)


_TRUE_WORDS = {"true", "yes", "1"}
_FALSE_WORDS = {"false", "no", "0"}


def _as_flag(value: Any) -> Optional[bool]:
    """Bool, or a recognizable true/false word; anything else is unknown"""
    if isinstance(value, bool):
        return value
    if isinstance(value, (str, int)):
        word = str(value).strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None


class ExtractedField(Record):
    """One field as produced by the recognition backend"""

    value: str = ""
    confidence: float = 0.0
    label: str = ""
    is_handwritten: Optional[bool] = None
    bounding_box: Optional[Tuple[float, float, float, float]] = None
    source_page_index: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("sourcePageIndex", "sourcePageIdx", "source_page_index"),
        serialization_alias="sourcePageIndex",
    )

    @field_validator("value", "label", mode="before")
    @classmethod
    def _coerce_text(cls, v):
        return _as_text(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v):
        return _clamp(v, 0, 100)

    @field_validator("is_handwritten", mode="before")
    @classmethod
    def _coerce_handwritten(cls, v):
        return _as_flag(v)

    @field_validator("bounding_box", mode="before")
    @classmethod
    def _coerce_box(cls, v):
        # [ymin, xmin, ymax, xmax] on a 0-1000 scale; anything else is dropped
        if not isinstance(v, (list, tuple)) or len(v) != 4:
            return None
        try:
            return tuple(_clamp(float(c), 0, 1000) for c in v)
        except (TypeError, ValueError):
            return None

    @field_validator("source_page_index", mode="before")
    @classmethod
    def _coerce_page(cls, v):
        if v is None:
            return None
        try:
            page = int(v)
        except (TypeError, ValueError):
            return None
        return page if page >= 0 else None


class QualityMetrics(Record):
    """Capture quality reported by the recognition backend"""

    blur_score: float = 0.0
    lighting_score: float = 0.0
    is_readable: bool = False
    issues: List[str] = Field(default_factory=list)

    @field_validator("blur_score", "lighting_score", mode="before")
    @classmethod
    def _clamp_score(cls, v):
        return _clamp(v, 0, 10)

    @field_validator("issues", mode="before")
    @classmethod
    def _coerce_issues(cls, v):
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [_as_text(issue) for issue in v]
        return [_as_text(v)]

    @field_validator("is_readable", mode="before")
    @classmethod
    def _coerce_readable(cls, v):
        # An unclear answer counts as not readable
        return bool(_as_flag(v))


def _attribute_for(key: FieldKey) -> str:
    return key.name.lower()


class ExtractionRecord(Record):
    """Extracted fields keyed by the fixed semantic field set"""

    name: Optional[ExtractedField] = None
    age: Optional[ExtractedField] = None
    gender: Optional[ExtractedField] = None
    address: Optional[ExtractedField] = None
    id_number: Optional[ExtractedField] = None
    email: Optional[ExtractedField] = None
    phone: Optional[ExtractedField] = None

    @model_validator(mode="before")
    @classmethod
    def _known_fields_only(cls, data):
        if not isinstance(data, dict):
            return data
        fields: Dict[str, Any] = {}
        for raw_key, entry in data.items():
            key = resolve_field_key(raw_key)
            if key is None:
                # snake_case attribute names are accepted as well
                key = next((k for k in FieldKey if _attribute_for(k) == raw_key), None)
            if key is None:
                continue
            if isinstance(entry, (ExtractedField, dict)):
                fields[_attribute_for(key)] = entry
        return fields

    def get(self, key: FieldKey) -> Optional[ExtractedField]:
        return getattr(self, _attribute_for(key))

    def value_of(self, key: FieldKey) -> str:
        extracted = self.get(key)
        return extracted.value if extracted else ""

    def with_value(self, key: FieldKey, value: str) -> "ExtractionRecord":
        """Return a new snapshot with one field's value replaced (e.g. a user correction)"""
        current = self.get(key) or ExtractedField()
        updated = current.model_copy(update={"value": _as_text(value)})
        return self.model_copy(update={_attribute_for(key): updated})

    def items(self):
        for key in FieldKey:
            extracted = self.get(key)
            if extracted is not None:
                yield key, extracted


class RecognitionResult(Record):
    """Full output of one recognition call"""

    fields: ExtractionRecord = Field(default_factory=ExtractionRecord)
    quality: Optional[QualityMetrics] = None
    detected_language: str = "Unknown"
    document_type: str = "Unknown"

    @field_validator("fields", mode="before")
    @classmethod
    def _default_fields(cls, v):
        return v if v is not None else {}

    @field_validator("detected_language", "document_type", mode="before")
    @classmethod
    def _default_unknown(cls, v):
        return _as_text(v) or "Unknown"


class ClaimRecord(Record):
    """User-submitted identity data; every value is raw text"""

    name: str = ""
    age: str = ""
    gender: str = ""
    address: str = ""
    id_number: str = ""
    email: str = ""
    phone: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, v):
        return _as_text(v)

    def get(self, key: FieldKey) -> str:
        return getattr(self, _attribute_for(key))


class FieldComparisonResult(Record):
    field_key: FieldKey
    claimed_value: str
    extracted_value: str
    match_score: int = Field(ge=0, le=100)
    status: MatchStatus
    is_handwritten: Optional[bool] = None
    confidence: float = Field(default=0.0, ge=0, le=100)
