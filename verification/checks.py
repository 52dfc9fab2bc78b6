import re
from typing import Callable, Dict, Optional, Union

from config import (
    AGE_REGEX, EMAIL_REGEX, GENDER_TERMS, MAX_AGE, MIN_AGE, PHONE_REGEX
)
from .fields import CANONICAL_FIELDS, FieldKey, resolve_field_key
from .models import ClaimRecord, ExtractionRecord

INVALID_EMAIL = "Invalid email format"
INVALID_PHONE = "Invalid phone number format"
INVALID_AGE = "Invalid age (must be 1-120)"
UNRECOGNIZED_GENDER = "Unrecognized gender value"


class FieldValidator:
    """
    Structural checks on single field values.

    The result is advisory: a message for the caller to show next to the
    field, never an exception and never an input to the match score.
    """

    def __init__(self):
        self.email_regex = re.compile(EMAIL_REGEX)
        self.phone_regex = re.compile(PHONE_REGEX)
        self.age_regex = re.compile(AGE_REGEX)
        self.gender_terms = frozenset(GENDER_TERMS)

        self._rules: Dict[FieldKey, Callable[[str], Optional[str]]] = {
            FieldKey.NAME: self._no_rule,
            FieldKey.AGE: self.check_age,
            FieldKey.GENDER: self.check_gender,
            FieldKey.ADDRESS: self._no_rule,
            FieldKey.ID_NUMBER: self._no_rule,
            FieldKey.EMAIL: self.check_email,
            FieldKey.PHONE: self.check_phone,
        }

    def _no_rule(self, value: str) -> Optional[str]:
        return None

    def check_email(self, value: str) -> Optional[str]:
        return None if self.email_regex.fullmatch(value) else INVALID_EMAIL

    def check_phone(self, value: str) -> Optional[str]:
        return None if self.phone_regex.fullmatch(value) else INVALID_PHONE

    def check_age(self, value: str) -> Optional[str]:
        """Leading integer must satisfy 0 < age < 120 ("29 yrs" passes)"""
        match = self.age_regex.match(value)
        if not match:
            return INVALID_AGE
        age = int(match.group())
        return None if MIN_AGE < age < MAX_AGE else INVALID_AGE

    def check_gender(self, value: str) -> Optional[str]:
        return None if value.lower() in self.gender_terms else UNRECOGNIZED_GENDER

    def validate(self, field_key: Union[FieldKey, str], value: Optional[str]) -> Optional[str]:
        """Return an error message for an implausible value, None otherwise"""
        text = value.strip() if isinstance(value, str) else ("" if value is None else str(value).strip())
        if not text:
            return None

        key = resolve_field_key(field_key)
        if key is None:
            return None
        return self._rules[key](text)

    def validate_extraction(self, extraction: ExtractionRecord) -> Dict[str, str]:
        """Messages for extracted values, keyed by field name in canonical order"""
        issues = {}
        for key in CANONICAL_FIELDS:
            message = self.validate(key, extraction.value_of(key))
            if message:
                issues[key.value] = message
        return issues

    def validate_claim(self, claim: ClaimRecord) -> Dict[str, str]:
        """Messages for claimed values, keyed by field name in canonical order"""
        issues = {}
        for key in CANONICAL_FIELDS:
            message = self.validate(key, claim.get(key))
            if message:
                issues[key.value] = message
        return issues


_default_validator = FieldValidator()


def validate(field_key: Union[FieldKey, str], value: Optional[str]) -> Optional[str]:
    return _default_validator.validate(field_key, value)
