from enum import Enum
from typing import Dict, List, Optional


class FieldKey(str, Enum):
    """Semantic fields compared between a claim and a document, in canonical order"""

    NAME = "name"
    AGE = "age"
    GENDER = "gender"
    ADDRESS = "address"
    ID_NUMBER = "idNumber"
    EMAIL = "email"
    PHONE = "phone"


CANONICAL_FIELDS: List[FieldKey] = list(FieldKey)

FIELD_LABELS: Dict[FieldKey, str] = {
    FieldKey.NAME: "Full Name",
    FieldKey.AGE: "Age",
    FieldKey.GENDER: "Gender",
    FieldKey.ADDRESS: "Address",
    FieldKey.ID_NUMBER: "ID Number",
    FieldKey.EMAIL: "Email",
    FieldKey.PHONE: "Phone",
}

# Alternate spellings some recognizers and forms use
FIELD_ALIASES: Dict[str, FieldKey] = {
    "phoneNumber": FieldKey.PHONE,
}


def resolve_field_key(key) -> Optional[FieldKey]:
    """Map a raw key to a FieldKey, or None if it is not a known field"""
    if isinstance(key, FieldKey):
        return key
    if key in FIELD_ALIASES:
        return FIELD_ALIASES[key]
    try:
        return FieldKey(key)
    except ValueError:
        return None
