from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    # Service
    APP_NAME: str = "Document Claim Verification Service"
    APP_VERSION: str = "1.0.0"
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"
    # Emit one JSON object per log line instead of the human format
    LOG_JSON: bool = False

    # OpenAI Configuration (only needed by the recognition adapter)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4.1-mini"
    OPENAI_MAX_TOKENS: int = 1200

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()

# Match classification thresholds (closed lower bounds)
MATCH_THRESHOLD = 90
PARTIAL_THRESHOLD = 70

# Containment boost: applied when LOWER < score < UPPER and one
# normalized string contains the other
CONTAINMENT_BOOST_LOWER = 40
CONTAINMENT_BOOST_UPPER = 100
CONTAINMENT_BOOST_FLOOR = 85

# Recognition confidence tiers (closed lower bounds)
HIGH_CONFIDENCE_THRESHOLD = 90
MEDIUM_CONFIDENCE_THRESHOLD = 70

# Capture quality tiers on the 0-10 blur/lighting scale
QUALITY_GOOD_THRESHOLD = 8
QUALITY_FAIR_THRESHOLD = 5

# Email format: local@domain.tld, no whitespace
EMAIL_REGEX = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# Phone format: digits, spaces, plus, dash, parentheses
PHONE_REGEX = r"^[0-9\s+\-()]{7,20}$"

# Leading integer, as typed into an age box
AGE_REGEX = r"^[+-]?[0-9]+"

# Age must satisfy MIN_AGE < age < MAX_AGE
MIN_AGE = 0
MAX_AGE = 120

GENDER_TERMS = {"male", "female", "other", "non-binary"}
