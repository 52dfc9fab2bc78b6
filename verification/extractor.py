import base64
import json
import mimetypes
import re
from typing import Any, Dict, List

from loguru import logger
from openai import OpenAI

from config import settings
from .fields import CANONICAL_FIELDS, FIELD_LABELS
from .models import QualityMetrics, RecognitionResult

MISSING_QUALITY_ISSUE = "Quality metrics not returned by the model"

EXTRACTION_PROMPT = """
You are an identity document extraction system.

Analyze the provided document image(s). These may be printed forms, ID cards,
or handwritten notes. If several images are provided (front/back, multiple
pages), combine the information into a single record.

1. Quality: rate blur (0 unreadable - 10 sharp) and lighting (0 bad - 10 perfect),
   say whether the document is readable, and list issues (e.g. "Glare", "Folded").
2. Extraction: {field_list}.
   Calculate age from the date of birth if only the date is visible.
3. Handwriting: flag each field whose value is handwritten.
4. Confidence and zoning: give a confidence 0-100 per field, the bounding box
   [ymin, xmin, ymax, xmax] on a 0-1000 scale, and the 0-based page index.
5. Language: detect the primary language of the document.

Return STRICT JSON only.

Expected format:
{{
  "quality": {{
    "blurScore": 0-10,
    "lightingScore": 0-10,
    "isReadable": true/false,
    "issues": ["string"]
  }},
  "detectedLanguage": "string",
  "documentType": "string",
  "fields": {{
    "<fieldKey>": {{
      "value": "string",
      "confidence": 0-100,
      "label": "string",
      "isHandwritten": true/false,
      "boundingBox": [ymin, xmin, ymax, xmax],
      "sourcePageIndex": 0
    }}
  }}
}}

Field keys: {field_keys}
If a field is not visible, leave it out. DO NOT guess or hallucinate.
"""


def build_recognition_result(payload: Dict[str, Any]) -> RecognitionResult:
    """
    Turn a decoded model reply into a RecognitionResult, filling in what the
    model left out.
    """
    if not isinstance(payload, dict):
        payload = {}

    fields = payload.get("fields")
    if not isinstance(fields, dict):
        fields = {}

    quality = payload.get("quality")
    if not isinstance(quality, dict):
        quality = {
            "blurScore": 0,
            "lightingScore": 0,
            "isReadable": False,
            "issues": [MISSING_QUALITY_ISSUE]
        }

    return RecognitionResult(
        fields=fields,
        quality=quality,
        detected_language=payload.get("detectedLanguage"),
        document_type=payload.get("documentType"),
    )


def failed_recognition(reason: str) -> RecognitionResult:
    """Empty result that records why recognition produced nothing"""
    return RecognitionResult(
        quality=QualityMetrics(
            blur_score=0,
            lighting_score=0,
            is_readable=False,
            issues=[f"Extraction failed: {reason}"],
        )
    )


class DocumentExtractor:
    """
    Extracts the verification fields from document images using OpenAI Vision API
    """

    def __init__(self, client=None):
        if client is None:
            if not settings.OPENAI_API_KEY:
                raise ValueError("OPENAI_API_KEY is not configured")
            client = OpenAI(api_key=settings.OPENAI_API_KEY)
        self.client = client
        self.model = settings.OPENAI_MODEL
        self.max_tokens = settings.OPENAI_MAX_TOKENS

    def encode_image(self, image_path: str) -> str:
        """Encode image as base64 data URL"""
        mime_type = mimetypes.guess_type(image_path)[0] or "image/jpeg"
        with open(image_path, "rb") as f:
            b64 = base64.b64encode(f.read()).decode("utf-8")
        return f"data:{mime_type};base64,{b64}"

    def safe_json_parse(self, text: str) -> Dict[str, Any]:
        """Safely parse JSON from LLM response"""
        match = re.search(r"\{.*\}", text or "", re.DOTALL)
        if not match:
            raise ValueError("No JSON found in model output")
        return json.loads(match.group())

    def get_extraction_prompt(self) -> str:
        field_list = ", ".join(FIELD_LABELS[key] for key in CANONICAL_FIELDS)
        field_keys = ", ".join(key.value for key in CANONICAL_FIELDS)
        return EXTRACTION_PROMPT.format(field_list=field_list, field_keys=field_keys)

    def extract(self, image_paths: List[str]) -> RecognitionResult:
        """Extract fields and capture quality from one document's images"""
        if not image_paths:
            raise ValueError("At least one image is required")

        content: List[Dict[str, Any]] = [{"type": "text", "text": self.get_extraction_prompt()}]
        for path in image_paths:
            content.append({
                "type": "image_url",
                "image_url": {"url": self.encode_image(path)}
            })

        logger.info("Requesting extraction for {} image(s) with {}", len(image_paths), self.model)
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": content}],
            max_tokens=self.max_tokens,
            temperature=0
        )

        try:
            payload = self.safe_json_parse(response.choices[0].message.content)
            result = build_recognition_result(payload)
        except ValueError as e:
            # json.JSONDecodeError and pydantic's ValidationError are ValueErrors as well
            logger.warning("Could not parse extraction output: {}", e)
            return failed_recognition(str(e))

        logger.info(
            "Extracted {} field(s) from {} ({})",
            sum(1 for _ in result.fields.items()),
            result.document_type,
            result.detected_language,
        )
        return result
