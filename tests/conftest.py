"""Shared fixtures for verification tests.

The recognition backend is never called; tests build RecognitionResult
snapshots directly or use a stub OpenAI client.
"""

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add the repo root to the path so tests can import config and verification
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def sample_claim():
    """A complete claim that matches sample_recognition field for field."""
    from verification.models import ClaimRecord

    return ClaimRecord(
        name="Ananya Sharma",
        age="29",
        gender="Female",
        address="12 MG Road, Bengaluru 560001",
        idNumber="4821 7730 1942",
        email="ananya.sharma@example.com",
        phone="+91 98450 12345",
    )


@pytest.fixture
def sample_fields():
    """Raw recognizer output for the fields block, camelCase like the wire format."""
    return {
        "name": {"value": "Ananya Sharma", "confidence": 97, "label": "Name"},
        "age": {"value": "29", "confidence": 95, "label": "Age"},
        "gender": {"value": "FEMALE", "confidence": 99, "label": "Sex"},
        "address": {
            "value": "12, M.G. Road, Bengaluru 560001",
            "confidence": 91,
            "label": "Address",
            "boundingBox": [410, 120, 470, 880],
            "sourcePageIdx": 1,
        },
        "idNumber": {"value": "4821 7730 1942", "confidence": 98, "label": "ID No."},
        "email": {"value": "ananya.sharma@example.com", "confidence": 93, "label": "Email"},
        "phone": {
            "value": "+91 98450 12345",
            "confidence": 92,
            "label": "Mobile",
            "isHandwritten": True,
        },
    }


@pytest.fixture
def sample_quality():
    return {"blurScore": 9, "lightingScore": 8.5, "isReadable": True, "issues": []}


@pytest.fixture
def sample_recognition(sample_fields, sample_quality):
    from verification.models import RecognitionResult

    return RecognitionResult(
        fields=sample_fields,
        quality=sample_quality,
        detectedLanguage="English",
        documentType="National ID",
    )


class StubCompletions:
    """Records chat.completions.create calls and replays a canned reply."""

    def __init__(self, reply: str):
        self.reply = reply
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_stub_client(reply: str):
    completions = StubCompletions(reply)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture
def stub_client_factory():
    return make_stub_client


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "front.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nnot really an image")
    return str(path)
