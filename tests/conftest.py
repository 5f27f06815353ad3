"""
Shared fixtures for the HS code assistant test suite
"""

import json
from unittest.mock import Mock

import pytest

from hscode_centrovert.exceptions import FetchNetworkError
from hscode_centrovert.utils.http import FetchResponse


WELL_FORMED_RESULT = {
    "hsCode": "8518.30.20",
    "productName": "Wireless Bluetooth Headphones",
    "description": "Headphones and earphones, whether or not combined with a microphone",
    "dutyRate": "0%",
    "taxRate": "9% GST",
    "restrictions": ["IMDA equipment registration for Bluetooth devices"],
    "reasoning": "Headphones with wireless receiver fall under 8518.30.",
    "confidenceScore": 92,
    "requiredDocuments": ["Commercial Invoice", "Packing List", "IMDA Registration"],
    "source": "AI Model",
    "sourceReference": "https://www.customs.gov.sg",
    "similarItems": [
        {"name": "Wired earphones", "hsCode": "8518.30.10", "reason": "No wireless receiver"},
        {"name": "Bluetooth speaker", "hsCode": "8518.22.00", "reason": "Loudspeaker, not worn"},
        {"name": "Hearing aid", "hsCode": "9021.40.00", "reason": "Medical device"},
        {"name": "Headset with boom mic", "hsCode": "8518.30.20", "reason": "Same heading"},
        {"name": "VR headset", "hsCode": "8528.52.00", "reason": "Display device"},
    ],
}


class StubModel:
    """Deterministic GenerativeModel double that records its calls"""

    def __init__(self, text):
        self.text = text
        self.model_name = "stub-model"
        self.calls = []

    def generate(self, parts, config):
        self.calls.append((parts, config))
        return self.text


def make_response(status_code=200, body=None, content_type="application/json", reason="OK"):
    """Build a FetchResponse the way timed_fetch would return it"""
    if body is None:
        content = b""
    elif isinstance(body, bytes):
        content = body
    else:
        content = json.dumps(body).encode("utf-8")
    headers = {"Content-Type": content_type} if content_type else {}
    return FetchResponse(url="https://example.test", status_code=status_code,
                         reason=reason, headers=headers, content=content)


@pytest.fixture
def well_formed_json():
    return json.dumps(WELL_FORMED_RESULT)


@pytest.fixture
def offline_fetcher():
    """Fetcher that fails like an unreachable network"""
    return Mock(side_effect=FetchNetworkError("network unreachable", "https://example.test"))
