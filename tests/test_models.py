"""
Unit tests for data models
"""

import base64
import json

import pytest

from hscode_centrovert.models.hs_models import (
    ClassificationRequest, ClassificationResult, ImagePayload, ResultSource, TargetRegion
)


class TestTargetRegion:
    """Test cases for TargetRegion resolution"""

    def test_from_value_variants(self):
        """Test that display values and member names resolve"""
        assert TargetRegion.from_value("UAE") is TargetRegion.UAE
        assert TargetRegion.from_value("saudi arabia") is TargetRegion.SAUDI_ARABIA
        assert TargetRegion.from_value("SAUDI_ARABIA") is TargetRegion.SAUDI_ARABIA
        assert TargetRegion.from_value(TargetRegion.GLOBAL) is TargetRegion.GLOBAL

    def test_from_value_unknown(self):
        """Test that unknown regions are rejected"""
        with pytest.raises(ValueError):
            TargetRegion.from_value("Atlantis")


class TestClassificationRequest:
    """Test cases for ClassificationRequest"""

    def test_requires_description_or_image(self):
        """Test that an empty request is rejected"""
        with pytest.raises(ValueError):
            ClassificationRequest(product_description="   ", region=TargetRegion.INDIA)

    def test_image_only_request(self):
        """Test that an image alone is enough"""
        request = ClassificationRequest("", TargetRegion.INDIA, image=ImagePayload(b"\xff\xd8"))
        assert request.product_description == ""

    def test_request_is_immutable(self):
        """Test that requests cannot be modified after construction"""
        request = ClassificationRequest("Steel screws", "Oman")
        assert request.region is TargetRegion.OMAN
        with pytest.raises(Exception):
            request.product_description = "changed"


class TestImagePayload:
    """Test cases for image decoding"""

    def test_data_uri_prefix_is_stripped(self):
        """Test that data-URI images decode to raw bytes with their MIME type"""
        raw = b"\x89PNG fake image"
        payload = ImagePayload("data:image/png;base64," + base64.b64encode(raw).decode())
        assert payload.to_bytes() == raw
        assert payload.resolved_mime_type() == "image/png"

    def test_plain_base64_defaults_to_jpeg(self):
        """Test that bare base64 keeps the default MIME type"""
        raw = b"\xff\xd8\xff jpeg"
        payload = ImagePayload(base64.b64encode(raw).decode())
        assert payload.to_bytes() == raw
        assert payload.resolved_mime_type() == "image/jpeg"

    @pytest.mark.parametrize("data", ["abc", "data:image/png;base64,abc"])
    def test_invalid_base64_rejected_on_construction(self, data):
        """Test that undecodable image text is refused when the payload is built"""
        with pytest.raises(ValueError, match="not valid base64"):
            ImagePayload(data)


class TestClassificationResult:
    """Test cases for ClassificationResult coercion"""

    def test_from_dict_minimal(self):
        """Test that a document with only hsCode gets defaults"""
        result = ClassificationResult.from_dict({"hsCode": "8471.30"})
        assert result.hs_code == "8471.30"
        assert result.restrictions == ()
        assert result.similar_items == ()
        assert result.source is ResultSource.AI_MODEL
        assert result.source_reference is None

    @pytest.mark.parametrize("raw,expected", [
        (150, 100), (-5, 0), ("92%", 92), ("88.6", 89), ("high", 0), (None, 0), (True, 0),
    ])
    def test_confidence_is_clamped(self, raw, expected):
        """Test that confidence scores are coerced into 0..100"""
        result = ClassificationResult.from_dict({"hsCode": "0101.21", "confidenceScore": raw})
        assert result.confidence_score == expected

    def test_out_of_range_construction_rejected(self):
        """Test that direct construction enforces the score invariant"""
        with pytest.raises(ValueError):
            ClassificationResult(hs_code="0101.21", confidence_score=101)

    def test_string_lists_are_wrapped(self):
        """Test that a single string becomes a one-item list"""
        result = ClassificationResult.from_dict({"hsCode": "0101.21", "restrictions": "CITES permit"})
        assert result.restrictions == ("CITES permit",)

    def test_source_normalisation(self):
        """Test that source values normalise to the enum"""
        assert ClassificationResult.from_dict({"hsCode": "1", "source": "live api"}).source is ResultSource.LIVE_API
        assert ClassificationResult.from_dict({"hsCode": "1", "source": "Google"}).source is ResultSource.AI_MODEL

    def test_to_json_round_trips_wire_names(self):
        """Test that serialization uses the camelCase contract"""
        result = ClassificationResult.from_dict({
            "hsCode": "8518.30", "confidenceScore": 70,
            "similarItems": [{"name": "Speaker", "hsCode": "8518.22", "reason": "Not worn"}],
        })
        data = json.loads(result.to_json())
        assert data["hsCode"] == "8518.30"
        assert data["source"] == "AI Model"
        assert data["similarItems"] == [{"name": "Speaker", "hsCode": "8518.22", "reason": "Not worn"}]
