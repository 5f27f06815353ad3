"""HS Code classification assistant package."""
from .classifier import HSCodeClassifier, identify_hs_code
from .exceptions import ClassificationError, NoResponseError, UnparseableResponseError
from .models import ClassificationResult, ImagePayload, ResultSource, TargetRegion

__all__ = [
    'HSCodeClassifier', 'identify_hs_code', 'ClassificationError', 'NoResponseError',
    'UnparseableResponseError', 'ClassificationResult', 'ImagePayload', 'ResultSource',
    'TargetRegion'
]
