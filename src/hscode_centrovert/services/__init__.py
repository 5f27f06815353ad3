"""Services module."""
from .regional_connectors import (
    RegionalConnector, SingaporeConnector, UAEConnector, SaudiConnector, build_default_connectors
)
from .evidence_service import EvidenceAggregator
from .gemini_service import ClassificationInvoker, GeminiModel, GenerationConfig, GenerativeModel

__all__ = [
    'RegionalConnector', 'SingaporeConnector', 'UAEConnector', 'SaudiConnector',
    'build_default_connectors', 'EvidenceAggregator', 'ClassificationInvoker',
    'GeminiModel', 'GenerationConfig', 'GenerativeModel'
]
