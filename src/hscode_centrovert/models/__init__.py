"""Models module."""
from .hs_models import (
    TargetRegion,
    ResultSource,
    RetrievalTool,
    ConnectorStatus,
    ImagePayload,
    ClassificationRequest,
    RegionPolicy,
    ConnectorOutcome,
    EvidenceContext,
    GatheredContext,
    MultimodalRequest,
    SimilarItem,
    ClassificationResult
)

__all__ = [
    'TargetRegion', 'ResultSource', 'RetrievalTool', 'ConnectorStatus',
    'ImagePayload', 'ClassificationRequest', 'RegionPolicy', 'ConnectorOutcome',
    'EvidenceContext', 'GatheredContext', 'MultimodalRequest', 'SimilarItem',
    'ClassificationResult'
]
