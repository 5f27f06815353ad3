"""
Policy corrections applied to a parsed classification result.
"""
from typing import FrozenSet

from loguru import logger

from hscode_centrovert.config.settings import Config
from hscode_centrovert.models.hs_models import ClassificationResult, ResultSource, RetrievalTool


def post_process(result: ClassificationResult, tool_selection: FrozenSet[RetrievalTool],
                 threshold: int = Config.LIVE_SOURCE_CONFIDENCE_THRESHOLD) -> ClassificationResult:
    """
    Force ``source`` to Live API when a retrieval tool was active and the
    model is confident above the threshold. No other field is touched.
    """
    if tool_selection and result.confidence_score > threshold:
        if result.source != ResultSource.LIVE_API:
            logger.info(f"Source overridden to '{ResultSource.LIVE_API.value}' "
                        f"(search grounding active, confidence {result.confidence_score})")
        return result.with_source(ResultSource.LIVE_API)
    return result
