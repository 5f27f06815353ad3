"""
Recovers a ClassificationResult from the model's free-form text.
"""
import json
import re
from typing import Any, Callable, Optional, Sequence, Tuple

from loguru import logger

from hscode_centrovert.config.settings import Config
from hscode_centrovert.exceptions import UnparseableResponseError
from hscode_centrovert.models.hs_models import ClassificationResult
from hscode_centrovert.utils.common import truncate_text, validate_hs_code_format

FENCED_JSON_PATTERN = re.compile(r"```json\s*\n(.*?)\n?\s*```", re.DOTALL | re.IGNORECASE)
FENCED_ANY_PATTERN = re.compile(r"```(?:[a-zA-Z0-9_-]*\s*\n)?(.*?)```", re.DOTALL)


def _loads(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return None


def parse_direct(text: str) -> Optional[Any]:
    """Tier 1: the whole text is a JSON document."""
    return _loads(text.strip())


def parse_fenced_block(text: str) -> Optional[Any]:
    """Tier 2: a ``` fenced block, with or without a language tag."""
    for pattern in (FENCED_JSON_PATTERN, FENCED_ANY_PATTERN):
        match = pattern.search(text)
        if match and match.group(1).strip():
            parsed = _loads(match.group(1).strip())
            if parsed is not None:
                return parsed
    return None


def parse_brace_span(text: str) -> Optional[Any]:
    """Tier 3: everything from the first '{' to the last '}'."""
    first_open = text.find('{')
    last_close = text.rfind('}')
    if first_open == -1 or last_close < first_open:
        return None
    return _loads(text[first_open:last_close + 1])


DEFAULT_STRATEGIES: Tuple[Tuple[str, Callable[[str], Optional[Any]]], ...] = (
    ("direct", parse_direct),
    ("fenced_block", parse_fenced_block),
    ("brace_span", parse_brace_span),
)


class ResponseParser:
    """Tries each extraction strategy in order; the first JSON object wins."""

    def __init__(self, strategies: Sequence[Tuple[str, Callable[[str], Optional[Any]]]] = DEFAULT_STRATEGIES):
        self.strategies = tuple(strategies)

    def extract_document(self, raw_text: str) -> dict:
        """
        Return the first JSON object any strategy recovers.

        Raises:
            UnparseableResponseError: no strategy produced a JSON object
        """
        text = raw_text or ""
        for name, strategy in self.strategies:
            document = strategy(text)
            if isinstance(document, dict):
                logger.debug(f"Response parsed with strategy '{name}'")
                return document
            if document is not None:
                logger.debug(f"Strategy '{name}' produced {type(document).__name__}, not an object")
        logger.error(f"Failed to parse AI response as JSON: {truncate_text(text, 200)!r}")
        raise UnparseableResponseError("Failed to parse AI response as JSON", raw_text=text,
                                       preview_chars=Config.RAW_RESPONSE_PREVIEW_CHARS)

    def parse_result(self, raw_text: str) -> ClassificationResult:
        """Parse raw model text into a validated ClassificationResult."""
        document = self.extract_document(raw_text)
        if not str(document.get('hsCode') or '').strip():
            raise UnparseableResponseError("AI response is missing 'hsCode'", raw_text=raw_text,
                                           preview_chars=Config.RAW_RESPONSE_PREVIEW_CHARS)
        result = ClassificationResult.from_dict(document)
        if not validate_hs_code_format(result.hs_code):
            logger.warning(f"hsCode '{result.hs_code}' is not a 6-12 digit tariff code")
        if not _score_in_range(document.get('confidenceScore')):
            logger.warning(f"confidenceScore {document.get('confidenceScore')!r} clamped to {result.confidence_score}")
        return result


def _score_in_range(value: Any) -> bool:
    try:
        return 0 <= float(str(value).strip().rstrip('%')) <= 100
    except (TypeError, ValueError):
        return False
