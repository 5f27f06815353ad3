"""
Data models for the HS Code classification assistant.
"""
import base64
import binascii
import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple, Union


class TargetRegion(str, Enum):
    """Customs jurisdictions the assistant classifies for."""
    SINGAPORE = "Singapore"
    MALAYSIA = "Malaysia"
    INDIA = "India"
    UAE = "UAE"
    SAUDI_ARABIA = "Saudi Arabia"
    QATAR = "Qatar"
    OMAN = "Oman"
    BAHRAIN = "Bahrain"
    KUWAIT = "Kuwait"
    GLOBAL = "Global (6-digit)"

    @classmethod
    def from_value(cls, value: Union[str, "TargetRegion"]) -> "TargetRegion":
        """Resolve a region from its display value or member name."""
        if isinstance(value, cls):
            return value
        wanted = str(value).strip().lower()
        for region in cls:
            if wanted in (region.value.lower(), region.name.lower(), region.name.lower().replace('_', ' ')):
                return region
        raise ValueError(f"Unknown region: {value!r}")


class ResultSource(str, Enum):
    """Where the classification came from."""
    LIVE_API = "Live API"
    AI_MODEL = "AI Model"

    @classmethod
    def normalize(cls, value: Any) -> "ResultSource":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower().replace('_', ' ')
        if text in ("live api", "liveapi", "live"):
            return cls.LIVE_API
        return cls.AI_MODEL


class RetrievalTool(str, Enum):
    """Retrieval capabilities the generative model may be granted."""
    WEB_SEARCH = "web-search-grounding"


class ConnectorStatus(str, Enum):
    """Outcome of a single live-data connector lookup."""
    MATCH = "match"
    NO_MATCH = "no_match"
    SKIPPED = "skipped"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    AUTH_ERROR = "auth_error"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"
    HTTP_ERROR = "http_error"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class ImagePayload:
    """Product photo attached to a request.

    ``data`` may be raw bytes, base64 text or a ``data:`` URI.
    """
    data: Union[bytes, str]
    mime_type: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.data, str):
            # fail before any connector runs
            self.to_bytes()

    def resolved_mime_type(self, default: str = "image/jpeg") -> str:
        if self.mime_type:
            return self.mime_type
        if isinstance(self.data, str) and self.data.startswith("data:"):
            header = self.data.split(",", 1)[0]
            declared = header[len("data:"):].split(";", 1)[0]
            if declared:
                return declared
        return default

    def to_bytes(self) -> bytes:
        """Return the binary image, stripping any data-URI prefix."""
        if isinstance(self.data, bytes):
            return self.data
        encoded = self.data.split(",", 1)[1] if "," in self.data else self.data
        try:
            return base64.b64decode(encoded.strip(), validate=False)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Image payload is not valid base64: {e}") from e


@dataclass(frozen=True)
class ClassificationRequest:
    """Model for a single classification call."""
    product_description: str
    region: TargetRegion
    image: Optional[ImagePayload] = None
    status_callback: Optional[Callable[[str], None]] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'product_description', (self.product_description or "").strip())
        object.__setattr__(self, 'region', TargetRegion.from_value(self.region))
        if not self.product_description and self.image is None:
            raise ValueError("A product description or an image is required")


@dataclass(frozen=True)
class RegionPolicy:
    """Static per-jurisdiction retrieval strategy and instructions."""
    region: TargetRegion
    retrieval_tools: FrozenSet[RetrievalTool]
    instruction_block: str
    live_connector: Optional[str]
    fallback_note: str
    search_label: str

    @property
    def uses_web_search(self) -> bool:
        return RetrievalTool.WEB_SEARCH in self.retrieval_tools


@dataclass(frozen=True)
class ConnectorOutcome:
    """Result of one connector lookup; connectors return this instead of raising."""
    connector: str
    status: ConnectorStatus
    evidence: str = ""
    detail: str = ""

    @property
    def matched(self) -> bool:
        return self.status == ConnectorStatus.MATCH and bool(self.evidence)


@dataclass
class EvidenceContext:
    """Live-data evidence accumulated before the model is invoked."""
    outcomes: List[ConnectorOutcome] = field(default_factory=list)

    def add(self, outcome: ConnectorOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def text(self) -> str:
        return "\n".join(o.evidence for o in self.outcomes if o.matched)

    @property
    def has_match(self) -> bool:
        return any(o.matched for o in self.outcomes)

    @property
    def connectors_ran(self) -> bool:
        return any(o.status != ConnectorStatus.SKIPPED for o in self.outcomes)


@dataclass(frozen=True)
class GatheredContext:
    """Everything the prompt compiler needs from the evidence phase."""
    policy: RegionPolicy
    evidence: EvidenceContext
    instruction_block: str
    tool_selection: FrozenSet[RetrievalTool]


@dataclass(frozen=True)
class MultimodalRequest:
    """Compiled request handed to the generative model."""
    parts: Tuple[Dict[str, Any], ...]
    system_instruction: str
    temperature: float
    tools: FrozenSet[RetrievalTool] = frozenset()

    @property
    def prompt_text(self) -> str:
        return "".join(p["text"] for p in self.parts if "text" in p)


@dataclass(frozen=True)
class SimilarItem:
    """A neighbouring classification suggested alongside the main result."""
    name: str
    hs_code: str
    reason: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimilarItem':
        return cls(
            name=_as_text(data.get('name')),
            hs_code=_as_text(data.get('hsCode', data.get('hs_code'))),
            reason=_as_text(data.get('reason'))
        )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value).strip()


def _as_text_tuple(value: Any) -> Tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(_as_text(v) for v in value if _as_text(v))
    return (_as_text(value),)


def _as_score(value: Any) -> int:
    """Coerce a confidence value into the 0..100 range."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, str):
        value = value.strip().rstrip('%').strip()
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0
    if score != score:  # NaN
        return 0
    return int(round(min(max(score, 0.0), 100.0)))


@dataclass(frozen=True)
class ClassificationResult:
    """Model for classification result."""
    hs_code: str
    product_name: str = ""
    description: str = ""
    duty_rate: str = ""
    tax_rate: str = ""
    restrictions: Tuple[str, ...] = ()
    reasoning: str = ""
    confidence_score: int = 0
    required_documents: Tuple[str, ...] = ()
    source: ResultSource = ResultSource.AI_MODEL
    source_reference: Optional[str] = None
    similar_items: Tuple[SimilarItem, ...] = ()

    def __post_init__(self):
        if not 0 <= self.confidence_score <= 100:
            raise ValueError(f"confidence_score out of range: {self.confidence_score}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ClassificationResult':
        """Create ClassificationResult from the model's JSON document."""
        similar = data.get('similarItems') or []
        if not isinstance(similar, list):
            similar = []
        reference = _as_text(data.get('sourceReference'))
        return cls(
            hs_code=_as_text(data.get('hsCode')),
            product_name=_as_text(data.get('productName')),
            description=_as_text(data.get('description')),
            duty_rate=_as_text(data.get('dutyRate')),
            tax_rate=_as_text(data.get('taxRate')),
            restrictions=_as_text_tuple(data.get('restrictions')),
            reasoning=_as_text(data.get('reasoning')),
            confidence_score=_as_score(data.get('confidenceScore')),
            required_documents=_as_text_tuple(data.get('requiredDocuments')),
            source=ResultSource.normalize(data.get('source')),
            source_reference=reference or None,
            similar_items=tuple(SimilarItem.from_dict(item) for item in similar if isinstance(item, dict))
        )

    def with_source(self, source: ResultSource) -> 'ClassificationResult':
        return replace(self, source=source)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase wire names."""
        return {
            'hsCode': self.hs_code,
            'productName': self.product_name,
            'description': self.description,
            'dutyRate': self.duty_rate,
            'taxRate': self.tax_rate,
            'restrictions': list(self.restrictions),
            'reasoning': self.reasoning,
            'confidenceScore': self.confidence_score,
            'requiredDocuments': list(self.required_documents),
            'source': self.source.value,
            'sourceReference': self.source_reference,
            'similarItems': [
                {'name': i.name, 'hsCode': i.hs_code, 'reason': i.reason}
                for i in self.similar_items
            ]
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, sort_keys=True, indent=indent)
