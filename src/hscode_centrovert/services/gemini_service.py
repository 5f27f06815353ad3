"""
Gemini service for HS code classification.
"""
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional, Protocol, Sequence

from google import genai
from google.genai import types
from loguru import logger

from hscode_centrovert.config.settings import Config
from hscode_centrovert.exceptions import ModelInvocationError, NoResponseError
from hscode_centrovert.models.hs_models import MultimodalRequest, RetrievalTool
from hscode_centrovert.utils.logging_utils import log_model_invocation


@dataclass(frozen=True)
class GenerationConfig:
    """Decoding configuration passed to the generative model."""
    temperature: float
    system_instruction: str
    tools: FrozenSet[RetrievalTool] = frozenset()


class GenerativeModel(Protocol):
    """Anything that can turn content parts into text."""

    def generate(self, parts: Sequence[Dict[str, Any]], config: GenerationConfig) -> Optional[str]:
        ...


class GeminiModel:
    """GenerativeModel backed by the google-genai SDK."""

    def __init__(self, client: Optional[genai.Client] = None, model_name: Optional[str] = None):
        self._client = client
        self.model_name = model_name or Config.GEMINI_MODEL

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            http_options = None
            if Config.MODEL_TIMEOUT_MS:
                http_options = types.HttpOptions(timeout=Config.MODEL_TIMEOUT_MS)
            self._client = genai.Client(api_key=Config.GEMINI_API_KEY, http_options=http_options)
        return self._client

    def generate(self, parts: Sequence[Dict[str, Any]], config: GenerationConfig) -> Optional[str]:
        tools = None
        if RetrievalTool.WEB_SEARCH in config.tools:
            # response_mime_type cannot be combined with the search tool;
            # the prompt carries the JSON contract instead
            tools = [types.Tool(google_search=types.GoogleSearch())]

        response = self.client.models.generate_content(
            model=self.model_name,
            contents=[types.Content(role="user", parts=[self._to_part(p) for p in parts])],
            config=types.GenerateContentConfig(
                temperature=config.temperature,
                system_instruction=config.system_instruction,
                tools=tools
            )
        )
        return response.text

    @staticmethod
    def _to_part(part: Dict[str, Any]) -> types.Part:
        if 'inline_data' in part:
            blob = part['inline_data']
            return types.Part.from_bytes(data=blob['data'], mime_type=blob['mime_type'])
        return types.Part.from_text(text=part['text'])


class ClassificationInvoker:
    """Service that sends a compiled request to the model and returns its raw text."""

    def __init__(self, model: Optional[GenerativeModel] = None):
        self.model = model or GeminiModel()

    @property
    def model_name(self) -> str:
        return getattr(self.model, 'model_name', type(self.model).__name__)

    def invoke(self, request: MultimodalRequest) -> str:
        """
        Call the model once with the request's fixed decoding settings.

        Args:
            request: Compiled multimodal request

        Returns:
            Raw model text

        Raises:
            NoResponseError: the model returned no text at all
            ModelInvocationError: the model call itself failed
        """
        log_model_invocation(self.model_name, sorted(t.value for t in request.tools), len(request.parts))
        config = GenerationConfig(
            temperature=request.temperature,
            system_instruction=request.system_instruction,
            tools=request.tools
        )
        try:
            text = self.model.generate(list(request.parts), config)
        except Exception as e:
            logger.error(f"Error identifying HS Code: {str(e)}")
            raise ModelInvocationError(f"Model invocation failed: {str(e)}") from e

        if not text:
            logger.error("Model returned no text payload")
            raise NoResponseError()
        logger.debug(f"Model returned {len(text)} characters")
        return text
