import threading
from typing import Callable, Optional, Union

from loguru import logger

from hscode_centrovert.classifier.post_processor import post_process
from hscode_centrovert.classifier.prompt_compiler import PromptCompiler
from hscode_centrovert.classifier.response_parser import ResponseParser
from hscode_centrovert.exceptions import ClassificationError
from hscode_centrovert.models.hs_models import (
    ClassificationRequest, ClassificationResult, ImagePayload, TargetRegion
)
from hscode_centrovert.services.evidence_service import EvidenceAggregator
from hscode_centrovert.services.gemini_service import ClassificationInvoker
from hscode_centrovert.utils.common import emit_status
from hscode_centrovert.utils.logging_utils import log_classification_attempt, log_system_error


class HSCodeClassifier:
    def __init__(self, aggregator: EvidenceAggregator = None, compiler: PromptCompiler = None,
                 invoker: ClassificationInvoker = None, parser: ResponseParser = None):
        """Initialize the HS code classifier."""
        self.aggregator = aggregator or EvidenceAggregator()
        self.compiler = compiler or PromptCompiler()
        self.invoker = invoker or ClassificationInvoker()
        self.parser = parser or ResponseParser()

    def identify(self, product_description: str, region: Union[TargetRegion, str],
                 image: Optional[Union[ImagePayload, bytes, str]] = None,
                 on_status: Optional[Callable[[str], None]] = None) -> ClassificationResult:
        """Classify a product for a customs jurisdiction."""
        if image is not None and not isinstance(image, ImagePayload):
            image = ImagePayload(data=image)
        request = ClassificationRequest(
            product_description=product_description,
            region=region,
            image=image,
            status_callback=on_status
        )
        return self.classify(request)

    def classify(self, request: ClassificationRequest) -> ClassificationResult:
        """Run the evidence, prompt, model, parse and post-process pipeline."""
        log_classification_attempt(request.product_description, request.region.value, request.image is not None)
        on_status = request.status_callback

        context = self.aggregator.gather(request.region, request.product_description, on_status)

        emit_status(on_status, "Compiling classification request...")
        compiled = self.compiler.compile(request, context)

        emit_status(on_status, "Consulting the classification model...")
        try:
            raw_text = self.invoker.invoke(compiled)
            emit_status(on_status, "Synthesizing final compliance report...")
            result = self.parser.parse_result(raw_text)
        except ClassificationError as e:
            log_system_error("Classification", str(e))
            raise

        result = post_process(result, context.tool_selection)
        logger.info(f"Classified as {result.hs_code} ({result.confidence_score}% | {result.source.value})")
        return result


_default_classifier: Optional[HSCodeClassifier] = None
_default_lock = threading.Lock()


def identify_hs_code(product_description: str, region: Union[TargetRegion, str],
                     image: Optional[Union[ImagePayload, bytes, str]] = None,
                     on_status: Optional[Callable[[str], None]] = None) -> ClassificationResult:
    """Classify with a process-wide default classifier."""
    global _default_classifier
    if _default_classifier is None:
        with _default_lock:
            if _default_classifier is None:
                _default_classifier = HSCodeClassifier()
    return _default_classifier.identify(product_description, region, image, on_status)
