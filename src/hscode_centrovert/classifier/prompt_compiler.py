"""
Builds the multimodal classification request and its JSON output contract.
"""
from typing import Any, Dict, List

from hscode_centrovert.config.settings import Config
from hscode_centrovert.models.hs_models import (
    ClassificationRequest, GatheredContext, MultimodalRequest, ResultSource
)

OUTPUT_SCHEMA = f"""{{
      "hsCode": "string (8-12 digits for national tariffs, 6 digits for Global)",
      "productName": "string",
      "description": "string (Official Tariff Description)",
      "dutyRate": "string (e.g., '5%', 'Free')",
      "taxRate": "string (e.g., '9% GST')",
      "restrictions": ["string (restriction 1)", "string (restriction 2)"],
      "reasoning": "string",
      "confidenceScore": integer (0-100),
      "requiredDocuments": ["string (doc 1)", "string (doc 2)"],
      "source": "{ResultSource.LIVE_API.value}" | "{ResultSource.AI_MODEL.value}",
      "sourceReference": "string (URL or name of the tariff book / database consulted) or null",
      "similarItems": [
        {{"name": "string", "hsCode": "string", "reason": "string (why it is similar but classified differently)"}}
      ]
    }}"""


class PromptCompiler:
    """Assembles the ordered content parts for one classification call."""

    def __init__(self, system_instruction: str = None, temperature: float = None):
        self.system_instruction = system_instruction or Config.SYSTEM_INSTRUCTION
        self.temperature = Config.MODEL_TEMPERATURE if temperature is None else temperature

    def compile(self, request: ClassificationRequest, context: GatheredContext) -> MultimodalRequest:
        """
        Build the request: image part first (if any), then the instruction text.

        Args:
            request: Caller's classification request
            context: Evidence, instruction block and tool selection for the region

        Returns:
            MultimodalRequest ready for the invoker
        """
        parts: List[Dict[str, Any]] = []
        if request.image is not None:
            parts.append({
                'inline_data': {
                    'data': request.image.to_bytes(),
                    'mime_type': request.image.resolved_mime_type(Config.DEFAULT_IMAGE_MIME_TYPE)
                }
            })
        parts.append({'text': self.build_prompt_text(request, context)})

        return MultimodalRequest(
            parts=tuple(parts),
            system_instruction=self.system_instruction,
            temperature=self.temperature,
            tools=context.tool_selection
        )

    def build_prompt_text(self, request: ClassificationRequest, context: GatheredContext) -> str:
        region = request.region.value
        evidence_text = context.evidence.text
        evidence_block = evidence_text if evidence_text else context.policy.fallback_note

        if request.image is not None:
            image_note = ("Note: An image of the product has been provided. Use visual details "
                          "(material, packaging, type) to refine the classification.")
        else:
            image_note = ""

        if request.product_description:
            description_line = f'Product Description provided by user: "{request.product_description}"'
        else:
            description_line = "Product Description provided by user: (none - classify from the image alone)"

        if context.tool_selection:
            search_rule = f"2. If Google Search was used to find the code, set 'source' to '{ResultSource.LIVE_API.value}'."
        else:
            search_rule = "2. No search tool is available for this request; do not claim a search was performed."

        return f"""
    Act as an expert Customs Broker and Trade Compliance Specialist for {region}.

    Your task is to classify the following product into its correct Harmonized System (HS) Code.

    {image_note}

    {description_line}
    Target Import Country: "{region}"

    *** REAL-TIME DATA CONTEXT (High Priority) ***
    {evidence_block}
    **********************************************

    Guidelines:
    1. If 'Real-Time Data Context' contains a match, prioritize that classification and set 'confidenceScore' to {Config.MATCH_CONFIDENCE_FLOOR} or higher. Set 'source' to '{ResultSource.LIVE_API.value}'.
    {search_rule}
    3. If relying on internal training, set 'source' to '{ResultSource.AI_MODEL.value}'.
    4. **Region Specific Rules**: {context.instruction_block}

    Analyze the material, function, and composition of the product to determine the code.

    **IMPORTANT: RESPONSE FORMAT**
    You MUST return a VALID JSON object. Do not include markdown code blocks.
    Do not include any explanation before or after the JSON.
    The JSON must follow this structure exactly:
    {OUTPUT_SCHEMA}

    Field rules:
    - "confidenceScore" is a whole number between 0 and 100.
    - "source" must be exactly "{ResultSource.LIVE_API.value}" or "{ResultSource.AI_MODEL.value}".
    - "restrictions" and "requiredDocuments" are arrays of strings; use an empty array when none apply.
    - "similarItems" MUST contain at least {Config.MIN_SIMILAR_ITEMS} entries of commonly confused products with their own HS codes.
  """
