"""
Structured extraction adapter.

Turns OCR text into invoice metadata and line items with a language model.
Malformed model output degrades to an empty extraction whose errors list
says why; only a failed model call aborts the run.
"""

import json
import re
from typing import Any

from pydantic import ValidationError

from shelfwise.config import get_logger
from shelfwise.core.entities.invoice import ExtractedLineItem, InvoiceMetadata
from shelfwise.core.exceptions import ExtractionError, LLMError
from shelfwise.core.interfaces.extraction import IStructuredExtractor, StructuredExtraction
from shelfwise.core.interfaces.llm import ILLMProvider

logger = get_logger(__name__)

INVOICE_EXTRACTION_PROMPT = """You are an invoice data extraction system. Extract structured data from the supplier invoice text below.

INVOICE TEXT:
{text}

OUTPUT FORMAT: Return ONLY a valid JSON object with exactly this structure. No markdown, no explanations.
{{
  "metadata": {{
    "supplier_name": "string or null",
    "invoice_number": "string or null",
    "invoice_date": "YYYY-MM-DD or null",
    "due_date": "YYYY-MM-DD or null",
    "subtotal": "number or null",
    "taxes": "number or null",
    "discounts": "number or null",
    "total": "number or null"
  }},
  "items": [
    {{
      "description": "product name (REQUIRED)",
      "sku": "string or null - supplier item code",
      "upc": "string or null - barcode",
      "quantity": "number",
      "unit_cost": "number - price per unit",
      "line_total": "number"
    }}
  ]
}}

EXTRACTION RULES:
1. Extract ALL line items you can find
2. Use null for missing values, never make up data
3. Numbers must be raw numeric values without currency symbols
4. Dates in YYYY-MM-DD format

CRITICAL: Return ONLY the JSON object."""


def _extract_json_string(text: str) -> str | None:
    """Extract the JSON payload from a model response, dropping fences and prose."""
    text = text.strip()

    if not text.startswith("{"):
        match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
        if match:
            return match.group(1).strip()

    start = text.find("{")
    if start == -1:
        return None

    # Keep only the first complete object; anything after it is chatter
    try:
        _, end = json.JSONDecoder().raw_decode(text, start)
    except json.JSONDecodeError:
        match = re.search(r"\{[\s\S]*\}", text)
        return match.group(0) if match else text[start:]
    return text[start:end]


def decode_payload(text: str) -> StructuredExtraction:
    """
    Decode a model response into a StructuredExtraction.

    Never raises: every failure is recorded in the result's errors.
    """
    json_str = _extract_json_string(text)
    if not json_str:
        return _malformed(text, "No JSON object found in response")

    try:
        raw_data = json.loads(json_str)
    except json.JSONDecodeError as e:
        return _malformed(text, f"Invalid JSON syntax: {e}")

    if not isinstance(raw_data, dict):
        return _malformed(text, f"Expected a JSON object, got {type(raw_data).__name__}")

    raw_metadata = raw_data.get("metadata") or {}
    raw_items = raw_data.get("items") or []

    if not isinstance(raw_metadata, dict):
        return _malformed(text, "'metadata' is not an object")
    if not isinstance(raw_items, list):
        return _malformed(text, "'items' is not a list")

    try:
        metadata = InvoiceMetadata.model_validate(raw_metadata)
    except ValidationError as e:
        return _malformed(text, f"Invalid metadata: {e.error_count()} error(s)")

    errors: list[str] = []
    items: list[ExtractedLineItem] = []
    for index, raw_item in enumerate(raw_items):
        if not isinstance(raw_item, dict):
            errors.append(f"items[{index}]: not an object")
            continue
        try:
            items.append(ExtractedLineItem.model_validate(raw_item))
        except ValidationError as e:
            for err in e.errors():
                field = ".".join(str(loc) for loc in err["loc"])
                errors.append(f"items[{index}].{field}: {err['msg']}")

    return StructuredExtraction(
        metadata=metadata,
        items=items,
        errors=errors,
        raw_response=text,
    )


def render_payload(extraction: StructuredExtraction) -> str:
    """Render metadata and items as the fenced JSON payload the model is asked for."""
    payload: dict[str, Any] = {
        "metadata": extraction.metadata.model_dump(mode="json"),
        "items": [item.model_dump(mode="json") for item in extraction.items],
    }
    return "```json\n" + json.dumps(payload, indent=2) + "\n```"


def _malformed(text: str, reason: str) -> StructuredExtraction:
    return StructuredExtraction(
        errors=[reason],
        malformed=True,
        raw_response=text,
    )


class StructuredExtractor(IStructuredExtractor):
    """Language-model backed invoice parser."""

    def __init__(
        self,
        llm_provider: ILLMProvider,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self._llm = llm_provider
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def parse_structured(self, raw_text: str) -> StructuredExtraction:
        prompt = INVOICE_EXTRACTION_PROMPT.format(text=raw_text)

        try:
            response = await self._llm.generate(
                prompt,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except LLMError as e:
            logger.error("structured_extraction_llm_failed", error=e.message, code=e.code)
            raise ExtractionError("ocr_text", e.message, stage="llm") from e

        extraction = decode_payload(response.text)

        if extraction.malformed:
            logger.warning(
                "structured_extraction_malformed",
                errors=extraction.errors,
                raw_response_preview=response.text[:300],
            )
        else:
            logger.info(
                "structured_extraction_complete",
                items=len(extraction.items),
                rejected=len(extraction.errors),
                supplier=extraction.metadata.supplier_name,
            )

        return extraction
