"""
Pricing suggestion — LLM proxy over the caller's pricing catalog.

The caller's active catalog is embedded in the system prompt; the client
description is the user message. The model is asked for JSON only, but
replies often arrive inside a Markdown fence, so the answer is pulled out
of a fenced ``json`` block, then a bare fence, then the raw text.

Doc-Types: OPS_MODULE
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from agencydesk.core.logging import get_logger
from agencydesk.core.models import PricingItem
from agencydesk.llm.protocol import LLMProvider, Message
from agencydesk.ops.context import OperationContext
from agencydesk.ops.result import OperationResult, start_timer

logger = get_logger(__name__)

_JSON_FENCE = re.compile(r"```json\n(.*?)\n```", re.DOTALL)
_BARE_FENCE = re.compile(r"```\n(.*?)\n```", re.DOTALL)

_PROMPT_TEMPLATE = """أنت خبير تسعير لوكالة تسويق رقمي. مهمتك هي تحليل احتياجات العميل واقتراح الخدمات المناسبة من الكتالوج.

كتالوج الأسعار المتاح:
{catalog}

قم بتحليل احتياجات العميل واقترح:
1. الخدمات المناسبة من الكتالوج
2. الكميات المقترحة
3. تفسير منطقي لاختياراتك

يجب أن يكون الرد بصيغة JSON فقط:
{{
  "suggested_items": [
    {{
      "service_name": "اسم الخدمة بالعربي",
      "service_name_en": "Service name in English",
      "description": "وصف الخدمة",
      "quantity": رقم,
      "unit_price": رقم,
      "total_price": رقم,
      "category": "فئة الخدمة"
    }}
  ],
  "total": الإجمالي,
  "reasoning": "تفسير الاختيارات بالعربي"
}}"""


@dataclass
class PricingSuggestion:
    """Parsed model answer plus the catalog it was built from."""

    data: Any
    model: str
    catalog_size: int

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "model": self.model, "catalog_size": self.catalog_size}


def build_system_prompt(catalog: list[PricingItem]) -> str:
    return _PROMPT_TEMPLATE.format(
        catalog=json.dumps([item.to_dict() for item in catalog], indent=2, ensure_ascii=False),
    )


def extract_json(text: str) -> Any:
    """Decode the JSON payload of a model reply.

    Raises:
        ValueError: No decodable JSON in *text*.
    """
    match = _JSON_FENCE.search(text) or _BARE_FENCE.search(text)
    candidate = match.group(1) if match else text
    return json.loads(candidate)


def suggest_pricing(
    ctx: OperationContext,
    llm: LLMProvider,
    description: str | None,
    *,
    model: str | None = None,
) -> OperationResult[PricingSuggestion]:
    """Suggest catalog items and quantities for *description*."""
    timer = start_timer()

    if not description or not description.strip():
        return OperationResult.fail(
            "VALIDATION_FAILED", "Client description is required", elapsed_ms=timer.elapsed_ms
        )
    if not ctx.user:
        return OperationResult.fail("UNAUTHORIZED", "Unauthorized", elapsed_ms=timer.elapsed_ms)

    try:
        catalog = ctx.store.list_active_pricing(ctx.user)
    except Exception as e:
        logger.error("pricing.catalog_failed", user=ctx.user, error=str(e))
        return OperationResult.from_exception("STORE_FAILED", e, elapsed_ms=timer.elapsed_ms)

    messages = [Message.system(build_system_prompt(catalog)), Message.user(description)]
    try:
        response = llm.complete(messages, model)
    except Exception as e:
        logger.error("pricing.llm_failed", error=str(e))
        return OperationResult.from_exception("UPSTREAM_FAILED", e, elapsed_ms=timer.elapsed_ms)

    try:
        data = extract_json(response.content)
    except ValueError:
        logger.error("pricing.parse_failed", reply=response.content[:500])
        return OperationResult.fail(
            "PARSE_FAILED", "Failed to parse AI suggestion", elapsed_ms=timer.elapsed_ms
        )

    logger.info("pricing.suggested", user=ctx.user, catalog_size=len(catalog), model=response.model)
    return OperationResult.ok(
        PricingSuggestion(data=data, model=response.model, catalog_size=len(catalog)),
        elapsed_ms=timer.elapsed_ms,
    )
