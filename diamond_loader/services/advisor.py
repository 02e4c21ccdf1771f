# diamond_loader/services/advisor.py
import json
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from diamond_loader.core.catalog import VALID_CLARITIES, VALID_COLORS, VALID_SHAPES
from diamond_loader.core.config import settings
from diamond_loader.core.exceptions import AdvisoryFailure
from diamond_loader.schemas.validation import AdvisoryResult, RawRecord, ValidationResult

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """You are a diamond industry expert helping to validate and improve CSV data quality.

Sample data issues found:
{issues}

Sample of the data:
{rows}

Please analyze this and provide:
1. Smart suggestions to fix common issues
2. Follow-up questions to clarify ambiguous data
3. Data quality insights
4. Auto-corrections where obvious

Focus on diamond industry standards:
- Shapes: {shapes}
- Colors: {colors}
- Clarities: {clarities}

Respond in JSON format:
{{
  "suggestions": ["suggestion1", "suggestion2"],
  "followUpQuestions": ["question1", "question2"],
  "autoCorrections": [{{"row": 1, "field": "Shape", "from": "round", "to": "RD", "confidence": 0.9}}],
  "dataQualityScore": 0.85,
  "commonIssues": ["issue1", "issue2"]
}}"""


def fallback_advice() -> AdvisoryResult:
    return AdvisoryResult(
        data_quality_score=0.6,
        suggestions=["Manual review recommended"],
        follow_up_questions=["Would you like assistance with data formatting?"],
        auto_corrections=[],
        common_issues=["Data validation needed"],
        is_fallback=True,
    )


def extract_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced {...} substring of text, or None.

    Braces inside JSON string literals are ignored, so a value like
    "use {RD}" does not end the object early.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for pos in range(start, len(text)):
            ch = text[pos]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:pos + 1]
        # unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def build_prompt(result: ValidationResult, rows: List[RawRecord],
                 max_issues: int, max_rows: int) -> str:
    issue_sample = [
        {"row": i.row, "column": i.field, "value": i.raw_value, "error": i.message}
        for i in result.issues[:max_issues]
    ]
    row_sample = [r.values for r in rows[:max_rows]]
    return PROMPT_TEMPLATE.format(
        issues=json.dumps(issue_sample, indent=2),
        rows=json.dumps(row_sample, indent=2),
        shapes=", ".join(VALID_SHAPES),
        colors=", ".join(VALID_COLORS),
        clarities=", ".join(VALID_CLARITIES),
    )


def parse_advice(payload: Any) -> AdvisoryResult:
    if not isinstance(payload, dict) or not isinstance(payload.get("response"), str):
        raise AdvisoryFailure("Assistant reply has no 'response' text")

    candidate = extract_json_object(payload["response"])
    if candidate is None:
        raise AdvisoryFailure("Assistant reply contains no JSON object")

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise AdvisoryFailure(f"Assistant JSON is malformed: {e}") from e
    if not isinstance(data, dict):
        raise AdvisoryFailure("Assistant JSON is not an object")

    try:
        return AdvisoryResult.model_validate(data)
    except ValidationError as e:
        raise AdvisoryFailure(f"Assistant JSON has the wrong shape: {e.error_count()} error(s)") from e


class EnrichmentAdvisor:
    """
    Best-effort suggestions from the assistant service.

    advise() never raises: every failure is logged and replaced by
    fallback_advice(). The ValidationResult passed in is only read.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        path: str = None,
        max_issues: int = None,
        max_rows: int = None,
    ):
        self.client = client
        self.path = path or settings.ASSISTANT_PATH
        self.max_issues = max_issues if max_issues is not None else settings.ADVISORY_MAX_ISSUES
        self.max_rows = max_rows if max_rows is not None else settings.ADVISORY_MAX_ROWS

    async def advise(self, result: ValidationResult,
                     records: Optional[List[RawRecord]] = None) -> AdvisoryResult:
        rows = records if records is not None else result.valid_rows
        try:
            advice = await self._request(build_prompt(result, rows, self.max_issues, self.max_rows))
        except Exception as e:
            logger.warning("Advisory pass failed, using fallback: %s", e)
            return fallback_advice()
        return self._drop_unknown_corrections(advice, result, rows)

    async def _request(self, prompt: str) -> AdvisoryResult:
        body: Dict[str, Any] = {"message": prompt, "conversation_history": []}
        try:
            resp = await self.client.post(self.path, json=body)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPError as e:
            raise AdvisoryFailure(f"Assistant request failed: {e}") from e
        except ValueError as e:
            raise AdvisoryFailure("Assistant reply is not JSON") from e
        return parse_advice(payload)

    @staticmethod
    def _drop_unknown_corrections(advice: AdvisoryResult, result: ValidationResult,
                                  rows: List[RawRecord]) -> AdvisoryResult:
        known = {(i.row, i.field) for i in result.issues}
        known.update((r.row, f) for r in rows for f in r.values)
        kept = [c for c in advice.auto_corrections if (c.row, c.field) in known]
        if len(kept) != len(advice.auto_corrections):
            logger.info(
                "Dropped %d auto-correction(s) for unknown cells",
                len(advice.auto_corrections) - len(kept),
            )
        return advice.model_copy(update={"auto_corrections": kept, "is_fallback": False})
