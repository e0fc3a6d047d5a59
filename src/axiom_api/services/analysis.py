"""Feedback classification via the OpenAI API."""

import json
import re
import time

from openai import AsyncOpenAI
from pydantic import ValidationError as PydanticValidationError

from axiom_api.config import get_settings
from axiom_api.core.exceptions import AnalysisError, ValidationError
from axiom_api.core.logging import LogEvent, request_logger
from axiom_api.core.validation import validate_next_action
from axiom_api.models.feedback import Analysis

settings = get_settings()

SYSTEM_PROMPT = "You are a feedback triage assistant. You classify user feedback precisely and concisely."

ANALYSIS_PROMPT = """Analyze the following user feedback and return ONLY a JSON object with no additional text, markdown, or formatting.

The JSON must have exactly these fields:
- summary: A brief 1-2 sentence summary of the feedback
- sentiment: Must be exactly one of: "positive", "neutral", or "negative"
- tags: An array of short descriptive nouns (single words)
- priority: Must be exactly one of: "P0" (critical), "P1" (high), "P2" (medium), or "P3" (low)
- nextAction: A recommendation for what action to take, between 10 and 500 characters

Guidelines:
- P0: Critical issues affecting core functionality or user safety
- P1: Important issues affecting user experience significantly
- P2: Moderate issues or feature requests
- P3: Minor issues or nice-to-have improvements
- Keep all outputs concise and professional
- Do not include any personally identifiable information in the output

Feedback text: "{text}"

Return only the JSON object:"""

LEADING_FENCE = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")

POSITIVE_KEYWORDS = ["great", "love", "excellent", "amazing", "adorable", "perfect"]
NEGATIVE_KEYWORDS = ["bad", "hate", "terrible", "broken", "scratched", "escaped"]


def strip_code_fences(raw: str) -> str:
    """Remove enclosing triple-backtick fences (optionally tagged ``json``)."""
    text = raw.strip()
    text = LEADING_FENCE.sub("", text)
    text = TRAILING_FENCE.sub("", text)
    return text.strip()


def parse_analysis(raw: str) -> Analysis:
    """Parse the model's raw reply into an ``Analysis``.

    Raises ``AnalysisError`` when the reply is not JSON, lacks a field, uses a
    value outside the sentiment/priority enumerations, or carries a next action
    outside the allowed length.
    """
    try:
        payload = json.loads(strip_code_fences(raw))
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Analysis response is not valid JSON: {e.msg}") from e

    if not isinstance(payload, dict):
        raise AnalysisError("Analysis response is not a JSON object")

    try:
        analysis = Analysis.model_validate(payload)
        analysis.next_action = validate_next_action(analysis.next_action)
    except PydanticValidationError as e:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
        raise AnalysisError("Analysis response has invalid fields", {"fields": fields}) from e
    except ValidationError as e:
        raise AnalysisError(f"Analysis response is invalid: {e.message}") from e

    return analysis


class AnalysisClient:
    """Turns raw feedback text into an ``Analysis`` with a single API call."""

    def __init__(
        self,
        openai: AsyncOpenAI | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> None:
        if openai is None and settings.openai_api_key:
            openai = AsyncOpenAI(api_key=settings.openai_api_key, max_retries=0)
        self.openai = openai
        self.model = model or settings.openai_model
        self.max_tokens = max_tokens or settings.analysis_max_tokens

    async def analyze(self, text: str, request_id: str | None = None) -> Analysis:
        """Classify feedback text. No retries, no caching."""
        if self.openai is None:
            request_logger.log(LogEvent.ANALYSIS_MOCK, request_id, {"text_length": len(text)})
            return self._analyze_with_keywords(text)

        start_time = time.time()
        try:
            response = await self.openai.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": ANALYSIS_PROMPT.format(text=text)},
                ],
                response_format={"type": "json_object"},
            )
            content = response.choices[0].message.content if response.choices else None
            if not content:
                raise AnalysisError("Empty response from analysis API")
            analysis = parse_analysis(content)
        except AnalysisError as e:
            self._log_failure(e.message, start_time, request_id)
            raise
        except Exception as e:
            self._log_failure(str(e), start_time, request_id)
            raise AnalysisError(f"Analysis API call failed: {e}") from e

        request_logger.log(
            LogEvent.ANALYSIS_COMPLETE,
            request_id=request_id,
            data={"model": self.model, "sentiment": analysis.sentiment, "priority": analysis.priority},
            duration_ms=int((time.time() - start_time) * 1000),
        )
        return analysis

    def _log_failure(self, error: str, start_time: float, request_id: str | None) -> None:
        request_logger.log(
            LogEvent.ANALYSIS_FAILED,
            request_id=request_id,
            data={"model": self.model, "error": error},
            duration_ms=int((time.time() - start_time) * 1000),
        )

    def _analyze_with_keywords(self, text: str) -> Analysis:
        """Keyword-based stand-in used when no API key is configured."""
        text_lower = text.lower()

        sentiment = "neutral"
        if any(keyword in text_lower for keyword in POSITIVE_KEYWORDS):
            sentiment = "positive"
        elif any(keyword in text_lower for keyword in NEGATIVE_KEYWORDS):
            sentiment = "negative"

        summary = text.strip()
        if len(summary) > 50:
            summary = summary[:50] + "..."

        return Analysis(
            summary=f"User feedback: {summary}",
            sentiment=sentiment,
            tags=["feedback", "mock"],
            priority="P2",
            nextAction="Review feedback and determine appropriate response",
        )
