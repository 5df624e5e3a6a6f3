"""
AI industry insight generation.

Calls the OpenAI chat completions API in JSON mode and validates the result
into IndustryInsightData. The call is slow and network-bound: callers must
not hold a database transaction open while it runs.

Configuration:
- OPENAI_API_KEY: API key (required)
- INSIGHT_MODEL: Model name (default: gpt-4o-mini)
- INSIGHT_GENERATION_TIMEOUT_SECONDS: Request timeout (default: 60)
"""

import json
import logging
import os
import re
import time
from dataclasses import dataclass
from typing import List, Optional

from openai import OpenAI, OpenAIError
from pydantic import BaseModel, Field, ValidationError

from career_insights.models.industry_insight import DemandLevel, MarketOutlook

logger = logging.getLogger(__name__)


INSIGHT_PROMPT = """Analyze the current state of the {industry} industry and provide insights in ONLY the following JSON format without any additional notes or explanations:
{{
  "salary_ranges": [
    {{ "role": "string", "min": number, "max": number, "median": number, "location": "string" }}
  ],
  "growth_rate": number,
  "demand_level": "HIGH" | "MEDIUM" | "LOW",
  "top_skills": ["skill1", "skill2"],
  "market_outlook": "POSITIVE" | "NEUTRAL" | "NEGATIVE",
  "key_trends": ["trend1", "trend2"],
  "recommended_skills": ["skill1", "skill2"]
}}

IMPORTANT: Return ONLY the JSON. No additional text, notes, or markdown formatting.
Include at least 5 common roles for salary ranges.
Growth rate should be a percentage.
Include at least 5 skills and trends."""

SYSTEM_PROMPT = "You are a labour market analyst. Return only valid JSON."

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


class SalaryRange(BaseModel):
    """Salary band for one role."""

    role: str
    min: float
    max: float
    median: float
    location: str


class IndustryInsightData(BaseModel):
    """Validated generator output for one industry."""

    salary_ranges: List[SalaryRange] = Field(default_factory=list)
    growth_rate: float
    demand_level: DemandLevel
    top_skills: List[str] = Field(default_factory=list)
    market_outlook: MarketOutlook
    key_trends: List[str] = Field(default_factory=list)
    recommended_skills: List[str] = Field(default_factory=list)

    def to_record(self) -> dict:
        """Plain JSON-compatible values for the IndustryInsight columns."""
        return self.model_dump(mode="json")


@dataclass
class InsightGeneratorConfig:
    """Generator configuration from environment."""
    api_key: str
    model: str = "gpt-4o-mini"
    timeout_seconds: float = 60.0

    @classmethod
    def from_env(cls) -> Optional["InsightGeneratorConfig"]:
        """Load configuration from environment variables."""
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            logger.warning("OPENAI_API_KEY not configured; insight generation disabled")
            return None

        return cls(
            api_key=api_key,
            model=os.getenv("INSIGHT_MODEL", "gpt-4o-mini"),
            timeout_seconds=float(os.getenv("INSIGHT_GENERATION_TIMEOUT_SECONDS", "60")),
        )


class InsightGenerationError(Exception):
    """Raised when insights cannot be generated or parsed."""
    pass


def extract_json(content: str) -> str:
    """Strip markdown code fences some models wrap around JSON."""
    match = _CODE_FENCE.search(content)
    if match:
        return match.group(1)
    return content.strip()


def parse_insight_payload(content: str) -> IndustryInsightData:
    """
    Parse and validate a raw model response.

    Raises:
        InsightGenerationError: If the response is not valid insight JSON
    """
    try:
        payload = json.loads(extract_json(content))
    except json.JSONDecodeError as e:
        raise InsightGenerationError(f"Model returned invalid JSON: {e}") from e

    try:
        return IndustryInsightData.model_validate(payload)
    except ValidationError as e:
        raise InsightGenerationError(
            f"Model returned incomplete insight data: {e.error_count()} errors"
        ) from e


class InsightGenerator:
    """
    Generates industry insights with an OpenAI model.

    No retries: a failed call fails the calling operation.
    """

    def __init__(self, config: InsightGeneratorConfig, client: Optional[OpenAI] = None):
        """
        Args:
            config: InsightGeneratorConfig with credentials and model
            client: Optional OpenAI client (tests inject a mock)
        """
        self.config = config
        self.client = client or OpenAI(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    def generate(self, industry: str) -> IndustryInsightData:
        """
        Generate insight data for an industry.

        Args:
            industry: Industry name as stored on the user profile

        Returns:
            Validated IndustryInsightData

        Raises:
            InsightGenerationError: On API failure or unusable output
        """
        started = time.monotonic()
        logger.info(
            "insight_generation.started",
            extra={"industry": industry, "model": self.config.model},
        )

        try:
            response = self.client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": INSIGHT_PROMPT.format(industry=industry)},
                ],
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise InsightGenerationError(f"Insight generation request failed: {e}") from e

        content = response.choices[0].message.content or ""
        data = parse_insight_payload(content)

        logger.info(
            "insight_generation.completed",
            extra={
                "industry": industry,
                "duration_ms": int((time.monotonic() - started) * 1000),
                "salary_ranges": len(data.salary_ranges),
            },
        )
        return data
