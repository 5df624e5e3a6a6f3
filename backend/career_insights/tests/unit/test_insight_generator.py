"""
Unit tests for InsightGenerator.

Tests cover:
- Prompt and request shape sent to the model
- Parsing of plain and fenced JSON responses
- Validation failures and API errors raising InsightGenerationError
- Configuration from environment
"""

import json
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from career_insights.models.industry_insight import DemandLevel, MarketOutlook
from career_insights.services.insight_generator import (
    IndustryInsightData,
    InsightGenerationError,
    InsightGenerator,
    InsightGeneratorConfig,
    extract_json,
    parse_insight_payload,
)
from career_insights.tests.sample_data import SAMPLE_INSIGHT


def _completion(content: str) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.chat.completions.create.return_value = _completion(json.dumps(SAMPLE_INSIGHT))
    return client


@pytest.fixture
def generator(mock_client):
    return InsightGenerator(InsightGeneratorConfig(api_key="sk-test", model="gpt-test"), client=mock_client)


class TestGenerate:
    """Tests for InsightGenerator.generate."""

    def test_returns_validated_data(self, generator):
        data = generator.generate("tech")

        assert isinstance(data, IndustryInsightData)
        assert data.demand_level == DemandLevel.HIGH
        assert data.market_outlook == MarketOutlook.POSITIVE
        assert data.salary_ranges[0].role == "Software Engineer"
        assert data.growth_rate == 12.5

    def test_prompt_names_industry_and_requests_json(self, generator, mock_client):
        generator.generate("renewable-energy")

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert "renewable-energy industry" in kwargs["messages"][-1]["content"]

    def test_api_error_raises_generation_error(self, generator, mock_client):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(request=request)

        with pytest.raises(InsightGenerationError, match="request failed"):
            generator.generate("tech")

    def test_empty_response_raises_generation_error(self, generator, mock_client):
        mock_client.chat.completions.create.return_value = _completion(None)

        with pytest.raises(InsightGenerationError):
            generator.generate("tech")


class TestParsing:
    """Tests for response parsing helpers."""

    def test_extract_json_strips_code_fence(self):
        fenced = "```json\n{\"a\": 1}\n```"
        assert extract_json(fenced) == "{\"a\": 1}"

    def test_extract_json_passes_plain_json(self):
        assert extract_json("  {\"a\": 1}\n") == "{\"a\": 1}"

    def test_parse_accepts_fenced_payload(self):
        data = parse_insight_payload(f"```\n{json.dumps(SAMPLE_INSIGHT)}\n```")
        assert data.top_skills == SAMPLE_INSIGHT["top_skills"]

    def test_parse_rejects_invalid_json(self):
        with pytest.raises(InsightGenerationError, match="invalid JSON"):
            parse_insight_payload("Here are your insights: tech is growing")

    def test_parse_rejects_unknown_demand_level(self):
        payload = dict(SAMPLE_INSIGHT, demand_level="VERY_HIGH")
        with pytest.raises(InsightGenerationError, match="incomplete"):
            parse_insight_payload(json.dumps(payload))

    def test_parse_rejects_missing_fields(self):
        payload = {k: v for k, v in SAMPLE_INSIGHT.items() if k != "growth_rate"}
        with pytest.raises(InsightGenerationError):
            parse_insight_payload(json.dumps(payload))

    def test_to_record_is_json_compatible(self):
        record = IndustryInsightData.model_validate(SAMPLE_INSIGHT).to_record()

        assert record["demand_level"] == "HIGH"
        assert record["salary_ranges"][0] == {
            "role": "Software Engineer",
            "min": 80000.0,
            "max": 160000.0,
            "median": 120000.0,
            "location": "US",
        }
        json.dumps(record)


class TestConfig:
    """Tests for InsightGeneratorConfig.from_env."""

    def test_missing_key_returns_none(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert InsightGeneratorConfig.from_env() is None

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("INSIGHT_MODEL", "gpt-4o")
        monkeypatch.setenv("INSIGHT_GENERATION_TIMEOUT_SECONDS", "15")

        config = InsightGeneratorConfig.from_env()

        assert config.api_key == "sk-env"
        assert config.model == "gpt-4o"
        assert config.timeout_seconds == 15.0

    def test_defaults_model(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.delenv("INSIGHT_MODEL", raising=False)

        assert InsightGeneratorConfig.from_env().model == "gpt-4o-mini"
