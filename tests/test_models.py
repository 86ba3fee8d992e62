"""Tests for prompt and LM client definitions."""

from unittest.mock import patch

import dspy

from factcheck.config import Settings
from factcheck.models import (
    RESPONSE_FORMAT,
    RESPONSE_SCHEMA,
    SEARCH_TOOLS,
    SYSTEM_PROMPT,
    build_messages,
    create_lm,
)


class TestSystemPrompt:
    """Tests for the fixed system instruction."""

    def test_contains_scoring_rubric(self):
        """Test every score band is described."""
        for band in ("9-10", "7-8", "5-6", "3-4", "0-2"):
            assert band in SYSTEM_PROMPT

    def test_contains_risk_levels(self):
        """Test the risk categories and their ranges are described."""
        assert '"Trustworthy" (7-10)' in SYSTEM_PROMPT
        assert '"Medium Risk" (4-6)' in SYSTEM_PROMPT
        assert '"High Risk" (0-3)' in SYSTEM_PROMPT

    def test_describes_output_fields(self):
        """Test the JSON output shape lists all five fields."""
        for field in ("score", "risk", "summary", "sources", "claimsChecked"):
            assert f'"{field}"' in SYSTEM_PROMPT


class TestResponseSchema:
    """Tests for the structured output constraint."""

    def test_requires_all_fields(self):
        """Test all five fields are required."""
        assert RESPONSE_SCHEMA["required"] == [
            "score",
            "risk",
            "summary",
            "sources",
            "claimsChecked",
        ]

    def test_field_types(self):
        """Test field types in the schema."""
        properties = RESPONSE_SCHEMA["properties"]

        assert properties["score"]["type"] == "number"
        assert properties["risk"]["type"] == "string"
        assert properties["summary"]["type"] == "string"
        assert properties["sources"] == {"type": "array", "items": {"type": "string"}}
        assert properties["claimsChecked"]["type"] == "number"

    def test_response_format_wraps_schema(self):
        """Test the schema is sent as a JSON-schema response format."""
        assert RESPONSE_FORMAT["type"] == "json_schema"
        assert RESPONSE_FORMAT["json_schema"]["schema"] is RESPONSE_SCHEMA

    def test_search_tool_enabled(self):
        """Test Google Search grounding is requested."""
        assert SEARCH_TOOLS == [{"googleSearch": {}}]


class TestBuildMessages:
    """Tests for build_messages."""

    def test_system_then_user(self):
        """Test message order and content."""
        messages = build_messages("The moon is made of cheese.")

        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert messages[1]["role"] == "user"
        assert messages[1]["content"] == "Fact-check this:\n\nThe moon is made of cheese."


class TestCreateLM:
    """Tests for create_lm."""

    def test_returns_none_without_credentials(self, monkeypatch):
        """Test no client is built when the API key is missing."""
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        assert create_lm(Settings(_env_file=None)) is None

    @patch("factcheck.models.dspy.LM")
    def test_builds_gemini_client(self, mock_lm_class, monkeypatch):
        """Test the LM is configured for Gemini without caching or retries."""
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        monkeypatch.setenv("GEMINI_MODEL", "gemini-2.0-flash-exp")
        monkeypatch.delenv("GEMINI_TEMPERATURE", raising=False)

        lm = create_lm(Settings(_env_file=None))

        assert lm is mock_lm_class.return_value
        mock_lm_class.assert_called_once_with(
            model="gemini/gemini-2.0-flash-exp",
            api_key="test-key",
            temperature=0.2,
            cache=False,
            num_retries=0,
        )

    def test_real_client_type(self, monkeypatch):
        """Test a real dspy.LM is returned when a key is configured."""
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")

        lm = create_lm(Settings(_env_file=None))

        assert isinstance(lm, dspy.LM)
        assert lm.model.startswith("gemini/")
