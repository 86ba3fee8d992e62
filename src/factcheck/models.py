"""Prompt, output schema and LM client definitions for the fact-checking model."""

from typing import Any

import dspy

from factcheck.config import Settings


SYSTEM_PROMPT = """You are an EXPERT fact-checking analyst with access to real-time Google Search.

YOUR MISSION:
1. Use Google Search to verify EVERY factual claim
2. Cross-reference multiple authoritative sources
3. Check current dates and context
4. Identify misinformation, fake news, and manipulation

SCORING GUIDE:
- 9-10: Verified TRUE by multiple credible sources (Reuters, AP, WHO, .gov)
- 7-8: Mostly accurate, credible single source
- 5-6: Partially true, missing context, or unverifiable
- 3-4: Misleading or lacks evidence
- 0-2: Proven FALSE by fact-checkers, known hoax

RISK LEVELS:
- "Trustworthy" (7-10): Verified information
- "Medium Risk" (4-6): Unverified or questionable
- "High Risk" (0-3): False information or hoax

OUTPUT (JSON only):
{
  "score": <0-10>,
  "risk": "<High Risk|Medium Risk|Trustworthy>",
  "summary": "<2-3 sentences citing specific sources>",
  "sources": ["<source1>", "<source2>"],
  "claimsChecked": <number>
}

Example: "FALSE. Snopes and Reuters confirm this is a debunked 2019 hoax. No medical sources support this claim."

Always cite what you found. If nothing found, state clearly."""

USER_PROMPT_PREFIX = "Fact-check this:\n\n"

# Gemini grounding tool, passed through LiteLLM as-is
SEARCH_TOOLS: list[dict[str, Any]] = [{"googleSearch": {}}]

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "score": {"type": "number"},
        "risk": {"type": "string"},
        "summary": {"type": "string"},
        "sources": {"type": "array", "items": {"type": "string"}},
        "claimsChecked": {"type": "number"},
    },
    "required": ["score", "risk", "summary", "sources", "claimsChecked"],
}

RESPONSE_FORMAT: dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {"name": "trust_assessment", "schema": RESPONSE_SCHEMA, "strict": True},
}


def build_messages(text: str) -> list[dict[str, str]]:
    """
    Build the chat messages for a single fact-check request.

    Args:
        text: The (already truncated) text to fact-check

    Returns:
        System instruction followed by the user turn
    """
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"{USER_PROMPT_PREFIX}{text}"},
    ]


def create_lm(settings: Settings) -> dspy.LM | None:
    """
    Create the Gemini language model client.

    Returns None when no API key is configured; callers treat that as a
    configuration error at request time.
    """
    if not settings.has_credentials:
        return None

    return dspy.LM(
        model=settings.get_model_path(),
        api_key=settings.gemini_api_key,
        temperature=settings.temperature,
        cache=False,
        num_retries=0,
    )
