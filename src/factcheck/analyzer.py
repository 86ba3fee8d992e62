"""Fact-check gateway: input guards, the upstream search call and reply normalization."""

import asyncio
import json
import logging
import math
import re

from typing import Any

import dspy

from factcheck.config import Settings
from factcheck.models import RESPONSE_FORMAT, SEARCH_TOOLS, build_messages, create_lm
from factcheck.schemas import NEUTRAL_SCORE, AnalysisFailure, AnalysisResult


logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 10

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class FactCheckError(Exception):
    """Base error for an analysis that could not produce a real result."""

    error = "Analysis failed"
    summary = "Could not complete fact-check due to server error."

    def to_failure(self) -> AnalysisFailure:
        """Build the neutral failure payload for this error."""
        return AnalysisFailure.build(error=self.error, summary=self.summary)


class MissingCredentialsError(FactCheckError):
    """Raised when no provider API key is configured."""

    error = "Server configuration error"
    summary = "Server not properly configured."

    def __init__(self) -> None:
        super().__init__("GEMINI_API_KEY is not configured")


class UpstreamError(FactCheckError):
    """Raised when the provider call fails."""


class MalformedReplyError(UpstreamError):
    """Raised when the provider reply is not the expected JSON document."""


class UpstreamTimeoutError(UpstreamError):
    """Raised when the provider does not answer within the configured timeout."""

    error = "Analysis timed out"
    summary = "Fact-check timed out waiting for the search provider."

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Provider did not respond within {timeout:g}s")


def _to_number(value: Any) -> int | float | None:
    """Coerce a JSON value to a number, or None when it is not numeric.

    Integers are kept as integers so arbitrarily large values never go
    through a float conversion.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except (OverflowError, ValueError):
            return None
    else:
        return None
    return None if math.isnan(number) else number


def normalize_score(value: Any) -> int | float:
    """Clamp the score into [0, 10]; non-numeric or missing scores become neutral."""
    number = _to_number(value)
    if number is None:
        number = NEUTRAL_SCORE
    return min(MAX_SCORE, max(MIN_SCORE, number))


def normalize_claims_checked(value: Any) -> int:
    """Non-negative claim count; anything non-numeric counts as zero."""
    number = _to_number(value)
    if number is None or (isinstance(number, float) and math.isinf(number)):
        return 0
    return max(0, int(number))


def normalize_sources(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedReplyError(f"Expected 'sources' to be a list, got {type(value).__name__}")
    return [str(source) for source in value]


def parse_reply(content: str) -> AnalysisResult:
    """
    Parse the provider's reply and normalize it into an AnalysisResult.

    The score is presence-checked rather than truthiness-checked, so a genuine
    score of 0 is kept. ``risk`` is passed through without checking it against
    the score.

    Args:
        content: Raw completion text

    Returns:
        Normalized analysis result

    Raises:
        MalformedReplyError: If the reply is not a JSON object with string
            ``risk`` and ``summary`` fields
    """
    text = content.strip()
    fenced = _FENCE_PATTERN.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except ValueError as e:
        # JSONDecodeError, or an integer literal over the int conversion limit
        raise MalformedReplyError(f"Reply is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedReplyError(f"Expected a JSON object, got {type(data).__name__}")

    for field in ("risk", "summary"):
        if not isinstance(data.get(field), str):
            raise MalformedReplyError(f"Reply field '{field}' is missing or not a string")

    return AnalysisResult(
        score=normalize_score(data.get("score")),
        risk=data["risk"],
        summary=data["summary"],
        sources=normalize_sources(data.get("sources")),
        claims_checked=normalize_claims_checked(data.get("claimsChecked")),
    )


def _completion_text(outputs: list[Any]) -> str:
    """Extract the first completion's text from dspy.LM outputs."""
    if not outputs:
        raise MalformedReplyError("Provider returned no completions")
    output = outputs[0]
    if isinstance(output, dict):
        output = output.get("text")
    if not isinstance(output, str):
        raise MalformedReplyError("Provider returned an empty completion")
    return output


class FactChecker:
    """Relays text to a search-grounded Gemini model and normalizes its trust assessment."""

    def __init__(
        self,
        lm: dspy.LM | None,
        timeout: float = 45.0,
        max_text_length: int = 5000,
        min_text_length: int = 50,
    ) -> None:
        """
        Initialize the fact checker.

        Args:
            lm: Language model client, or None when no credential is configured
            timeout: Upper bound in seconds for the provider call
            max_text_length: Input is silently truncated to this many characters
            min_text_length: Shorter input gets the neutral "too short" result
        """
        self.lm = lm
        self.timeout = timeout
        self.max_text_length = max_text_length
        self.min_text_length = min_text_length

    @classmethod
    def from_settings(cls, settings: Settings) -> "FactChecker":
        """Build a fact checker and its LM client from application settings."""
        return cls(
            lm=create_lm(settings),
            timeout=settings.analysis_timeout,
            max_text_length=settings.max_text_length,
            min_text_length=settings.min_text_length,
        )

    @property
    def configured(self) -> bool:
        return self.lm is not None

    async def analyze(self, text: Any) -> AnalysisResult:
        """
        Fact-check a block of text.

        Args:
            text: Text submitted by the client; may be missing or of any type

        Returns:
            Normalized analysis, or the neutral result for degenerate input

        Raises:
            MissingCredentialsError: If no provider credential is configured
            UpstreamError: If the provider call fails, times out or returns
                an unusable reply
        """
        if not isinstance(text, str) or len(text) < self.min_text_length:
            return AnalysisResult.too_short()

        if self.lm is None:
            logger.error("Missing GEMINI_API_KEY")
            raise MissingCredentialsError()

        truncated_text = text[: self.max_text_length]
        logger.info(f"Analyzing {len(truncated_text)} chars...")

        content = await self._complete(truncated_text)
        try:
            result = parse_reply(content)
        except MalformedReplyError as e:
            logger.error(f"Unusable provider reply: {e}")
            raise
        except Exception as e:
            logger.exception("Could not normalize provider reply")
            raise MalformedReplyError(str(e)) from e

        logger.info(f"{result.risk} ({result.score:g}/10) - {len(result.sources)} sources")
        if result.sources:
            logger.debug(f"Sources: {', '.join(result.sources)}")

        return result

    async def _complete(self, text: str) -> str:
        try:
            # Request text must not outlive the request in dspy's call history
            with dspy.context(disable_history=True):
                outputs = await asyncio.wait_for(
                    self.lm.acall(
                        messages=build_messages(text),
                        tools=SEARCH_TOOLS,
                        response_format=RESPONSE_FORMAT,
                    ),
                    timeout=self.timeout,
                )
        except asyncio.TimeoutError as e:
            logger.warning(f"Provider call timed out after {self.timeout:g}s")
            raise UpstreamTimeoutError(self.timeout) from e
        except Exception as e:
            logger.exception("Provider call failed")
            raise UpstreamError(str(e)) from e

        return _completion_text(outputs)
