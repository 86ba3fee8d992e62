"""Pydantic schemas for the fact-check API."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field


NEUTRAL_SCORE = 5
NEUTRAL_RISK = "Medium Risk"
SHORT_TEXT_SUMMARY = "Post too short for meaningful analysis."


class AnalyzeRequest(BaseModel):
    """Request schema for text analysis.

    ``text`` is deliberately untyped: missing or non-string input is answered
    with a neutral result instead of a validation error.
    """

    text: Any = Field(
        default=None,
        description="The text to fact-check",
        json_schema_extra={
            "example": "Scientists confirmed that drinking hot water every hour cures the flu."
        },
    )


class AnalysisResult(BaseModel):
    """Normalized trust assessment."""

    model_config = ConfigDict(populate_by_name=True)

    # Integer scores are sent back as integers
    score: Annotated[int, Field(ge=0, le=10)] | Annotated[float, Field(ge=0.0, le=10.0)] = Field(
        ..., description="Trust score between 0 and 10"
    )
    risk: str = Field(..., description="High Risk, Medium Risk or Trustworthy")
    summary: str = Field(..., description="Short explanation citing the sources found")
    sources: list[str] = Field(default_factory=list, description="Cited sources, in order")
    claims_checked: int = Field(
        default=0,
        alias="claimsChecked",
        description="Number of factual claims the provider attempted to verify",
        ge=0,
    )

    @classmethod
    def neutral(cls, summary: str) -> "AnalysisResult":
        """Build the neutral default result carrying the given summary."""
        return cls(score=NEUTRAL_SCORE, risk=NEUTRAL_RISK, summary=summary)

    @classmethod
    def too_short(cls) -> "AnalysisResult":
        """Result returned for missing, non-string or too-short input."""
        return cls.neutral(SHORT_TEXT_SUMMARY)


class AnalysisFailure(AnalysisResult):
    """Neutral result plus an error marker, returned with a server-error status."""

    error: str = Field(..., description="Short error marker")

    @classmethod
    def build(cls, error: str, summary: str) -> "AnalysisFailure":
        return cls(error=error, score=NEUTRAL_SCORE, risk=NEUTRAL_RISK, summary=summary)
