"""API routes for the fact-check gateway."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from factcheck.analyzer import FactChecker, FactCheckError
from factcheck.schemas import AnalysisFailure, AnalysisResult, AnalyzeRequest


router = APIRouter(tags=["analysis"])


def get_fact_checker(request: Request) -> FactChecker:
    """Return the fact checker built during application startup."""
    return request.app.state.fact_checker


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    responses={500: {"model": AnalysisFailure}},
)
async def analyze_text(
    request_data: AnalyzeRequest | None = None,
    fact_checker: FactChecker = Depends(get_fact_checker),
) -> AnalysisResult | JSONResponse:
    """
    Fact-check the submitted text and return a trust assessment.

    Args:
        request_data: Request body containing the text to analyze
        fact_checker: Fact checker injected from app state

    Returns:
        Analysis result, or a neutral failure payload with status 500 when the
        server is not configured or the provider call fails
    """
    text = request_data.text if request_data is not None else None

    try:
        return await fact_checker.analyze(text)
    except FactCheckError as e:
        return JSONResponse(
            status_code=500,
            content=e.to_failure().model_dump(by_alias=True),
        )
