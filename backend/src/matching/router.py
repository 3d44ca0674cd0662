"""SKU matching API endpoints.

The matcher is created once by the application factory and stored on
app.state; endpoints are plain sync functions so matching runs on the
server's threadpool.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from .errors import MatcherError
from .ports import MatcherPort
from .schemas import (
    BatchMatchRequest,
    BatchMatchResponse,
    CorrectionAcceptedResponse,
    CorrectionRequest,
    MatchRequest,
    MatchResponse,
    SKUMatchResultSchema,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sku-matching", tags=["sku-matching"])

ERROR_STATUS = {
    "INVALID_CONFIG": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "UNKNOWN_PLATFORM": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "CANCELLED": status.HTTP_409_CONFLICT,
}


def get_matcher(request: Request) -> MatcherPort:
    return request.app.state.matcher


def _to_http_error(error: MatcherError) -> HTTPException:
    status_code = ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(f"Matching request failed: {error.message}", exc_info=error, extra={"error_code": error.code})
    else:
        logger.warning(f"Matching request rejected: {error.message}", extra={"error_code": error.code})
    return HTTPException(status_code=status_code, detail=error.to_dict())


@router.post("/match", response_model=MatchResponse)
def match_food(
    body: MatchRequest,
    matcher: MatcherPort = Depends(get_matcher),
):
    """Match one food item to platform SKUs.

    Returns results sorted by confidence, highest first. An empty list means
    no candidate reached min_confidence.
    """
    overrides = body.config.to_overrides() if body.config else None
    try:
        results = matcher.match_food(body.food.to_domain(), overrides)
    except MatcherError as e:
        raise _to_http_error(e) from e

    return MatchResponse(
        food_id=body.food.id,
        results=[SKUMatchResultSchema.model_validate(result) for result in results],
    )


@router.post("/match/batch", response_model=BatchMatchResponse)
def match_foods(
    body: BatchMatchRequest,
    matcher: MatcherPort = Depends(get_matcher),
):
    """Match several foods. A food that fails to match gets an empty list."""
    overrides = body.config.to_overrides() if body.config else None
    try:
        results = matcher.match_foods([food.to_domain() for food in body.foods], overrides)
    except MatcherError as e:
        raise _to_http_error(e) from e

    return BatchMatchResponse(
        results={
            food_id: [SKUMatchResultSchema.model_validate(result) for result in matches]
            for food_id, matches in results.items()
        }
    )


@router.post(
    "/corrections",
    response_model=CorrectionAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def record_correction(
    body: CorrectionRequest,
    matcher: MatcherPort = Depends(get_matcher),
):
    """Accept a human judgment about a match; it is stored in the background."""
    try:
        matcher.record_correction(
            food_id=body.food_id,
            platform_product_id=body.platform_product_id,
            platform=body.platform,
            is_correct=body.is_correct,
        )
    except MatcherError as e:
        raise _to_http_error(e) from e

    return CorrectionAcceptedResponse(food_id=body.food_id)
