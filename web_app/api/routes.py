"""API routes implementation."""

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request, status

from lib.errors import (
    DuplicateCodeError,
    ExhaustedRetriesError,
    NotFoundError,
    ValidationError,
)
from .schemas import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    ShortenRequest,
    URLResponse,
)
from ..rate_limit import limiter, api_rate_limit

router = APIRouter()


@router.post(
    "/shorten",
    response_model=URLResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or custom code"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
        429: {"description": "Rate limit exceeded"},
        503: {"model": ErrorResponse, "description": "Could not allocate a short code"},
    },
    summary="Create short URL",
    description="Create a shortened URL. Optionally provide a custom short code.",
)
@limiter.limit(api_rate_limit)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    try:
        record = await service.create_short_url(
            original_url=body.url,
            custom_code=body.custom_code,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DuplicateCodeError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{e}. Please choose a different one.",
        )
    except ExhaustedRetriesError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not allocate a short code, please retry",
        )

    return URLResponse.model_validate(record)


@router.get(
    "/urls",
    response_model=List[URLResponse],
    summary="List short URLs",
    description="List shortened URLs, newest first.",
)
@limiter.limit(api_rate_limit)
async def list_urls(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum number of URLs to return"),
):
    """List shortened URLs."""
    service = request.app.state.service
    config = request.app.state.config

    records = await service.list_urls(limit or config.list_limit)
    return [URLResponse.model_validate(record) for record in records]


@router.get(
    "/stats/{short_code}",
    response_model=URLResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get URL statistics",
    description="Get a shortened URL with its click count and last access time.",
)
@limiter.limit(api_rate_limit)
async def get_url_stats(request: Request, short_code: str):
    """Get statistics for a shortened URL."""
    service = request.app.state.service

    try:
        record = await service.get_url_info(short_code)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found",
        )

    return URLResponse.model_validate(record)


@router.delete(
    "/urls/{short_code}",
    response_model=MessageResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Delete short URL",
)
@limiter.limit(api_rate_limit)
async def delete_url(request: Request, short_code: str):
    """Delete a shortened URL."""
    service = request.app.state.service

    deleted = await service.delete_short_url(short_code)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found",
        )

    return MessageResponse(message="URL deleted successfully")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
