"""Feedback collection endpoints: public creation and admin management."""

import time

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from feedback_hub.api.dependencies import get_feedback_service, require_admin
from feedback_hub.api.models import (
    CreateFeedbackCollectionRequest,
    ErrorResponse,
    FeedbackCollectionDetail,
    FeedbackCollectionItem,
    FeedbackCollectionListResponse,
    UpdateFeedbackCollectionRequest,
)
from feedback_hub.api.rate_limit import admin_limit, default_limit, limiter
from feedback_hub.common.exceptions import CollectionNotFoundError
from feedback_hub.feedback.schemas import CollectionUpdate, NewCollectionData
from feedback_hub.feedback.service import FeedbackCollectionService

logger = structlog.get_logger(__name__)
router = APIRouter()

_ADMIN_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Missing or invalid admin token"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Server error"},
}


@router.post(
    "/feedbacks",
    response_model=FeedbackCollectionDetail,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid body or name/key already taken"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="Create a feedback collection",
    description=(
        "Create a collection with a unique name and key. The response carries "
        "the collection's API key; no other endpoint returns it."
    ),
)
@limiter.limit(default_limit)
async def create_feedback_collection(
    request: Request,
    body: CreateFeedbackCollectionRequest,
    service: FeedbackCollectionService = Depends(get_feedback_service),
) -> FeedbackCollectionDetail:
    start_time = time.perf_counter()

    created = await service.create(
        NewCollectionData(
            name=body.name,
            key=body.key,
            description=body.description,
            scale=body.scale.to_domain(),
            metadata=body.metadata,
        )
    )

    latency_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "Feedback collection created",
        collection_id=str(created.id),
        key=created.key,
        scale_type=created.scale.type.value,
        latency_ms=round(latency_ms, 2),
    )

    return FeedbackCollectionDetail.from_collection(created)


@router.get(
    "/feedbacks",
    response_model=FeedbackCollectionListResponse,
    responses=_ADMIN_RESPONSES,
    summary="List feedback collections",
    description="Paginated list of collections ordered by name. Admin only.",
    dependencies=[Depends(require_admin)],
)
@limiter.limit(admin_limit)
async def list_feedback_collections(
    request: Request,
    search: str | None = Query(
        default=None,
        max_length=100,
        description="Case-insensitive substring match on name or key",
    ),
    limit: int | None = Query(default=None, ge=1, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    service: FeedbackCollectionService = Depends(get_feedback_service),
) -> FeedbackCollectionListResponse:
    collections, total = await service.list_collections(
        search=search, limit=limit, offset=offset
    )

    return FeedbackCollectionListResponse(
        items=[FeedbackCollectionItem.from_collection(c) for c in collections],
        total=total,
        has_more=offset + len(collections) < total,
    )


@router.get(
    "/feedbacks/{key}",
    response_model=FeedbackCollectionItem,
    responses={
        **_ADMIN_RESPONSES,
        404: {"model": ErrorResponse, "description": "Collection not found"},
    },
    summary="Get a feedback collection",
    description="Fetch one collection by key. The API key is not included. Admin only.",
    dependencies=[Depends(require_admin)],
)
@limiter.limit(admin_limit)
async def get_feedback_collection(
    request: Request,
    key: str,
    service: FeedbackCollectionService = Depends(get_feedback_service),
) -> FeedbackCollectionItem:
    collection = await service.get_by_key(key)
    if collection is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(CollectionNotFoundError(key)),
        )

    return FeedbackCollectionItem.from_collection(collection)


@router.patch(
    "/feedbacks/{key}",
    response_model=FeedbackCollectionItem,
    responses={
        **_ADMIN_RESPONSES,
        400: {"model": ErrorResponse, "description": "Invalid body or name/key already taken"},
        404: {"model": ErrorResponse, "description": "Collection not found"},
    },
    summary="Update a feedback collection",
    description=(
        "Partially update a collection. Omitted fields are unchanged; the API "
        "key is never regenerated. Admin only."
    ),
    dependencies=[Depends(require_admin)],
)
@limiter.limit(admin_limit)
async def update_feedback_collection(
    request: Request,
    key: str,
    body: UpdateFeedbackCollectionRequest,
    service: FeedbackCollectionService = Depends(get_feedback_service),
) -> FeedbackCollectionItem:
    update = CollectionUpdate(
        name=body.name,
        key=body.key,
        description=body.description,
        scale=body.scale.to_domain() if body.scale is not None else None,
        metadata=body.metadata,
    )

    try:
        updated = await service.update(key, update)
    except CollectionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    logger.info(
        "Feedback collection updated",
        collection_id=str(updated.id),
        key=updated.key,
    )

    return FeedbackCollectionItem.from_collection(updated)
