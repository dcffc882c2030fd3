"""
Feature API routes.

- POST /api/features/request - Submit a feature request and run the generator
- GET /api/features/requests - Request history, newest first
- GET /api/features/requests/{id} - One request
- GET /api/features - Generated components from the feature registry
- GET /api/features/{id} - One generated component
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from evolvedash.api.deps import get_services
from evolvedash.core.discovery import GeneratedFeature
from evolvedash.core.errors import NotFoundError
from evolvedash.core.requests import FeatureRequest, FeatureRequestStatus
from evolvedash.core.services import Services, SubmitResult

router = APIRouter()


class FeatureRequestCreate(BaseModel):
    """
    Request body for POST /api/features/request.

    `description` is left untyped so a non-string value is rejected by the
    orchestrator with a 400 like any other invalid description.
    """

    description: Any = None


@router.post("/features/request", response_model=SubmitResult)
def submit_feature_request(
    body: FeatureRequestCreate,
    services: Services = Depends(get_services),
) -> SubmitResult:
    """
    Submit a natural-language feature request.

    Runs the generator synchronously (in the server's worker thread pool)
    and returns once the request is completed or failed. A generator failure
    is still a 200 response with `processing.success` false.

    Raises:
        ValidationError: 400 if the description is empty or too long
        StoreError: 500 if the spec document can't be updated

    Example response:
        {
          "featureRequest": {
            "id": "6f1c...",
            "description": "Add a clock panel",
            "status": "completed",
            "generatedComponents": ["ClockPanel.tsx"],
            ...
          },
          "processing": {
            "success": true,
            "message": "Generated 1 file(s)",
            "generatedFiles": ["ClockPanel.tsx"]
          }
        }
    """
    return services.orchestrator.submit(body.description)


@router.get("/features/requests", response_model=list[FeatureRequest])
def list_feature_requests(
    status: FeatureRequestStatus | None = Query(default=None, description="Filter by status"),
    limit: int = Query(default=100, ge=1, le=100, description="Maximum requests to return"),
    services: Services = Depends(get_services),
) -> list[FeatureRequest]:
    """List feature requests, newest first."""
    return services.request_log.list(status=status, limit=limit)


@router.get("/features/requests/{request_id}", response_model=FeatureRequest)
def get_feature_request(
    request_id: str,
    services: Services = Depends(get_services),
) -> FeatureRequest:
    """Get one feature request by id."""
    feature_request = services.request_log.get(request_id)
    if feature_request is None:
        raise NotFoundError("Feature request", request_id)
    return feature_request


@router.get("/features", response_model=list[GeneratedFeature])
def list_features(services: Services = Depends(get_services)) -> list[GeneratedFeature]:
    """List generated components, newest first."""
    return services.registry.all()


@router.get("/features/{feature_id}", response_model=GeneratedFeature)
def get_feature(
    feature_id: str,
    services: Services = Depends(get_services),
) -> GeneratedFeature:
    """Get one generated component by id."""
    return services.registry.lookup(feature_id)
