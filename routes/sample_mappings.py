"""
Sample mapping API routes.

RPC-style endpoints:
    POST /api/sample-mappings          RegisterMapping
    POST /api/sample-mappings/resolve  ResolveSampleItemId
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.sample_mapping import (
    RegisterMappingRequest,
    RegisterMappingResponse,
    ResolveSampleItemIdRequest,
    ResolveSampleItemIdResponse,
)
from services.sample_mapping_service import get_sample_mapping_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/sample-mappings", tags=["Sample Mappings"])


def handle_error(e: AppError) -> JSONResponse:
    """Convert application error to JSON response."""
    return JSONResponse(
        status_code=e.status_code,
        content=e.to_dict()
    )


@router.post("", response_model=RegisterMappingResponse, status_code=201)
def register_mapping(data: RegisterMappingRequest):
    """
    Register a mapping from an item id and its CLM segments to a sample item id.

    Raises:
        400: Missing or empty fields
        500: Insert failed (body also carries success=false and message)
    """
    try:
        service = get_sample_mapping_service()
        return service.register_mapping(data)
    except AppError as e:
        return handle_error(e)


@router.post("/resolve", response_model=ResolveSampleItemIdResponse)
def resolve_sample_item_id(data: ResolveSampleItemIdRequest):
    """
    Resolve the sample item id for an item id within the given CLM segments.

    Raises:
        400: Missing or empty fields
        404: No mapping matches
        500: Query failed
    """
    try:
        service = get_sample_mapping_service()
        return service.resolve_sample_item_id(data)
    except AppError as e:
        return handle_error(e)
