"""
Sample mapping service.

Registers item/sample/segment mappings and resolves the sample item id
for an item id constrained by segment overlap.
"""

from typing import Optional
import structlog
from supabase import Client

from config import get_supabase_client, settings
from models.sample_mapping import (
    SampleMapping,
    RegisterMappingRequest,
    RegisterMappingResponse,
    ResolveSampleItemIdRequest,
    ResolveSampleItemIdResponse,
)
from exceptions import (
    InvalidArgumentError,
    MappingNotFoundError,
    MappingFetchError,
    MappingRegistrationError,
)

logger = structlog.get_logger(__name__)

MAPPING_ADDED_MESSAGE = "Mapping added successfully"
MAPPING_ADD_FAILED_MESSAGE = "Failed to add mapping to the database"


def _invalid_fields(
    clm_segments: list[str],
    item_id: str,
    **required: str
) -> list[str]:
    """Names of the fields that are empty or blank, in request order."""
    invalid = []
    if not clm_segments or any(not segment.strip() for segment in clm_segments):
        invalid.append("clm_segments")
    if not item_id.strip():
        invalid.append("item_id")
    invalid.extend(name for name, value in required.items() if not value.strip())
    return invalid


class SampleMappingService:
    """
    Sample mapping business logic.

    Holds the store client it was given (or the shared one) and issues
    exactly one storage call per operation.
    """

    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_supabase_client()
        self.table = settings.sample_mappings_table

    def register_mapping(self, request: RegisterMappingRequest) -> RegisterMappingResponse:
        """
        Register a new mapping.

        Args:
            request: Item id, sample item id and CLM segments

        Returns:
            RegisterMappingResponse with success=True

        Raises:
            InvalidArgumentError: If any field is empty (nothing is written)
            MappingRegistrationError: If the insert fails, duplicates included.
                Its `result` holds the success=False response.
        """
        invalid = _invalid_fields(
            request.clm_segments,
            request.item_id,
            sample_item_id=request.sample_item_id
        )
        if invalid:
            logger.warning("invalid_sample_mapping_request", operation="register", fields=invalid)
            raise InvalidArgumentError(invalid, received=request.model_dump())

        mapping = SampleMapping(
            item_id=request.item_id,
            sample_item_id=request.sample_item_id,
            clm_segments=request.clm_segments,
        )

        logger.info(
            "registering_sample_mapping",
            item_id=mapping.item_id,
            sample_item_id=mapping.sample_item_id,
            segments=len(mapping.clm_segments)
        )

        try:
            self.db.table(self.table).insert(mapping.to_row()).execute()
        except Exception as e:
            logger.error(
                "register_sample_mapping_failed",
                item_id=mapping.item_id,
                sample_item_id=mapping.sample_item_id,
                error=str(e),
                error_type=type(e).__name__
            )
            details = {"error_type": type(e).__name__}
            db_code = getattr(e, "code", None)
            if db_code:
                details["db_code"] = db_code
            raise MappingRegistrationError(
                result=RegisterMappingResponse(
                    success=False,
                    message=MAPPING_ADD_FAILED_MESSAGE
                ),
                message=str(e),
                details=details
            ) from e

        logger.info(
            "sample_mapping_registered",
            item_id=mapping.item_id,
            sample_item_id=mapping.sample_item_id
        )

        return RegisterMappingResponse(success=True, message=MAPPING_ADDED_MESSAGE)

    def resolve_sample_item_id(
        self,
        request: ResolveSampleItemIdRequest
    ) -> ResolveSampleItemIdResponse:
        """
        Resolve the sample item id for an item within the given segments.

        Matches rows with the same item_id whose clm_segments share at
        least one element with the requested segments. When several rows
        match, the lowest sample_item_id wins.

        Raises:
            InvalidArgumentError: If item_id or clm_segments is empty
            MappingNotFoundError: If no row matches
            MappingFetchError: If the query itself fails
        """
        invalid = _invalid_fields(request.clm_segments, request.item_id)
        if invalid:
            logger.warning("invalid_sample_mapping_request", operation="resolve", fields=invalid)
            raise InvalidArgumentError(invalid, received=request.model_dump())

        logger.debug(
            "resolving_sample_mapping",
            item_id=request.item_id,
            clm_segments=request.clm_segments
        )

        try:
            result = (
                self.db.table(self.table)
                .select("item_id, sample_item_id, clm_segments")
                .eq("item_id", request.item_id)
                .overlaps("clm_segments", request.clm_segments)
                .order("sample_item_id")
                .limit(1)
                .execute()
            )
            # Rows written outside this service may not validate
            mapping = SampleMapping(**result.data[0]) if result.data else None
        except Exception as e:
            logger.error(
                "resolve_sample_mapping_failed",
                item_id=request.item_id,
                error=str(e),
                error_type=type(e).__name__
            )
            raise MappingFetchError(
                str(e),
                details={"item_id": request.item_id, "error_type": type(e).__name__}
            ) from e

        if mapping is None:
            logger.info(
                "sample_mapping_not_found",
                item_id=request.item_id,
                clm_segments=request.clm_segments
            )
            raise MappingNotFoundError(request.item_id, request.clm_segments)

        logger.info(
            "sample_mapping_resolved",
            item_id=mapping.item_id,
            sample_item_id=mapping.sample_item_id
        )

        return ResolveSampleItemIdResponse(sample_item_id=mapping.sample_item_id)


# Singleton instance
_sample_mapping_service: Optional[SampleMappingService] = None


def get_sample_mapping_service() -> SampleMappingService:
    """Get or create SampleMappingService instance."""
    global _sample_mapping_service
    if _sample_mapping_service is None:
        _sample_mapping_service = SampleMappingService()
    return _sample_mapping_service
