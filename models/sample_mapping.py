"""
Sample mapping models.

A mapping links a segment-specific item id and the CLM segments it is
valid under to the canonical sample item id it resolves to.
"""

from pydantic import ConfigDict, Field

from models.base import BaseSchema


class ExactIdSchema(BaseSchema):
    """Ids and segment tags are stored and matched exactly as sent."""
    model_config = ConfigDict(str_strip_whitespace=False)


class SampleMapping(ExactIdSchema):
    """Stored mapping row. (item_id, sample_item_id) is the primary key."""

    item_id: str = Field(..., min_length=1, description="Segment-specific item id")
    sample_item_id: str = Field(..., min_length=1, description="Canonical sample item id")
    clm_segments: list[str] = Field(..., min_length=1, description="CLM segment tags")

    def to_row(self) -> dict:
        """Convert to the column dict used for inserts."""
        return {
            "item_id": self.item_id,
            "sample_item_id": self.sample_item_id,
            "clm_segments": list(self.clm_segments),
        }


# ===================
# REQUESTS
# ===================
# Fields default to empty so missing values reach the service and are
# reported as invalid arguments rather than schema errors. Blank values
# are rejected there too.

class RegisterMappingRequest(ExactIdSchema):
    """Register a new mapping."""

    item_id: str = Field("", description="Segment-specific item id")
    sample_item_id: str = Field("", description="Canonical sample item id")
    clm_segments: list[str] = Field(default_factory=list, description="CLM segment tags")


class ResolveSampleItemIdRequest(ExactIdSchema):
    """Resolve the sample item id for an item within some segments."""

    item_id: str = Field("", description="Segment-specific item id")
    clm_segments: list[str] = Field(default_factory=list, description="Segments to match against")


# ===================
# RESPONSES
# ===================

class RegisterMappingResponse(BaseSchema):
    """Outcome of a registration."""

    success: bool
    message: str


class ResolveSampleItemIdResponse(ExactIdSchema):
    """Resolved canonical sample item id."""

    sample_item_id: str
