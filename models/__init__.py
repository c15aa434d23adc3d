"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.sample_mapping import (
    SampleMapping,
    RegisterMappingRequest,
    RegisterMappingResponse,
    ResolveSampleItemIdRequest,
    ResolveSampleItemIdResponse,
)

__all__ = [
    "BaseSchema",
    "SampleMapping",
    "RegisterMappingRequest",
    "RegisterMappingResponse",
    "ResolveSampleItemIdRequest",
    "ResolveSampleItemIdResponse",
]
