"""
Business logic services.

Each service handles one domain area.
"""

from services.sample_mapping_service import (
    SampleMappingService,
    get_sample_mapping_service,
)

__all__ = [
    "SampleMappingService",
    "get_sample_mapping_service",
]
