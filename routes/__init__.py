"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.sample_mappings import router as sample_mappings_router

__all__ = [
    "sample_mappings_router",
]
