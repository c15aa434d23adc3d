"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    DatabaseError,

    # Sample mappings
    InvalidArgumentError,
    MappingNotFoundError,
    MappingFetchError,
    MappingRegistrationError,
    SchemaBootstrapError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "DatabaseError",

    # Sample mappings
    "InvalidArgumentError",
    "MappingNotFoundError",
    "MappingFetchError",
    "MappingRegistrationError",
    "SchemaBootstrapError",
]
