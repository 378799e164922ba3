"""
Error classification for the stock-data access layer.

Data quality errors describe documents that are missing or fail validation;
system failures describe the document store collaborator misbehaving.
"""

from .data_quality import (
    DataQualityError,
    NotFoundError,
    InvalidDataError,
)
from .system_failures import (
    StoreError,
    MissingIndexError,
    QueryCapabilityError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "NotFoundError",
    "InvalidDataError",
    # Store Failures
    "StoreError",
    "MissingIndexError",
    "QueryCapabilityError",
]
