"""Custom exception hierarchy for stagesearch.

Each exception includes an error code, the location it was raised from,
an optional cause and free-form context. Import from this package directly:

    from stagesearch.core.domain.exceptions import StageSearchError, IndexNotFoundError
"""

# Base classes
from .base import ErrorLocation, StageSearchError

# Access exceptions
from .access import PermissionDeniedError

# Configuration exceptions
from .configuration import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingSchemaError,
    UnmappableTypeError,
)

# Document store exceptions
from .document_store import (
    DocumentStoreError,
    IndexNotFoundError,
    StoreConnectionError,
    StoreQueryError,
)

# Indexing exceptions
from .indexing import (
    BatchIndexingError,
    IndexingError,
    RecordIndexingError,
)

# Validation exceptions
from .validation import (
    InvalidReferenceError,
    MalformedIdentifierError,
    ValidationError,
)

__all__ = [
    # Base
    "ErrorLocation",
    "StageSearchError",
    # Access
    "PermissionDeniedError",
    # Configuration
    "ConfigurationError",
    "UnmappableTypeError",
    "MissingSchemaError",
    "InvalidConfigurationError",
    # Document store
    "DocumentStoreError",
    "StoreConnectionError",
    "StoreQueryError",
    "IndexNotFoundError",
    # Indexing
    "IndexingError",
    "RecordIndexingError",
    "BatchIndexingError",
    # Validation
    "ValidationError",
    "MalformedIdentifierError",
    "InvalidReferenceError",
]
