"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   ├── ValidationError          → 400
    │   ├── NotFoundError            → 404
    │   └── ConflictError            → 409
    ├── ApplicationError         (application.py)
    │   └── UnsupportedMediaTypeError → 415
    └── InfrastructureError      (infrastructure.py)
        └── StoreUnavailableError    → 500
"""

from togglehouse.kernel.errors.application import (
    ApplicationError,
    UnsupportedMediaTypeError,
)
from togglehouse.kernel.errors.base import BaseError
from togglehouse.kernel.errors.domain import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from togglehouse.kernel.errors.infrastructure import (
    InfrastructureError,
    StoreUnavailableError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "StoreUnavailableError",
    "UnsupportedMediaTypeError",
    "ValidationError",
]
