# exceptions/
# ├── base.py                    # app-level errors (RepositoryError, NotFoundError, DuplicateError, ...)
# ├── integrity_classifier.py    # classify a DB IntegrityError by constraint kind
# └── mapper.py                  # turn a classified IntegrityError into an app-level error

from .base import (
    RepositoryError,
    NotFoundError,
    DuplicateError,
    InvalidFieldError,
    error_body,
)

__all__ = [
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "InvalidFieldError",
    "error_body",
]
