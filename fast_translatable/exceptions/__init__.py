"""Custom exceptions for fast-translatable."""

from .common_exceptions import (
    AppException,
    DatabaseNotInitializedException,
    EnvMissingException,
)
from .model_exceptions import (
    ModelException,
    ModelNotFoundException,
)
from .translatable_exceptions import (
    TranslatableError,
    ConfigurationError,
    UnknownLocaleError,
    TranslationNotFoundError,
    PersistenceError,
    TranslationSaveError,
)


__all__ = [
    # common
    "AppException",
    "DatabaseNotInitializedException",
    "EnvMissingException",
    # model
    "ModelException",
    "ModelNotFoundException",
    # translatable
    "TranslatableError",
    "ConfigurationError",
    "UnknownLocaleError",
    "TranslationNotFoundError",
    "PersistenceError",
    "TranslationSaveError",
]
