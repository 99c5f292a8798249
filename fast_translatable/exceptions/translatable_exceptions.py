"""Errors raised by the translation engine."""

from typing import Optional, Sequence

from fast_translatable.exceptions.common_exceptions import AppException
from fast_translatable.exceptions.model_exceptions import ModelNotFoundException


class TranslatableError(AppException):
    """Base exception for translation engine errors."""


class ConfigurationError(TranslatableError):
    """The locale configuration cannot be turned into a catalogue."""

    def __init__(self, message: str) -> None:
        super().__init__(f"[TRANSLATABLE CONFIG] {message}")


class UnknownLocaleError(TranslatableError):
    def __init__(self, locale: str) -> None:
        super().__init__(f"Locale '{locale}' is not registered", data={"locale": locale})
        self.locale = locale


class TranslationNotFoundError(ModelNotFoundException):
    def __init__(self, model_name: str, locale: str) -> None:
        super().__init__(f"{model_name} translation ({locale})", data={"locale": locale})
        self.locale = locale


class PersistenceError(TranslatableError):
    """A translation adapter could not load, write or delete a row."""


class TranslationSaveError(PersistenceError):
    """
    A dirty translation failed to flush while saving its owner.

    `record_saved` tells whether the owner's own fields were already committed,
    `saved_locales` lists the bundles flushed before the failure.
    """

    def __init__(
        self,
        locale: str,
        *,
        record_saved: bool,
        saved_locales: Optional[Sequence[str]] = None,
    ) -> None:
        self.locale = locale
        self.record_saved = record_saved
        self.saved_locales = list(saved_locales or [])
        super().__init__(
            f"Failed to save translation '{locale}'",
            data={
                "locale": locale,
                "record_saved": record_saved,
                "saved_locales": self.saved_locales,
            },
        )
