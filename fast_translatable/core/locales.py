"""
Locale catalogue built from the translatable configuration.

The configuration lists locales either flat (`["en", "de"]`), grouped by language
(`{"en": [], "es": ["MX", "CO"]}`) or as a list mixing both
(`["en", {"es": ["MX", "CO"]}]`). Grouped regions become region-qualified codes
(`es-MX`) whose parent is the language code (`es`).
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Sequence

from fast_translatable.exceptions import ConfigurationError, UnknownLocaleError

DEFAULT_SEPARATOR = '-'


@dataclass(frozen=True)
class LocaleCatalogue:
    codes: tuple[str, ...]
    parents: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    separator: str = DEFAULT_SEPARATOR

    @classmethod
    def build(cls, locales: Sequence[Any] | Mapping[str, Any], separator: str = DEFAULT_SEPARATOR) -> 'LocaleCatalogue':
        if not isinstance(separator, str) or len(separator) != 1:
            raise ConfigurationError(f"Locale separator must be a single character, got {separator!r}")
        if not locales:
            raise ConfigurationError("No locales defined")

        codes: list[str] = []
        parents: dict[str, str] = {}

        def register(code: Any, parent: Optional[str] = None) -> None:
            if not isinstance(code, str) or not code.strip():
                raise ConfigurationError(f"Invalid locale code {code!r}")
            if code in codes:
                raise ConfigurationError(f"Locale '{code}' is registered twice")
            codes.append(code)
            if parent is not None:
                parents[code] = parent

        def register_group(language: Any, regions: Any) -> None:
            register(language)
            if isinstance(regions, str) or not isinstance(regions, Sequence):
                raise ConfigurationError(f"Regions of '{language}' must be a list")
            for region in regions:
                if not isinstance(region, str) or not region.strip():
                    raise ConfigurationError(f"Empty region for locale '{language}'")
                register(f"{language}{separator}{region}", parent=language)

        entries = locales.items() if isinstance(locales, Mapping) else [(None, entry) for entry in locales]
        for language, entry in entries:
            if language is not None:
                register_group(language, entry or [])
            elif isinstance(entry, Mapping):
                for group_language, regions in entry.items():
                    register_group(group_language, regions or [])
            elif isinstance(entry, str) and separator in entry:
                register(entry, parent=entry.split(separator, 1)[0])
            else:
                register(entry)

        for code, parent in parents.items():
            if parent not in codes:
                raise ConfigurationError(f"Locale '{code}' needs its language '{parent}' to be registered")

        logging.debug(f"Locale catalogue built: {', '.join(codes)}")
        return cls(codes=tuple(codes), parents=MappingProxyType(parents), separator=separator)

    def all(self) -> list[str]:
        return list(self.codes)

    def __contains__(self, locale: object) -> bool:
        return locale in self.codes

    def __iter__(self) -> Iterator[str]:
        return iter(self.codes)

    def __len__(self) -> int:
        return len(self.codes)

    def require(self, locale: str) -> str:
        if locale not in self.codes:
            raise UnknownLocaleError(locale)
        return locale

    def is_region_qualified(self, locale: str) -> bool:
        return self.separator in locale

    def parent_of(self, locale: str) -> Optional[str]:
        """
        Language code a region-qualified locale degrades to.

        Free-form codes that are not registered still degrade by splitting on the separator.
        """
        if locale in self.parents:
            return self.parents[locale]
        if self.is_region_qualified(locale):
            language = locale.split(self.separator, 1)[0]
            return language or None
        return None

    def country_locale(self, language: str, region: str) -> str:
        return f"{language}{self.separator}{region}"
