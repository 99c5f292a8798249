"""Translation engine re-exported for convenient access."""

from .fallback import FallbackChainBuilder
from .locales import LocaleCatalogue
from .localization import *  # noqa: F401,F403
from .rule_factory import RuleFactory
from .translatable import Translatable, TranslationOptions
from .translation_adapters import MemoryTranslationAdapter, MongoTranslationAdapter
from .translation_cache import TranslationCache
from .translation_predicates import AllOf, FieldCompares, FieldMatches, LocaleIs, TranslationPredicate

__all__ = [
    "FallbackChainBuilder",
    "LocaleCatalogue",
    "set_locale",
    "get_locale",
    "using_locale",
    "reset_locale",
    "RuleFactory",
    "Translatable",
    "TranslationOptions",
    "MemoryTranslationAdapter",
    "MongoTranslationAdapter",
    "TranslationCache",
    "AllOf",
    "FieldCompares",
    "FieldMatches",
    "LocaleIs",
    "TranslationPredicate",
]
