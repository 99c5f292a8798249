"""
Per-locale attributes for models.

A translatable model keeps its translated fields in rows of a separate
translation model, one row per locale, and exposes them as plain attributes:

    class ArticleTranslation(Translation):
        article_id: Optional[ObjectId] = None
        title: Optional[str] = None

    class Article(Translatable, Model):
        translation_options = TranslationOptions(translated_attributes=("title",))
        slug: Optional[str] = None

    article = Article(slug="greece", title="Greece")    # title in the current locale
    article["title:fr"] = "Grèce"                       # explicit locale
    await article.save()                                # article row, then both bundles

    article = await Article.find_by_id(article_id)      # bundles are loaded eagerly
    with using_locale("fr"):
        article.title                                   # "Grèce"

Lookups follow the fallback chain `[requested, language of requested, fallback locale]`
when fallback is enabled. Reads through attributes only consult loaded bundles; the
async API (`translate`, `get_attribute`, ...) loads from the store on demand.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Mapping, Optional, Self

from fast_translatable.config import TranslatableConfig, get_config
from fast_translatable.contracts.translation import Translation
from fast_translatable.contracts.translation_adapter import TranslationAdapter
from fast_translatable.core.fallback import FallbackChainBuilder
from fast_translatable.core.locales import LocaleCatalogue
from fast_translatable.core.localization import get_locale
from fast_translatable.core.translation_cache import TranslationCache
from fast_translatable.core.translation_predicates import (
    FieldCompares,
    FieldMatches,
    LocaleIs,
    TranslationPredicate,
)
from fast_translatable.exceptions import TranslationNotFoundError, TranslationSaveError
from fast_translatable.utils.model_resolver import resolve_translation_model
from fast_translatable.utils.serialisation import pascal_case_to_snake_case, serialise

LOCALE_KEY_SEPARATOR = ':'


@dataclass(frozen=True, eq=False)
class TranslationOptions:
    """
    Translation settings of a model. Unset values defer to the global configuration.

    `translation_model` is a Translation subclass, its name, or None for
    `<Model><translation_suffix>`. `adapter` is an adapter instance, a built-in
    adapter name (`mongo`, `memory`), an adapter class, or None for `mongo`.
    """
    translated_attributes: tuple[str, ...] = ()
    translation_model: type[Translation] | str | None = None
    default_locale: Optional[str] = None
    use_fallback: Optional[bool] = None
    use_property_fallback: Optional[bool] = None
    fallback_locale: Optional[str] = None
    translation_foreign_key: Optional[str] = None
    locale_key: Optional[str] = None
    adapter: TranslationAdapter | str | type | None = None
    config: Optional[TranslatableConfig] = field(default=None, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'translated_attributes', tuple(self.translated_attributes))


_adapters: dict[tuple[type, TranslationOptions], TranslationAdapter] = {}


def _is_empty(value: Any) -> bool:
    return value is None or value == ''


class Translatable:
    """Mixin for `Model` subclasses; must come before `Model` in the bases."""

    translation_options: ClassVar[TranslationOptions] = TranslationOptions()

    def __init__(self, *args, translation_options: Optional[TranslationOptions] = None, **kwargs):
        object.__setattr__(self, '_translation_options', translation_options or type(self).translation_options)
        object.__setattr__(self, '_default_locale', None)
        object.__setattr__(self, '_translation_cache', None)

        translation_data = {key: kwargs.pop(key) for key in list(kwargs) if self._is_translation_key(key, kwargs[key])}
        super().__init__(*args, **kwargs)
        if translation_data:
            self.fill(translation_data)

    #
    # Settings
    #
    @property
    def translatable_options(self) -> TranslationOptions:
        return self._translation_options

    def translatable_config(self) -> TranslatableConfig:
        return self.translatable_options.config or get_config()

    def catalogue(self) -> LocaleCatalogue:
        return self.translatable_config().catalogue

    @classmethod
    def translated_attribute_names(cls) -> tuple[str, ...]:
        return cls.translation_options.translated_attributes

    def is_translation_attribute(self, key: str) -> bool:
        return key in self.translatable_options.translated_attributes

    def set_default_locale(self, locale: Optional[str]) -> Self:
        object.__setattr__(self, '_default_locale', locale)
        return self

    def get_default_locale(self) -> Optional[str]:
        return self._default_locale

    def current_locale(self) -> str:
        # Read on every call: the active locale may change between two lookups
        return (
            self._default_locale
            or self.translatable_options.default_locale
            or self.translatable_config().locale
            or get_locale()
        )

    def use_fallback(self) -> bool:
        if self.translatable_options.use_fallback is not None:
            return self.translatable_options.use_fallback
        return self.translatable_config().use_fallback

    def use_property_fallback(self) -> bool:
        if not self.use_fallback():
            return False
        if self.translatable_options.use_property_fallback is not None:
            return self.translatable_options.use_property_fallback
        return self.translatable_config().use_property_fallback

    def fallback_locale(self) -> Optional[str]:
        return self.translatable_options.fallback_locale or self.translatable_config().fallback_locale

    def locale_key(self) -> str:
        return self.translatable_options.locale_key or self.translatable_config().locale_key

    @classmethod
    def _binding(cls, options: TranslationOptions) -> tuple[type[Translation], str, str]:
        config = options.config or get_config()
        model = resolve_translation_model(options.translation_model, owner=cls, suffix=config.translation_suffix)
        foreign_key = options.translation_foreign_key or f"{pascal_case_to_snake_case(cls)}_id"
        return model, foreign_key, options.locale_key or config.locale_key

    @classmethod
    def translation_adapter(cls, options: Optional[TranslationOptions] = None) -> TranslationAdapter:
        options = options or cls.translation_options
        if isinstance(options.adapter, TranslationAdapter):
            return options.adapter

        adapter = _adapters.get((cls, options))
        if adapter is None:
            from fast_translatable.core.translation_adapters import get_builtin_translation_adapters

            adapter_cls = options.adapter or "mongo"
            if isinstance(adapter_cls, str):
                adapter_cls = get_builtin_translation_adapters()[adapter_cls]
            model, foreign_key, locale_key = cls._binding(options)
            adapter = adapter_cls(model, foreign_key=foreign_key, locale_key=locale_key)
            _adapters[(cls, options)] = adapter
        return adapter

    @property
    def translations(self) -> TranslationCache:
        if self._translation_cache is None:
            cache = TranslationCache(
                type(self).translation_adapter(self.translatable_options),
                owner_id=lambda: self._id,
                new_translation=self._make_translation,
            )
            object.__setattr__(self, '_translation_cache', cache)
        return self._translation_cache

    def _make_translation(self, locale: str) -> Translation:
        adapter = self.translations.adapter
        return adapter.translation_model(**{adapter.foreign_key: self._id, adapter.locale_key: locale})

    def _chain(self, locale: str, with_fallback: bool) -> tuple[str, ...]:
        return FallbackChainBuilder(self.catalogue()).build(
            locale,
            fallback_locale=self.fallback_locale(),
            use_fallback=with_fallback,
        )

    #
    # Whole-bundle resolution
    #
    async def get_translation(self, locale: Optional[str] = None, with_fallback: Optional[bool] = None) -> Optional[Translation]:
        locale = locale or self.current_locale()
        with_fallback = self.use_fallback() if with_fallback is None else with_fallback

        for candidate in self._chain(locale, with_fallback):
            translation = await self.translations.get(candidate)
            if translation is not None:
                return translation
        return None

    async def translate(self, locale: Optional[str] = None, with_fallback: bool = False) -> Optional[Translation]:
        return await self.get_translation(locale, with_fallback)

    async def translate_or_default(self, locale: Optional[str] = None) -> Optional[Translation]:
        return await self.get_translation(locale, True)

    async def translate_or_new(self, locale: Optional[str] = None) -> Translation:
        # Only the requested locale is ever created; fallbacks are never reached
        return await self.translations.get_or_new(locale or self.current_locale())

    async def translate_or_fail(self, locale: str) -> Translation:
        translation = await self.get_translation(locale, False)
        if translation is None:
            raise TranslationNotFoundError(type(self).__name__, locale)
        return translation

    def get_new_translation(self, locale: Optional[str] = None) -> Translation:
        """Cached bundle for `locale` or a new unsaved one, without touching the store."""
        return self.translations.new(locale or self.current_locale())

    async def has_translation(self, locale: Optional[str] = None) -> bool:
        return await self.translations.get(locale or self.current_locale()) is not None

    async def load_translations(self) -> Self:
        await self.translations.all()
        return self

    #
    # Field-level resolution
    #
    async def get_attribute(self, attribute: str, locale: Optional[str] = None) -> Any:
        chain = self._chain(locale or self.current_locale(), self.use_fallback())

        for index, candidate in enumerate(chain):
            translation = await self.translations.get(candidate)
            if translation is None:
                continue
            value = getattr(translation, attribute, None)
            if _is_empty(value) and self.use_property_fallback():
                for later in chain[index + 1:]:
                    other = await self.translations.get(later)
                    if other is not None and not _is_empty(getattr(other, attribute, None)):
                        return getattr(other, attribute)
            return value
        return None

    def _cached_attribute(self, attribute: str, locale: Optional[str] = None) -> Any:
        chain = self._chain(locale or self.current_locale(), self.use_fallback())

        for index, candidate in enumerate(chain):
            translation = self.translations.peek(candidate)
            if translation is None:
                continue
            value = getattr(translation, attribute, None)
            if _is_empty(value) and self.use_property_fallback():
                for later in chain[index + 1:]:
                    other = self.translations.peek(later)
                    if other is not None and not _is_empty(getattr(other, attribute, None)):
                        return getattr(other, attribute)
            return value
        return None

    #
    # Write routing
    #
    def _write(self, locale: str, attribute: str, value: Any) -> None:
        # Writes never fall back: the bundle of exactly this locale is created or updated
        self.get_new_translation(locale).set(attribute, value)

    async def set_translation(self, attribute: str, value: Any, locale: Optional[str] = None) -> Translation:
        """Write through the store: the stored bundle is loaded first when not cached."""
        translation = await self.translate_or_new(locale)
        translation.set(attribute, value)
        return translation

    @staticmethod
    def _split_key(key: str) -> tuple[str, Optional[str]]:
        if LOCALE_KEY_SEPARATOR in key:
            attribute, locale = key.split(LOCALE_KEY_SEPARATOR, 1)
            return attribute, locale or None
        return key, None

    def _is_locale_key(self, key: str) -> bool:
        return key in self.catalogue()

    def _is_translation_key(self, key: str, value: Any) -> bool:
        if isinstance(value, Mapping) and self._is_locale_key(key):
            return True
        return self.is_translation_attribute(self._split_key(key)[0])

    def fill(self, data: Mapping[str, Any]) -> Self:
        """
        Assign many attributes at once.

        Accepts locale-keyed mappings (`{"en": {"title": ...}}`), `field:locale` keys,
        bare translated fields (current locale) and plain model attributes, in any mix.
        Later writes to the same locale and field win.
        """
        for key, value in data.items():
            if isinstance(value, Mapping) and self._is_locale_key(key):
                for attribute, attribute_value in value.items():
                    if self.is_translation_attribute(attribute):
                        self._write(key, attribute, attribute_value)
                    else:
                        logging.warning(f"Ignoring '{attribute}' for locale '{key}': not a translated attribute of {type(self).__name__}")
                continue

            attribute, locale = self._split_key(key)
            if self.is_translation_attribute(attribute):
                self._write(locale or self.current_locale(), attribute, value)
                continue

            if LOCALE_KEY_SEPARATOR in key:
                logging.warning(f"'{key}' is not a translated attribute of {type(self).__name__}; assigned as a plain attribute")
            setattr(self, key, value)
        return self

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        attribute, locale = self._split_key(name)
        if self.is_translation_attribute(attribute):
            return self._cached_attribute(attribute, locale)
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if not name.startswith('_'):
            attribute, locale = self._split_key(name)
            if self.is_translation_attribute(attribute):
                self._write(locale or self.current_locale(), attribute, value)
                return
        super().__setattr__(name, value)

    def __getitem__(self, key: str) -> Any:
        return getattr(self, key)

    def __setitem__(self, key: str, value: Any) -> None:
        setattr(self, key, value)

    #
    # Persistence
    #
    async def save(self) -> Self:
        await super().save()
        await self.save_translations()
        return self

    async def save_translations(self) -> bool:
        """Flush every bundle with changed translated fields. Returns True if anything was written."""
        adapter = self.translations.adapter
        saved: list[str] = []

        for translation in self.translations:
            fields = [name for name in self.translatable_options.translated_attributes if translation.is_dirty(name)]
            if not fields:
                continue

            locale = getattr(translation, adapter.locale_key)
            if getattr(translation, adapter.foreign_key, None) != self._id:
                setattr(translation, adapter.foreign_key, self._id)
            try:
                if translation.exists:
                    await adapter.update(translation, fields)
                else:
                    await adapter.insert(translation, fields)
            except Exception as exc:
                logging.error(f"Saving {translation!r} of {type(self).__name__} {self._id} failed: {exc}")
                raise TranslationSaveError(locale, record_saved=self._id is not None, saved_locales=saved) from exc
            saved.append(locale)

        if saved:
            logging.debug(f"Saved translations {saved} of {type(self).__name__} {self._id}")
            await self._notify_observer('on_translations_saved')
        return bool(saved)

    async def delete_translations(self, locales: str | Iterable[str] | None = None) -> None:
        """Delete the bundles of `locales`, or every bundle when omitted."""
        adapter = self.translations.adapter

        if locales is None:
            if self._id is not None:
                await adapter.delete_all(self._id)
            self.translations.invalidate()
            logging.info(f"Deleted all translations of {type(self).__name__} {self._id}")
            return

        for locale in [locales] if isinstance(locales, str) else list(locales):
            if self._id is not None:
                await adapter.delete(self._id, locale)
            self.translations.invalidate(locale)
            logging.info(f"Deleted translation '{locale}' of {type(self).__name__} {self._id}")

    async def delete(self) -> None:
        # Bundles go first so a failure never leaves orphaned rows behind a deleted owner
        await self.delete_translations()
        await super().delete()

    #
    # Export & copies
    #
    async def get_translations_array(self) -> dict[str, dict[str, Any]]:
        result: dict[str, dict[str, Any]] = {}
        for translation in await self.translations.all():
            values = translation.values(self.translatable_options.translated_attributes)
            if any(not _is_empty(value) for value in values.values()):
                result[getattr(translation, self.locale_key())] = values
        return result

    def replicate(self, except_: Optional[Iterable[str]] = None) -> Self:
        """Unsaved copy carrying deep copies of the cached bundles as new bundles."""
        clone = super().replicate(except_)
        object.__setattr__(clone, '_translation_options', self.translatable_options)
        object.__setattr__(clone, '_default_locale', self._default_locale)

        for translation in self.translations:
            copied = clone.get_new_translation(getattr(translation, self.locale_key()))
            for name, value in translation.values(self.translatable_options.translated_attributes).items():
                if value is not None:
                    copied.set(name, copy.deepcopy(value))
        return clone

    async def replicate_with_translations(self, except_: Optional[Iterable[str]] = None) -> Self:
        await self.load_translations()
        return self.replicate(except_)

    async def to_array(self) -> dict[str, Any]:
        if self.translatable_config().to_array_always_loads_translations:
            await self.load_translations()
        return self.dict()

    #
    # Eager loading
    #
    @classmethod
    async def load_translations_for(cls, instances: list[Self]) -> list[Self]:
        """Load the bundles of many records with one query per adapter."""
        pending: dict[int, list[Self]] = {}
        for instance in instances:
            if instance._id is not None and not instance.translations.is_complete:
                pending.setdefault(id(instance.translations.adapter), []).append(instance)

        for group in pending.values():
            adapter = group[0].translations.adapter
            grouped = await adapter.load_many([instance._id for instance in group])
            for instance in group:
                instance.translations.complete_with(grouped.get(instance._id, []))
        return instances

    @classmethod
    async def find(cls, query: dict[str, Any], **kwargs) -> list[Self]:
        instances = await super().find(query, **kwargs)
        return await cls.load_translations_for(instances)

    @classmethod
    async def find_one(cls, query: dict[str, Any], **kwargs) -> Optional[Self]:
        instance = await super().find_one(query, **kwargs)
        if instance is not None:
            await cls.load_translations_for([instance])
        return instance

    #
    # Scopes: filter on one locale's stored rows, without fallback
    #
    @classmethod
    def _class_locale(cls) -> str:
        options = cls.translation_options
        return options.default_locale or (options.config or get_config()).locale or get_locale()

    @classmethod
    async def _owner_filter(cls, predicate: TranslationPredicate, *, negate: bool = False) -> dict[str, Any]:
        owner_ids = await cls.translation_adapter().owner_ids(predicate)
        return {'_id': {'$nin' if negate else '$in': owner_ids}}

    @classmethod
    def scope_translated_in(cls, query: dict, locale: Optional[str] = None):
        return cls._owner_filter(LocaleIs(locale or cls._class_locale()))

    @classmethod
    def scope_not_translated_in(cls, query: dict, locale: Optional[str] = None):
        return cls._owner_filter(LocaleIs(locale or cls._class_locale()), negate=True)

    @classmethod
    def scope_where_translation(cls, query: dict, attribute: str, value: Any, locale: Optional[str] = None, operator: str = '='):
        predicate: TranslationPredicate = FieldCompares(attribute, operator, value)
        if locale is not None:
            predicate = LocaleIs(locale) & predicate
        return cls._owner_filter(predicate)

    @classmethod
    def scope_where_translation_like(cls, query: dict, attribute: str, pattern: str, locale: Optional[str] = None):
        predicate: TranslationPredicate = FieldMatches(attribute, pattern)
        if locale is not None:
            predicate = LocaleIs(locale) & predicate
        return cls._owner_filter(predicate)

    #
    # Serialisation, kept last: `dict` shadows the builtin in the class body
    #
    def dict(self, *args, **kwargs):
        data = super().dict(*args, **kwargs)
        for attribute in self.translatable_options.translated_attributes:
            data[attribute] = serialise(self._cached_attribute(attribute))
        return data
