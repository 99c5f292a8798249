import logging
from typing import Any, Callable, Iterable, Iterator, Optional

from fast_translatable.contracts.translation import Translation
from fast_translatable.contracts.translation_adapter import TranslationAdapter


class TranslationCache:
    """
    Loaded and newly created bundles of one model instance, keyed by locale.

    At most one bundle object exists per locale for the lifetime of the cache,
    so a bundle mutated through one lookup is the bundle every later lookup sees.
    Nothing here is shared between model instances or persisted.
    """

    def __init__(
        self,
        adapter: TranslationAdapter,
        owner_id: Callable[[], Any],
        new_translation: Callable[[str], Translation],
    ):
        self.adapter = adapter
        self._owner_id = owner_id
        self._new_translation = new_translation
        self._bundles: dict[str, Translation] = {}
        # Set once every stored row has been loaded; a miss is then authoritative
        self._complete = False
        # Locales already looked up in the store one by one
        self._checked: set[str] = set()

    def __contains__(self, locale: object) -> bool:
        return locale in self._bundles

    def __iter__(self) -> Iterator[Translation]:
        return iter(list(self._bundles.values()))

    def __len__(self) -> int:
        return len(self._bundles)

    @property
    def is_complete(self) -> bool:
        return self._complete

    def locales(self) -> list[str]:
        return list(self._bundles.keys())

    def peek(self, locale: str) -> Optional[Translation]:
        """Cached bundle for `locale`, without touching the store."""
        return self._bundles.get(locale)

    def put(self, locale: str, translation: Translation) -> Translation:
        """
        Register a stored bundle. A cached bundle for the locale stays the bundle
        callers see; if it was never saved it takes the stored identity and values
        it has not changed itself.
        """
        cached = self._bundles.get(locale)
        if cached is None:
            self._bundles[locale] = translation
            return translation
        if not cached.exists:
            cached.absorb(translation)
        return cached

    async def get(self, locale: str) -> Optional[Translation]:
        cached = self._bundles.get(locale)
        if cached is not None and (cached.exists or locale in self._checked):
            return cached

        owner_id = self._owner_id()
        if owner_id is None or self._complete:
            return cached

        translation = await self.adapter.load_one(owner_id, locale)
        self._checked.add(locale)
        if translation is None:
            return cached

        logging.debug(f"Loaded {translation!r}")
        return self.put(locale, translation)

    async def get_or_new(self, locale: str) -> Translation:
        translation = await self.get(locale)
        if translation is None:
            translation = self.new(locale)
        return translation

    def new(self, locale: str) -> Translation:
        """Cached bundle for `locale`, or a new unsaved one registered in its place."""
        if locale not in self._bundles:
            self._bundles[locale] = self._new_translation(locale)
            logging.debug(f"Created {self._bundles[locale]!r}")
        return self._bundles[locale]

    async def all(self) -> list[Translation]:
        """Every stored bundle plus unsaved ones, merged per locale."""
        owner_id = self._owner_id()
        if owner_id is not None and not self._complete:
            self.complete_with(await self.adapter.load_all(owner_id))
        return list(self._bundles.values())

    def complete_with(self, translations: Iterable[Translation]) -> None:
        """Register every stored bundle of the owner, loaded elsewhere in one go."""
        for translation in translations:
            self.put(getattr(translation, self.adapter.locale_key), translation)
        self._complete = True

    def invalidate(self, locale: Optional[str] = None) -> None:
        """Drop one locale (or everything) so the next lookup reloads it."""
        if locale is None:
            self._bundles.clear()
            self._checked.clear()
        else:
            self._bundles.pop(locale, None)
            self._checked.discard(locale)
        self._complete = False
