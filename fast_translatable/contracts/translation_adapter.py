from abc import ABC, abstractmethod
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from fast_translatable.contracts.translation import Translation
    from fast_translatable.core.translation_predicates import TranslationPredicate


class TranslationAdapter(ABC):
    """Storage boundary for translation rows of one translation model.

    Rows are keyed by (owner id, locale). `insert` creates or updates the row
    for that pair so a locale is never stored twice for the same owner.
    """

    def __init__(self, translation_model: type['Translation'], *, foreign_key: str, locale_key: str = 'locale'):
        self.translation_model = translation_model
        self.foreign_key = foreign_key
        self.locale_key = locale_key

    @abstractmethod
    async def load_one(self, owner_id: Any, locale: str) -> Optional['Translation']:
        pass

    @abstractmethod
    async def load_all(self, owner_id: Any) -> list['Translation']:
        pass

    async def load_many(self, owner_ids: list[Any]) -> dict[Any, list['Translation']]:
        """Bundles of several owners keyed by owner id. Adapters override this with a single query."""
        return {owner_id: await self.load_all(owner_id) for owner_id in owner_ids}

    @abstractmethod
    async def insert(self, translation: 'Translation', fields: list[str]) -> Any:
        """Write a new bundle; returns the identity assigned to the row."""
        pass

    @abstractmethod
    async def update(self, translation: 'Translation', fields: list[str]) -> None:
        pass

    @abstractmethod
    async def delete(self, owner_id: Any, locale: str) -> None:
        pass

    @abstractmethod
    async def delete_all(self, owner_id: Any) -> None:
        pass

    @abstractmethod
    async def owner_ids(self, predicate: 'TranslationPredicate') -> list[Any]:
        """Distinct owner ids having at least one row matching `predicate`."""
        pass

    def row_filter(self, owner_id: Any, locale: Optional[str] = None) -> dict[str, Any]:
        query = {self.foreign_key: owner_id}
        if locale is not None:
            query[self.locale_key] = locale
        return query
