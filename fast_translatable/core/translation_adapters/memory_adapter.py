import copy
from typing import Any, Optional

from bson import ObjectId

from fast_translatable.contracts.model import now
from fast_translatable.contracts.translation import Translation
from fast_translatable.contracts.translation_adapter import TranslationAdapter
from fast_translatable.core.translation_predicates import TranslationPredicate
from fast_translatable.exceptions import PersistenceError


class MemoryTranslationAdapter(TranslationAdapter):
    """Process-local translation rows, for tests and prototyping."""

    def __init__(self, translation_model: type[Translation], *, foreign_key: str, locale_key: str = 'locale'):
        super().__init__(translation_model, foreign_key=foreign_key, locale_key=locale_key)
        self.rows: dict[ObjectId, dict[str, Any]] = {}
        self.loads = 0

    def _matches(self, row: dict[str, Any], query: dict[str, Any]) -> bool:
        return all(row.get(key) == value for key, value in query.items())

    def _find(self, owner_id: Any, locale: Optional[str] = None) -> list[dict[str, Any]]:
        query = self.row_filter(owner_id, locale)
        return [row for row in self.rows.values() if self._matches(row, query)]

    def _instance(self, row: dict[str, Any]) -> Translation:
        return self.translation_model(**copy.deepcopy(row))

    def documents(self, owner_id: Any) -> list[dict[str, Any]]:
        return copy.deepcopy(self._find(owner_id))

    async def load_one(self, owner_id: Any, locale: str) -> Optional[Translation]:
        self.loads += 1
        rows = self._find(owner_id, locale)
        return self._instance(rows[0]) if rows else None

    async def load_all(self, owner_id: Any) -> list[Translation]:
        self.loads += 1
        return [self._instance(row) for row in self._find(owner_id)]

    async def load_many(self, owner_ids: list[Any]) -> dict[Any, list[Translation]]:
        self.loads += 1
        grouped: dict[Any, list[Translation]] = {owner_id: [] for owner_id in owner_ids}
        for row in self.rows.values():
            owner_id = row.get(self.foreign_key)
            if owner_id in grouped:
                grouped[owner_id].append(self._instance(row))
        return grouped

    async def insert(self, translation: Translation, fields: list[str]) -> Any:
        owner_id = getattr(translation, self.foreign_key, None)
        locale = getattr(translation, self.locale_key, None)
        if owner_id is None or locale is None:
            raise PersistenceError(f"{translation!r} has no owner or locale")

        existing = self._find(owner_id, locale)
        if existing:
            row = existing[0]
        else:
            row = {
                "_id": ObjectId(),
                self.foreign_key: owner_id,
                self.locale_key: locale,
                "created_at": translation.created_at or now(),
            }
            self.rows[row["_id"]] = row
        row.update(copy.deepcopy(translation.values(fields)))

        translation.hydrate(copy.deepcopy(row))
        return row["_id"]

    async def update(self, translation: Translation, fields: list[str]) -> None:
        row = self.rows.get(translation._id)
        if row is None:
            raise PersistenceError(f"{translation!r} does not exist")
        row.update(copy.deepcopy(translation.values(fields)))
        translation.sync_original()

    async def delete(self, owner_id: Any, locale: str) -> None:
        for row in self._find(owner_id, locale):
            del self.rows[row["_id"]]

    async def delete_all(self, owner_id: Any) -> None:
        for row in self._find(owner_id):
            del self.rows[row["_id"]]

    async def owner_ids(self, predicate: TranslationPredicate) -> list[Any]:
        found = []
        for row in self.rows.values():
            owner_id = row.get(self.foreign_key)
            if predicate.matches(row, self.locale_key) and owner_id not in found:
                found.append(owner_id)
        return found
