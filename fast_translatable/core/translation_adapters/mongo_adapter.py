import logging
from typing import Any, Optional

from pymongo import ReturnDocument

from fast_translatable.contracts.model import now
from fast_translatable.contracts.translation import Translation
from fast_translatable.contracts.translation_adapter import TranslationAdapter
from fast_translatable.core.translation_predicates import TranslationPredicate
from fast_translatable.exceptions import PersistenceError


class MongoTranslationAdapter(TranslationAdapter):
    """Translation rows in the translation model's own MongoDB collection.

    Driver errors propagate unchanged.
    """

    async def _query(self, query: dict[str, Any], function_name: str) -> dict[str, Any]:
        model = self.translation_model
        return await model.query_modifier(query, function_name, model.collection_name())

    async def load_one(self, owner_id: Any, locale: str) -> Optional[Translation]:
        return await self.translation_model.find_one(self.row_filter(owner_id, locale))

    async def load_all(self, owner_id: Any) -> list[Translation]:
        return await self.translation_model.find(self.row_filter(owner_id), sort=[("_id", 1)])

    async def load_many(self, owner_ids: list[Any]) -> dict[Any, list[Translation]]:
        grouped: dict[Any, list[Translation]] = {owner_id: [] for owner_id in owner_ids}
        query = {self.foreign_key: {"$in": list(owner_ids)}}
        for translation in await self.translation_model.find(query, sort=[("_id", 1)]):
            grouped.setdefault(getattr(translation, self.foreign_key), []).append(translation)
        return grouped

    async def insert(self, translation: Translation, fields: list[str]) -> Any:
        owner_id = getattr(translation, self.foreign_key, None)
        locale = getattr(translation, self.locale_key, None)
        if owner_id is None or locale is None:
            raise PersistenceError(f"{translation!r} has no owner or locale")

        coll = await self.translation_model.collection_cls()
        query = await self._query(self.row_filter(owner_id, locale), "create")
        document = await coll.find_one_and_update(
            query,
            {
                "$set": translation.values(fields),
                "$setOnInsert": {"created_at": translation.created_at or now()},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        translation.hydrate(document)
        logging.debug(f"Stored {translation!r} for owner {owner_id}")
        return document["_id"]

    async def update(self, translation: Translation, fields: list[str]) -> None:
        if translation._id is None:
            raise PersistenceError(f"{translation!r} was never inserted")
        coll = await self.translation_model.collection_cls()
        query = await self._query({"_id": translation._id}, "update")
        await coll.update_one(query, translation._build_update_payload(translation.values(fields)))
        translation.sync_original()

    async def delete(self, owner_id: Any, locale: str) -> None:
        await self.translation_model.delete_many(self.row_filter(owner_id, locale))

    async def delete_all(self, owner_id: Any) -> None:
        await self.translation_model.delete_many(self.row_filter(owner_id))

    async def owner_ids(self, predicate: TranslationPredicate) -> list[Any]:
        coll = await self.translation_model.collection_cls()
        query = await self._query(predicate.to_mongo(self.locale_key), "find")
        return await coll.distinct(self.foreign_key, query)
