from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, TypeVar, ClassVar, Any, get_type_hints, get_origin, Self, Iterable
from typing import TYPE_CHECKING

from bson import ObjectId

from fast_translatable.database.mongo import get_db
from fast_translatable.exceptions.common_exceptions import DatabaseNotInitializedException
from fast_translatable.exceptions.model_exceptions import ModelNotFoundException
from fast_translatable.utils.query_builder import QueryBuilder
from fast_translatable.utils.serialisation import serialise, pascal_case_to_snake_case

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection
    from fast_translatable.contracts.observer import Observer


T = TypeVar('T', bound='Model')


def now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Model:
    protected: ClassVar[list[str]] = ["_id", "created_at", "updated_at"]

    # Rows that are never updated on their own (e.g. translations) skip `updated_at`
    touch_updated_at: ClassVar[bool] = True

    _cached_model_fields: ClassVar[Optional[dict[str, Any]]] = None
    _cached_fillable_fields: ClassVar[Optional[list[str]]] = None
    _cached_all_fields: ClassVar[Optional[list[str]]] = None

    _id: Optional[ObjectId] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __init__(self, *args, **kwargs):
        self.observers: list['Observer'] = []
        self.clean: dict[str, Any] = {}

        is_from_db = '_id' in kwargs and kwargs['_id'] is not None

        for key, value in kwargs.items():
            if key in self.model_fields().keys():
                if is_from_db:
                    super().__setattr__(key, value)
                else:
                    setattr(self, key, value)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # Field caches are per class, never inherited from a parent
        cls._cached_model_fields = None
        cls._cached_fillable_fields = None
        cls._cached_all_fields = None

    def __str__(self):
        return str(self.dict())

    @classmethod
    def collection_name(cls) -> str:
        return pascal_case_to_snake_case(cls)

    @classmethod
    async def collection_cls(cls) -> 'AsyncIOMotorCollection':
        db = await get_db()
        if db is None:
            raise DatabaseNotInitializedException()
        return db[cls.collection_name()]

    async def collection(self) -> 'AsyncIOMotorCollection':
        return await self.collection_cls()

    @classmethod
    async def exec_find(cls, *args, **kwargs) -> list[dict[str, Any]]:
        cursor = (await cls.collection_cls()).find(*args, **kwargs)
        return [d async for d in cursor]

    @classmethod
    async def exec_find_one(cls, *args, **kwargs) -> Optional[dict[str, Any]]:
        return await (await cls.collection_cls()).find_one(*args, **kwargs)

    @classmethod
    async def exec_count(cls, *args, **kwargs) -> int:
        return await (await cls.collection_cls()).count_documents(*args, **kwargs)

    async def save(self) -> Self:
        if self._id:
            await self._update()
        else:
            await self._create()
        return self

    @classmethod
    def model_fields(cls) -> dict[str, Any]:
        if cls._cached_model_fields is not None:
            return cls._cached_model_fields

        annotations: dict[str, Any] = {}
        for name, hint in get_type_hints(cls).items():
            # Skip ClassVar annotations
            if get_origin(hint) is ClassVar or hint is ClassVar:
                continue
            annotations[name] = hint

        cls._cached_model_fields = annotations
        return annotations

    @classmethod
    def fillable_fields(cls) -> list[str]:
        if cls._cached_fillable_fields is not None:
            return cls._cached_fillable_fields
        cls._cached_fillable_fields = [f for f in cls.model_fields().keys() if f not in cls.protected]
        return cls._cached_fillable_fields

    @classmethod
    def all_fields(cls) -> list[str]:
        if cls._cached_all_fields is not None:
            return cls._cached_all_fields
        cls._cached_all_fields = list(cls.model_fields().keys())
        return cls._cached_all_fields

    async def _notify_observer(self, hook: str) -> None:
        for observer in self.observers:
            await getattr(observer, hook)(self)

    def _build_update_payload(self, set_values: dict[str, Any]) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if set_values:
            payload["$set"] = dict(set_values)
        if self.touch_updated_at:
            payload["$currentDate"] = {"updated_at": True}
        return payload

    def _build_insert_payload(self) -> dict[str, Any]:
        to_insert = {
            **{key: self.get(key) for key in self.fillable_fields()},
            'created_at': self.get('created_at') or now(),
        }
        if self.touch_updated_at:
            to_insert['updated_at'] = self.get('updated_at') or now()
        return to_insert

    async def _update(self) -> None:
        await self._notify_observer('on_updating')
        coll = await self.collection()
        query = await self.query_modifier({'_id': self._id}, "update", self.collection_name())
        payload = self._build_update_payload({key: getattr(self, key) for key in self.clean.keys()})
        if payload:
            await coll.update_one(query, payload)
        await self.refresh()
        await self._notify_observer('on_updated')

    async def _create(self) -> None:
        await self._notify_observer('on_creating')
        data = await self.query_modifier(self._build_insert_payload(), "create", self.collection_name())
        coll = await self.collection()
        result = await coll.insert_one(data)
        self._id = result.inserted_id
        await self.refresh()
        await self._notify_observer('on_created')

    async def _delete(self) -> None:
        coll = await self.collection()
        query = await self.query_modifier({'_id': self._id}, "delete", self.collection_name())
        await coll.delete_one(query)

    @classmethod
    async def create(cls: type[T], data: dict[str, Any]) -> T:
        instance = cls(**data)
        await instance.save()
        return instance

    @classmethod
    async def all(cls: type[T]) -> list[T]:
        return await cls.find({})

    async def refresh(self) -> Self:
        coll = await self.collection()
        data = await coll.find_one({'_id': self._id})
        if data:
            self.hydrate(data)
        return self

    def hydrate(self, data: dict[str, Any]) -> Self:
        """Apply values read from the database without marking them dirty."""
        for key, value in data.items():
            if key in self.model_fields():
                object.__setattr__(self, key, value)
        self.sync_original()
        return self

    @classmethod
    async def find_by_id(cls: type[T], _id: str | ObjectId) -> Optional[T]:
        object_id = ObjectId(_id) if isinstance(_id, str) else _id
        return await cls.find_one({'_id': object_id})

    @classmethod
    async def find(cls: type[T], query: dict[str, Any], **kwargs) -> list[T]:
        final_query = await cls.query_modifier(query, "find", cls.collection_name())
        results = await cls.exec_find(final_query, **kwargs)
        return [cls(**data) for data in results]

    @classmethod
    async def find_one(cls: type[T], query: dict[str, Any], **kwargs) -> Optional[T]:
        final_query = await cls.query_modifier(query, "find_one", cls.collection_name())
        data = await cls.exec_find_one(final_query, **kwargs)
        return cls(**data) if data else None

    @classmethod
    async def find_or_fail(cls: type[T], query: dict[str, Any], **kwargs) -> T:
        instance = await cls.find_one(query, **kwargs)
        if not instance:
            raise ModelNotFoundException(cls.__name__)
        return instance

    @classmethod
    async def exists(cls, query: dict[str, Any]) -> bool:
        final_query = await cls.query_modifier(query, "count", cls.collection_name())
        return await cls.exec_count(final_query) > 0

    @classmethod
    async def delete_many(cls, query: dict[str, Any], **kwargs) -> None:
        coll = await cls.collection_cls()
        final_query = await cls.query_modifier(query, "delete_many", cls.collection_name())
        await coll.delete_many(final_query, **kwargs)

    async def delete(self) -> None:
        await self._notify_observer('on_deleting')
        await self._delete()
        await self._notify_observer('on_deleted')

    def fill(self, data: dict[str, Any]) -> Self:
        for key, value in data.items():
            setattr(self, key, value)
        return self

    async def update(self, data: dict[str, Any]) -> Self:
        self.fill(data)
        await self.save()
        return self

    @classmethod
    async def count(cls, query: dict[str, Any] = None, **kwargs) -> int:
        final_query = await cls.query_modifier(query or {}, "count", cls.collection_name())
        return await cls.exec_count(final_query, **kwargs)

    def is_dirty(self, key: Optional[str] = None) -> bool:
        if key is None:
            return bool(self.clean)
        return key in self.clean

    def dirty_fields(self) -> list[str]:
        return list(self.clean.keys())

    def sync_original(self) -> None:
        """Forget tracked changes, e.g. after the row was written."""
        self.clean = {}

    def get(self, key: str, default: Any = None) -> Any:
        attr = getattr(self, key, default)
        return attr if attr is not None else default

    def set(self, key: str, value: Any) -> None:
        setattr(self, key, value)

    @property
    def id(self) -> Optional[ObjectId]:
        return self._id

    def __setattr__(self, key: str, value: Any) -> None:
        """Override the default setattr to track changes to the model."""
        if key in self.model_fields().keys():
            if not self.is_dirty(key):
                self.clean[key] = self.get(key)

        super().__setattr__(key, value)

    def replicate(self: T, except_: Optional[Iterable[str]] = None) -> T:
        """Copy fillable fields into a new, unsaved instance."""
        excluded = set(except_ or [])
        data = {key: self.get(key) for key in self.fillable_fields() if key not in excluded}
        clone = self.__class__(**data)
        clone.observers = list(self.observers)
        return clone

    @classmethod
    async def query_modifier(cls, query: dict, function_name: str = None, model_name: str = None) -> dict:
        return query

    @classmethod
    def scope(cls, query=None):
        """Initialize a query builder with optional starting query"""
        return QueryBuilder(cls, query or {})

    #
    # Observers
    #
    def register_observer(self, observer: 'Observer'):
        """Register an observer for this model."""
        self.observers.append(observer)

    # Kept last: the method name shadows the builtin in the class body
    def dict(self, *args, **kwargs):
        return {key: serialise(getattr(self, key)) for key in self.all_fields()}
