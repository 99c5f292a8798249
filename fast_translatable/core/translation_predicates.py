"""
Predicates over translation rows.

Filters on translated values target one locale's stored rows and never use the
fallback chain. Each predicate renders to a MongoDB filter and can also test
a plain row mapping, so every adapter evaluates them the same way.
"""

import operator
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from fast_translatable.utils.serialisation import like_to_regex

_OPERATORS: dict[str, tuple[str, Callable[[Any, Any], bool]]] = {
    "=": ("$eq", operator.eq),
    "==": ("$eq", operator.eq),
    "!=": ("$ne", operator.ne),
    "<>": ("$ne", operator.ne),
    "<": ("$lt", operator.lt),
    "<=": ("$lte", operator.le),
    ">": ("$gt", operator.gt),
    ">=": ("$gte", operator.ge),
}


class TranslationPredicate(ABC):

    @abstractmethod
    def to_mongo(self, locale_key: str) -> dict[str, Any]:
        pass

    @abstractmethod
    def matches(self, row: Mapping[str, Any], locale_key: str) -> bool:
        pass

    def __and__(self, other: 'TranslationPredicate') -> 'AllOf':
        return AllOf((self, other))


@dataclass(frozen=True)
class LocaleIs(TranslationPredicate):
    """A row exists for `locale`."""
    locale: str

    def to_mongo(self, locale_key: str) -> dict[str, Any]:
        return {locale_key: self.locale}

    def matches(self, row: Mapping[str, Any], locale_key: str) -> bool:
        return row.get(locale_key) == self.locale


@dataclass(frozen=True)
class FieldCompares(TranslationPredicate):
    field: str
    operator: str
    value: Any

    def __post_init__(self):
        if self.operator not in _OPERATORS:
            raise ValueError(f"Unsupported operator '{self.operator}'")

    def to_mongo(self, locale_key: str) -> dict[str, Any]:
        mongo_op, _ = _OPERATORS[self.operator]
        if mongo_op == "$eq":
            return {self.field: self.value}
        return {self.field: {mongo_op: self.value}}

    def matches(self, row: Mapping[str, Any], locale_key: str) -> bool:
        _, compare = _OPERATORS[self.operator]
        try:
            return bool(compare(row.get(self.field), self.value))
        except TypeError:
            return False


@dataclass(frozen=True)
class FieldMatches(TranslationPredicate):
    """SQL LIKE style match: `%` is any run of characters, `_` a single one. Case-insensitive."""
    field: str
    pattern: str

    def to_mongo(self, locale_key: str) -> dict[str, Any]:
        return {self.field: {"$regex": like_to_regex(self.pattern), "$options": "is"}}

    def matches(self, row: Mapping[str, Any], locale_key: str) -> bool:
        value = row.get(self.field)
        if not isinstance(value, str):
            return False
        return re.match(like_to_regex(self.pattern), value, re.IGNORECASE | re.DOTALL) is not None


@dataclass(frozen=True)
class AllOf(TranslationPredicate):
    predicates: tuple[TranslationPredicate, ...]

    def to_mongo(self, locale_key: str) -> dict[str, Any]:
        return {"$and": [predicate.to_mongo(locale_key) for predicate in self.predicates]}

    def matches(self, row: Mapping[str, Any], locale_key: str) -> bool:
        return all(predicate.matches(row, locale_key) for predicate in self.predicates)
