from typing import Any, ClassVar, Iterable, Optional, Self

from fast_translatable.contracts.model import Model


class Translation(Model):
    """
    One locale's values of a translatable model, stored as a row of its own.

    Subclasses declare the owner's foreign key and the translated fields:

        class ArticleTranslation(Translation):
            article_id: Optional[ObjectId] = None
            title: Optional[str] = None
            description: Optional[str] = None
    """

    # Bundles are created, then rewritten in place; only the creation time is kept
    touch_updated_at: ClassVar[bool] = False

    locale: Optional[str] = None

    @property
    def exists(self) -> bool:
        return self._id is not None

    def values(self, fields: Iterable[str]) -> dict[str, Any]:
        return {name: getattr(self, name, None) for name in fields}

    def has_changes(self, fields: Iterable[str]) -> bool:
        return any(self.is_dirty(name) for name in fields)

    def absorb(self, stored: 'Translation') -> Self:
        """Take the identity and every unchanged value of the stored row for the same locale."""
        for key in self.model_fields():
            if not self.is_dirty(key):
                object.__setattr__(self, key, getattr(stored, key, None))
        return self

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} locale={self.locale!r} id={self._id!r}>"
