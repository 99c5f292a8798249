from functools import wraps
from typing import Any, TYPE_CHECKING

from fast_translatable.core.translatable import Translatable, TranslationOptions

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from fast_translatable.contracts.observer import Observer
    from fast_translatable.contracts.translation import Translation


def register_observer(observer_cls: type['Observer']):
    def decorator(model_cls):
        original_init = model_cls.__init__

        @wraps(original_init)
        def new_init(self, *args, **kwargs):
            original_init(self, *args, **kwargs)
            self.register_observer(observer_cls())

        model_cls.__init__ = new_init
        return model_cls
    return decorator


def register_translation(
    *translated_attributes: str,
    translation_model: type['Translation'] | str | None = None,
    **options: Any,
):
    """
    Declare the translated attributes of a translatable model.

        @register_translation("title", "description", use_fallback=True)
        class Article(Translatable, Model):
            slug: Optional[str] = None

    Extra keyword arguments are `TranslationOptions` fields.
    """
    def decorator(model_cls):
        if not issubclass(model_cls, Translatable):
            raise TypeError(f"{model_cls.__name__} must inherit from Translatable to register translations")
        model_cls.translation_options = TranslationOptions(
            translated_attributes=translated_attributes,
            translation_model=translation_model,
            **options,
        )
        return model_cls
    return decorator
