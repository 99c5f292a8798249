"""Contract classes and abstract interfaces.

Exported so they can be imported directly from :mod:`fast_translatable`.
"""

from .model import Model
from .observer import Observer
from .translation import Translation
from .translation_adapter import TranslationAdapter

__all__ = [
    "Model",
    "Observer",
    "Translation",
    "TranslationAdapter",
]
