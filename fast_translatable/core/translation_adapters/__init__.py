from typing import Dict, Type

from fast_translatable.contracts.translation_adapter import TranslationAdapter
from .memory_adapter import MemoryTranslationAdapter
from .mongo_adapter import MongoTranslationAdapter


def get_builtin_translation_adapters() -> Dict[str, Type[TranslationAdapter]]:
    """Return built-in adapters keyed by the name used in `TranslationOptions.adapter`."""
    return {
        "mongo": MongoTranslationAdapter,
        "memory": MemoryTranslationAdapter,
    }


__all__ = [
    "MemoryTranslationAdapter",
    "MongoTranslationAdapter",
    "get_builtin_translation_adapters",
]
