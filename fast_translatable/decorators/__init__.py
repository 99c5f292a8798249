from .model_decorators import (
    register_observer,
    register_translation,
)

__all__ = [
    "register_observer",
    "register_translation",
]
