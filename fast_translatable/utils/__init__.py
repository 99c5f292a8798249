from .serialisation import serialise

__all__ = [
    "serialise",
]
