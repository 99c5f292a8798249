from __future__ import annotations

import importlib
import sys
from typing import Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from fast_translatable.contracts.translation import Translation


def get_translation_base() -> type["Translation"]:
    from fast_translatable.contracts.translation import Translation  # local import to avoid cycles
    return Translation


def resolve_translation_model(
    reference: type["Translation"] | str | None,
    *,
    owner: type,
    suffix: str = "Translation",
) -> type["Translation"]:
    """
    Resolve the translation model backing `owner`.

    `reference` may be a Translation subclass, a class name, a dotted path
    (`app.models.article_translation.ArticleTranslation`) or None, in which
    case `<OwnerName><suffix>` is looked up next to the owner.
    """
    base = get_translation_base()
    if isinstance(reference, type) and issubclass(reference, base):
        return reference
    if reference is not None and not isinstance(reference, str):
        raise TypeError("Translation model reference must be a Translation subclass or string name")

    name = reference or f"{owner.__name__}{suffix}"

    # Prefer already-loaded subclasses to avoid extra imports
    class_name = name.rpartition(".")[2]
    for cls in _iter_subclasses(base):
        if cls.__name__ == class_name:
            return cls

    last_error: Optional[Exception] = None
    for module_name, cls_name in _candidate_paths(name, owner.__module__):
        try:
            module = sys.modules.get(module_name) or importlib.import_module(module_name)
        except ImportError as exc:
            last_error = exc
            continue
        model_cls = getattr(module, cls_name, None)
        if isinstance(model_cls, type) and issubclass(model_cls, base):
            return model_cls

    raise ValueError(f"Unable to resolve translation model '{name}' for {owner.__name__}") from last_error


def _iter_subclasses(base: type) -> Iterable[type]:
    for cls in base.__subclasses__():
        yield cls
        yield from _iter_subclasses(cls)


def _candidate_paths(name: str, module_hint: str) -> list[tuple[str, str]]:
    from fast_translatable.utils.serialisation import pascal_case_to_snake_case

    candidates: list[tuple[str, str]] = []

    def _add(module: str, cls_name: str) -> None:
        if module and cls_name and (module, cls_name) not in candidates:
            candidates.append((module, cls_name))

    if "." in name:
        module, _, tail = name.rpartition(".")
        _add(module, tail)
        return candidates

    _add(module_hint, name)
    if "." in module_hint:
        package = module_hint.rsplit(".", 1)[0]
        _add(f"{package}.{pascal_case_to_snake_case(name)}", name)
    _add(f"app.models.{pascal_case_to_snake_case(name)}", name)
    return candidates
