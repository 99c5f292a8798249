"""
Active locale for the running task.

The active locale is ambient state read at the moment a translation is resolved,
never cached on a model. Every resolution also accepts an explicit locale, which
always wins.

Usage:
    from fast_translatable.core.localization import set_locale, get_locale, using_locale

    set_locale('es')
    with using_locale('de'):
        article.title        # resolved in German
"""

import os
from contextlib import contextmanager
from typing import Iterator

from fast_translatable.core.context import context, define_key

_LOCALE_DEFAULT = os.getenv('LOCALE_DEFAULT', 'en')

ActiveLocale = define_key('locale', default=_LOCALE_DEFAULT)


def set_locale(locale: str) -> None:
    """Set the active locale for the current context."""
    context.set(ActiveLocale, locale)


def get_locale() -> str:
    return context.get(ActiveLocale)


@contextmanager
def using_locale(locale: str) -> Iterator[str]:
    """Resolve translations in `locale` inside the block."""
    with context.using(ActiveLocale, locale):
        yield locale


def reset_locale() -> None:
    context.clear(ActiveLocale.name)


__all__ = [
    "set_locale",
    "get_locale",
    "using_locale",
    "reset_locale",
]
