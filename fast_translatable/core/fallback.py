from typing import Optional

from fast_translatable.core.locales import LocaleCatalogue


class FallbackChainBuilder:
    """
    Orders the locales a lookup tries.

    `[requested, parent of requested, fallback locale]`, first occurrence wins.
    When fallback is enabled without a fallback locale every catalogue locale
    is appended in configuration order.
    """

    def __init__(self, catalogue: LocaleCatalogue):
        self.catalogue = catalogue

    def build(self, locale: str, *, fallback_locale: Optional[str], use_fallback: bool) -> tuple[str, ...]:
        chain = [locale]
        if not use_fallback:
            return tuple(chain)

        parent = self.catalogue.parent_of(locale)
        if parent:
            chain.append(parent)

        if fallback_locale:
            chain.append(fallback_locale)
        else:
            chain.extend(self.catalogue.all())

        return tuple(dict.fromkeys(chain))
