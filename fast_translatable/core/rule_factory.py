from typing import Any, Iterable, Literal, Mapping, Optional

from fast_translatable.config import TranslatableConfig, get_config


class RuleFactory:
    """
    Expands validation rules written once for every locale.

    A key wrapped in the configured delimiters (`%title%`) is repeated per locale,
    as `title:de` in `key` format or `de.title` in `array` format:

        RuleFactory.make({"slug": "required", "%title%": "required|max:255"})
        # {"slug": "required", "title:en": "required|max:255", "title:de": ...}
    """

    def __init__(self, config: Optional[TranslatableConfig] = None):
        self.config = config or get_config()

    @classmethod
    def make(
        cls,
        rules: Mapping[str, Any],
        locales: Optional[Iterable[str]] = None,
        *,
        format: Optional[Literal["key", "array"]] = None,
        config: Optional[TranslatableConfig] = None,
    ) -> dict[str, Any]:
        return cls(config).expand(rules, locales, format=format)

    def expand(
        self,
        rules: Mapping[str, Any],
        locales: Optional[Iterable[str]] = None,
        *,
        format: Optional[Literal["key", "array"]] = None,
    ) -> dict[str, Any]:
        catalogue = self.config.catalogue
        locales = [catalogue.require(locale) for locale in locales] if locales is not None else catalogue.all()
        format = format or self.config.rule_factory_format

        expanded: dict[str, Any] = {}
        for key, rule in rules.items():
            if not self._has_placeholder(key):
                expanded[key] = rule
                continue
            for locale in locales:
                expanded[self._locale_key(key, locale, format)] = self._replace_placeholders(rule, locale, format)
        return expanded

    def _has_placeholder(self, key: str) -> bool:
        prefix, suffix = self.config.rule_factory_prefix, self.config.rule_factory_suffix
        start = key.find(prefix)
        return start != -1 and key.find(suffix, start + len(prefix)) != -1

    def _locale_key(self, key: str, locale: str, format: str) -> str:
        prefix, suffix = self.config.rule_factory_prefix, self.config.rule_factory_suffix
        start = key.find(prefix)
        end = key.find(suffix, start + len(prefix))
        attribute = key[start + len(prefix):end]
        replacement = f"{attribute}:{locale}" if format == "key" else f"{locale}.{attribute}"
        return key[:start] + replacement + key[end + len(suffix):]

    def _replace_placeholders(self, rule: Any, locale: str, format: str) -> Any:
        # Rules may reference sibling translated fields, e.g. "required_with:%title%"
        if isinstance(rule, str):
            return self._replace_all(rule, locale, format)
        if isinstance(rule, list):
            return [self._replace_placeholders(item, locale, format) for item in rule]
        return rule

    def _replace_all(self, text: str, locale: str, format: str) -> str:
        while self._has_placeholder(text):
            text = self._locale_key(text, locale, format)
        return text
