import json
import os
from typing import Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError, field_validator

from fast_translatable.core.locales import DEFAULT_SEPARATOR, LocaleCatalogue
from fast_translatable.exceptions import ConfigurationError
from fast_translatable.utils.env_utils import configure_env, env_flag, env_optional

LocalesConfig = Union[list[Union[str, dict[str, list[str]]]], dict[str, list[str]]]


class TranslatableConfig(BaseModel):
    """Process-wide translation settings, loaded once at start."""

    model_config = ConfigDict(frozen=True)

    locales: LocalesConfig = ["en"]
    locale_separator: str = DEFAULT_SEPARATOR
    # Forces the current locale for every model, overriding the active locale
    locale: Optional[str] = None
    use_fallback: bool = False
    use_property_fallback: bool = True
    fallback_locale: Optional[str] = "en"
    translation_suffix: str = "Translation"
    locale_key: str = "locale"
    to_array_always_loads_translations: bool = True
    rule_factory_format: Literal["key", "array"] = "key"
    rule_factory_prefix: str = "%"
    rule_factory_suffix: str = "%"

    _catalogue: LocaleCatalogue = PrivateAttr()

    @field_validator("locales", mode="before")
    @classmethod
    def _coerce_grouped_nulls(cls, value: Any) -> Any:
        # `{"en": null}` in JSON means a language without regions
        if isinstance(value, Mapping):
            return {key: regions or [] for key, regions in value.items()}
        return value

    def model_post_init(self, __context: Any) -> None:
        # Bad catalogues fail when the configuration is built, not on first lookup
        self._catalogue = LocaleCatalogue.build(self.locales, self.locale_separator)

    @property
    def catalogue(self) -> LocaleCatalogue:
        return self._catalogue


def _parse_locales(raw: str) -> LocalesConfig:
    raw = raw.strip()
    if raw.startswith(("[", "{")):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"TRANSLATABLE_LOCALES is not valid JSON: {exc}") from exc
    return [part.strip() for part in raw.split(",") if part.strip()]


def load_config_from_env(env_file_name: Optional[str] = None) -> TranslatableConfig:
    """
    Build the configuration from `TRANSLATABLE_*` environment variables.

    Args:
        env_file_name: Optional dotenv file loaded before reading the environment.
    """
    if env_file_name is not None:
        configure_env(env_file_name)

    defaults = TranslatableConfig.model_fields
    data: dict[str, Any] = {
        "locale_separator": os.getenv("TRANSLATABLE_LOCALE_SEPARATOR", DEFAULT_SEPARATOR),
        "locale": env_optional("TRANSLATABLE_LOCALE", None),
        "use_fallback": env_flag("TRANSLATABLE_USE_FALLBACK", defaults["use_fallback"].default),
        "use_property_fallback": env_flag("TRANSLATABLE_USE_PROPERTY_FALLBACK", defaults["use_property_fallback"].default),
        "fallback_locale": env_optional("TRANSLATABLE_FALLBACK_LOCALE", defaults["fallback_locale"].default),
        "translation_suffix": os.getenv("TRANSLATABLE_TRANSLATION_SUFFIX", defaults["translation_suffix"].default),
        "locale_key": os.getenv("TRANSLATABLE_LOCALE_KEY", defaults["locale_key"].default),
        "to_array_always_loads_translations": env_flag(
            "TRANSLATABLE_TO_ARRAY_ALWAYS_LOADS_TRANSLATIONS",
            defaults["to_array_always_loads_translations"].default,
        ),
        "rule_factory_format": os.getenv("TRANSLATABLE_RULE_FACTORY_FORMAT", defaults["rule_factory_format"].default),
        "rule_factory_prefix": os.getenv("TRANSLATABLE_RULE_FACTORY_PREFIX", defaults["rule_factory_prefix"].default),
        "rule_factory_suffix": os.getenv("TRANSLATABLE_RULE_FACTORY_SUFFIX", defaults["rule_factory_suffix"].default),
    }
    if os.getenv("TRANSLATABLE_LOCALES"):
        data["locales"] = _parse_locales(os.environ["TRANSLATABLE_LOCALES"])

    return make_config(data)


def make_config(data: Mapping[str, Any]) -> TranslatableConfig:
    """Validate settings and build their catalogue."""
    try:
        return TranslatableConfig(**data)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


_config: Optional[TranslatableConfig] = None


def configure(config: TranslatableConfig | Mapping[str, Any]) -> TranslatableConfig:
    """Install the process-wide configuration."""
    global _config
    if isinstance(config, TranslatableConfig):
        _config = config
    else:
        _config = make_config(config)
    return _config


def get_config() -> TranslatableConfig:
    global _config
    if _config is None:
        _config = load_config_from_env()
    return _config


def reset_config() -> None:
    global _config
    _config = None
