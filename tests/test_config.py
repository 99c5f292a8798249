import pytest

from fast_translatable.config import (
    TranslatableConfig,
    configure,
    get_config,
    load_config_from_env,
    make_config,
    reset_config,
)
from fast_translatable.exceptions import ConfigurationError

TRANSLATABLE_ENV = [
    "TRANSLATABLE_LOCALES",
    "TRANSLATABLE_LOCALE_SEPARATOR",
    "TRANSLATABLE_LOCALE",
    "TRANSLATABLE_USE_FALLBACK",
    "TRANSLATABLE_USE_PROPERTY_FALLBACK",
    "TRANSLATABLE_FALLBACK_LOCALE",
    "TRANSLATABLE_TRANSLATION_SUFFIX",
    "TRANSLATABLE_LOCALE_KEY",
    "TRANSLATABLE_TO_ARRAY_ALWAYS_LOADS_TRANSLATIONS",
    "TRANSLATABLE_RULE_FACTORY_FORMAT",
    "TRANSLATABLE_RULE_FACTORY_PREFIX",
    "TRANSLATABLE_RULE_FACTORY_SUFFIX",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in TRANSLATABLE_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults():
    config = TranslatableConfig()

    assert config.catalogue.all() == ["en"]
    assert config.use_fallback is False
    assert config.use_property_fallback is True
    assert config.fallback_locale == "en"
    assert config.locale_key == "locale"
    assert config.rule_factory_format == "key"


def test_grouped_locales_with_null_regions():
    config = make_config({"locales": {"en": None, "es": ["MX"]}})

    assert config.catalogue.all() == ["en", "es", "es-MX"]


@pytest.mark.parametrize(
    "data",
    [
        {"locales": ["en", "en"]},
        {"locales": ["en"], "locale_separator": ""},
        {"locales": ["en"], "rule_factory_format": "xml"},
        {"locales": 42},
    ],
)
def test_invalid_configuration_raises_configuration_error(data):
    with pytest.raises(ConfigurationError) as exc_info:
        make_config(data)
    assert exc_info.value.message.startswith("[TRANSLATABLE CONFIG]")


def test_configuration_is_immutable():
    config = make_config({"locales": ["en"]})

    with pytest.raises(Exception):
        config.use_fallback = True


def test_load_from_environment(clean_env):
    clean_env.setenv("TRANSLATABLE_LOCALES", "en, de, de-AT")
    clean_env.setenv("TRANSLATABLE_USE_FALLBACK", "true")
    clean_env.setenv("TRANSLATABLE_FALLBACK_LOCALE", "null")
    clean_env.setenv("TRANSLATABLE_RULE_FACTORY_FORMAT", "array")
    clean_env.setenv("TRANSLATABLE_RULE_FACTORY_PREFIX", "{")
    clean_env.setenv("TRANSLATABLE_RULE_FACTORY_SUFFIX", "}")

    config = load_config_from_env()

    assert config.catalogue.all() == ["en", "de", "de-AT"]
    assert config.catalogue.parent_of("de-AT") == "de"
    assert config.use_fallback is True
    assert config.fallback_locale is None
    assert config.rule_factory_format == "array"
    assert config.rule_factory_prefix == "{"
    assert config.rule_factory_suffix == "}"


def test_load_json_locales_from_dotenv_file(clean_env, tmp_path):
    env_file = tmp_path / ".env.testing"
    env_file.write_text(
        'TRANSLATABLE_LOCALES=\'{"en": [], "es": ["MX", "CO"]}\'\n'
        "TRANSLATABLE_LOCALE_SEPARATOR=_\n"
        "TRANSLATABLE_LOCALE=es\n"
    )
    # Registered so monkeypatch restores what the file loads
    for name in ("TRANSLATABLE_LOCALES", "TRANSLATABLE_LOCALE_SEPARATOR", "TRANSLATABLE_LOCALE"):
        clean_env.setenv(name, "")

    config = load_config_from_env(str(env_file))

    assert config.catalogue.all() == ["en", "es", "es_MX", "es_CO"]
    assert config.locale == "es"


def test_invalid_json_locales(clean_env):
    clean_env.setenv("TRANSLATABLE_LOCALES", "[en")

    with pytest.raises(ConfigurationError):
        load_config_from_env()


def test_process_configuration_lifecycle(clean_env):
    installed = configure({"locales": ["en", "fr"]})
    assert get_config() is installed

    reset_config()
    clean_env.setenv("TRANSLATABLE_LOCALES", "en,sk")
    assert get_config().catalogue.all() == ["en", "sk"]
