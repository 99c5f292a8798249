"""
Basic package tests to ensure fast-translatable can be imported.
"""

import fast_translatable


def test_package_version():
    assert hasattr(fast_translatable, '__version__')
    assert fast_translatable.__version__ == "0.1.0"
    assert fast_translatable.__license__ == "MIT"


def test_public_api():
    for name in (
        "Model",
        "Translation",
        "Translatable",
        "TranslationOptions",
        "TranslationAdapter",
        "MongoTranslationAdapter",
        "MemoryTranslationAdapter",
        "LocaleCatalogue",
        "FallbackChainBuilder",
        "TranslationCache",
        "RuleFactory",
        "register_translation",
        "configure",
        "get_config",
        "set_locale",
        "using_locale",
        "setup_logging",
        "TranslationSaveError",
    ):
        assert hasattr(fast_translatable, name), name
