"""
fast-translatable - per-locale attributes for async MongoDB models

Translated fields of a model live in rows of a companion translation model, one
row per locale, and read and write like plain attributes of the model:
- Locale catalogue with region-qualified locales (`es-MX` -> `es`)
- Fallback chains at bundle and field level
- Per-instance translation cache with create-or-update writes
- Query scopes over translated values
- Validation rule expansion per locale

Think of it as Laravel Translatable for Python models.
"""

__version__ = "0.1.0"
__license__ = "MIT"

# `core` loads before `config`: the configuration builds its catalogue from `core.locales`
from .contracts import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
from .config import TranslatableConfig, configure, get_config, load_config_from_env, reset_config
from .database.mongo import get_db, get_mongo, setup_mongo
from .decorators import *  # noqa: F401,F403
from .exceptions import *  # noqa: F401,F403
from .utils.logging import setup_logging
