import logging
import os
from typing import Optional

from dotenv import load_dotenv


def configure_env(env_file_name: Optional[str] = None) -> None:
    """
    Configure the process environment from dotenv files.

    Args:
        env_file_name: Optional environment file name. If None, tries `.env.<ENV>` then `.env`.
    """
    if env_file_name is not None:
        load_dotenv(env_file_name, override=True)
        logging.debug(f"Loaded {env_file_name} file")
        return

    environment = os.getenv("ENV", "debug")

    for env_file in [f".env.{environment}", ".env"]:
        if load_dotenv(env_file, override=True):
            logging.debug(f"Loaded {env_file} file")
            break


def env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def env_optional(name: str, default: Optional[str]) -> Optional[str]:
    """Read a string variable where an empty value or `null` means None."""
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    if value == "" or value.lower() in ("null", "none"):
        return None
    return value
