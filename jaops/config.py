# Configuration settings are stored on the JAOPS class,
# an Application copies its keyword arguments onto it.
# get_config falls back to environment variables for options that aren't set.
import os
import logging
from functools import lru_cache
from typing import Any, Optional
import jaops
from .jaops_init import JAOPS


@lru_cache(maxsize=128)
def get_config(option: str) -> Optional[Any]:
    """Retrieve a configuration parameter
    :param option: configuration parameter
    :return: configuration value
    """
    result = getattr(JAOPS, option, None)
    if result is not None:
        return result
    return os.environ.get(option, None)


def set_config(**options: Any) -> None:
    """
    Store configuration options on the JAOPS class and invalidate cached lookups
    """
    for conf_name, conf_val in options.items():
        setattr(JAOPS, conf_name, conf_val)
    get_config.cache_clear()


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    :rtype: Boolean
    """
    return jaops.log.getEffectiveLevel() < logging.INFO
