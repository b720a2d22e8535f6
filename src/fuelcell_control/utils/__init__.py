"""
Utility Module

Logging setup and caller-owned result caching.
"""

from fuelcell_control.utils.logging_config import setup_logging
from fuelcell_control.utils.result_cache import ResultCache, make_cache_key

__all__ = [
    "setup_logging",
    "ResultCache",
    "make_cache_key",
]
