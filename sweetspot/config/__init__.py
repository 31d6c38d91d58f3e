"""
Configuration Management.

- settings: Main Settings class with environment variable loading
- exclusion_rules: Load category / name denylists from JSON

Configuration sources (in order of precedence):
1. Environment variables
2. .env file
3. Default values

Example:
    from sweetspot.config import get_settings, load_configured_exclusion_rules

    settings = get_settings()
    rules = load_configured_exclusion_rules(settings)
"""

from sweetspot.config.settings import DEFAULT_KEYWORDS, Settings, get_settings
from sweetspot.config.exclusion_rules import (
    load_configured_exclusion_rules,
    load_default_exclusion_rules,
    load_exclusion_rules,
    parse_exclusion_rules,
)

__all__ = [
    "DEFAULT_KEYWORDS",
    "Settings",
    "get_settings",
    "load_configured_exclusion_rules",
    "load_default_exclusion_rules",
    "load_exclusion_rules",
    "parse_exclusion_rules",
]
