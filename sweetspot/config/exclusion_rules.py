"""
Exclusion Rule Loading.

Exclusion rules are data, not code: a JSON document with two lists,

    {
        "excluded_categories": ["convenience_store", "supermarket"],
        "excluded_name_patterns": ["lawson", "ファミリーマート"]
    }

The package ships a default denylist tuned for Japanese convenience-store
and supermarket chains. Callers can point EXCLUSION_RULES_PATH at their own
file to localize it for another market.
"""

import json
from importlib import resources
from pathlib import Path
from typing import Any, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from sweetspot.config.settings import Settings
from sweetspot.core.exceptions import ConfigurationError
from sweetspot.models.schemas import ExclusionRules

logger = structlog.get_logger(__name__)

_BUNDLED_RULES = "exclusion_rules.json"


def parse_exclusion_rules(data: Any, source: str = "<memory>") -> ExclusionRules:
    """Build an ExclusionRules set from a decoded JSON document.

    Raises:
        ConfigurationError: If the document does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Exclusion rules in {source} must be a JSON object",
            config_key="exclusion_rules_path",
        )

    for key in ("excluded_categories", "excluded_name_patterns"):
        value = data.get(key, [])
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise ConfigurationError(
                f"'{key}' in {source} must be a list of strings",
                config_key="exclusion_rules_path",
            )

    try:
        rules = ExclusionRules.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid exclusion rules in {source}: {e}",
            config_key="exclusion_rules_path",
        ) from e

    logger.debug(
        "exclusion_rules_parsed",
        source=source,
        categories=len(rules.excluded_categories),
        name_patterns=len(rules.excluded_name_patterns),
    )
    return rules


def load_exclusion_rules(path: Union[str, Path]) -> ExclusionRules:
    """Load exclusion rules from a JSON file.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid.
    """
    rules_path = Path(path)
    try:
        with rules_path.open(encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Exclusion rules file not found: {rules_path}",
            config_key="exclusion_rules_path",
        ) from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Could not read exclusion rules from {rules_path}: {e}",
            config_key="exclusion_rules_path",
        ) from e

    return parse_exclusion_rules(data, source=str(rules_path))


def load_default_exclusion_rules() -> ExclusionRules:
    """Load the denylist bundled with the package."""
    text = resources.files("sweetspot.data").joinpath(_BUNDLED_RULES).read_text(encoding="utf-8")
    return parse_exclusion_rules(json.loads(text), source=f"sweetspot.data/{_BUNDLED_RULES}")


def load_configured_exclusion_rules(settings: Optional[Settings] = None) -> ExclusionRules:
    """Load the rules file named in settings, or the bundled rules."""
    if settings is not None and settings.exclusion_rules_path:
        return load_exclusion_rules(settings.exclusion_rules_path)
    return load_default_exclusion_rules()
