"""Persisted settings and per-run settings resolution."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from .exceptions import ConfigurationError
from .models import CardType, GenerationSettings, Provider

logger = logging.getLogger(__name__)

SETTINGS_PATH_ENV_VAR = "TEXT_TO_REMNOTE_SETTINGS"

SETTINGS_KEYS = tuple(GenerationSettings.model_fields)

API_KEY_ENV_VARS = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.CLAUDE: "ANTHROPIC_API_KEY",
}

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def default_settings_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Settings file location, overridable through TEXT_TO_REMNOTE_SETTINGS."""
    environ = os.environ if environ is None else environ
    override = environ.get(SETTINGS_PATH_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".config" / "text-to-remnote" / "settings.json"


def parse_setting_value(key: str, value: str) -> Any:
    """
    Convert a setting given as text (e.g. on the command line) to its stored form.

    Args:
        key: Setting name
        value: Raw text value

    Returns:
        JSON-serializable value

    Raises:
        ConfigurationError: If the key is unknown or the value is invalid
    """
    if key not in SETTINGS_KEYS:
        raise ConfigurationError(f"Unknown setting '{key}'. Known settings: {', '.join(SETTINGS_KEYS)}")

    parsed: Any = value
    if key == "enabled_card_types":
        parsed = [part.strip() for part in value.split(",") if part.strip()]
    elif key == "enforce_max_cards":
        lowered = value.strip().lower()
        if lowered not in TRUE_VALUES | FALSE_VALUES:
            raise ConfigurationError(f"Invalid value for {key}: '{value}' (use true or false)")
        parsed = lowered in TRUE_VALUES

    # Validate against the model, on top of defaults
    try:
        checked = GenerationSettings.model_validate({key: parsed})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid value for {key}: '{value}'") from e
    return checked.model_dump(mode="json")[key]


class SettingsStore:
    """Reads and writes persisted settings as a JSON file."""

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            path: Settings file (default: ~/.config/text-to-remnote/settings.json)
        """
        self.path = Path(path) if path else default_settings_path()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> dict[str, Any]:
        """
        Load stored settings.

        Returns:
            Stored values by setting name; empty if the file is missing or unreadable
        """
        if not self.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: expected a JSON object", self.path)
            return {}

        unknown = set(data) - set(SETTINGS_KEYS)
        if unknown:
            logger.warning("Ignoring unknown settings: %s", ", ".join(sorted(unknown)))
        return {k: v for k, v in data.items() if k in SETTINGS_KEYS}

    def save(self, values: Mapping[str, Any]) -> Path:
        """
        Merge values into the stored settings and write them to disk.

        Args:
            values: Settings to store; None values are ignored

        Returns:
            Path to the settings file
        """
        unknown = set(values) - set(SETTINGS_KEYS)
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        merged = self.load()
        merged.update({k: v for k, v in values.items() if v is not None})

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(merged, indent=2), encoding="utf-8")
        return self.path

    def clear(self) -> bool:
        """
        Delete the settings file.

        Returns:
            True if deleted, False if it didn't exist
        """
        if self.exists():
            self.path.unlink()
            return True
        return False


def resolve_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    store: Optional[SettingsStore] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GenerationSettings:
    """
    Build the immutable settings for one generation run.

    Precedence, highest first: explicit overrides (None values ignored),
    stored settings, environment (API key only), defaults. GenerationSettings
    picks the default model for the chosen provider.

    Args:
        overrides: Values given for this run, e.g. command-line options
        store: Persisted settings to read
        environ: Environment variables (default: os.environ)

    Returns:
        Frozen GenerationSettings

    Raises:
        ConfigurationError: If any value is invalid
    """
    environ = os.environ if environ is None else environ

    values: dict[str, Any] = {}
    if store is not None:
        values.update(store.load())
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    unknown = set(values) - set(SETTINGS_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown settings: {', '.join(sorted(unknown))}")

    try:
        provider = Provider(values.get("provider", Provider.OPENAI))
    except ValueError as e:
        available = ", ".join(p.value for p in Provider)
        raise ConfigurationError(
            f"Unsupported provider: {values.get('provider')}. Available providers: {available}"
        ) from e
    values["provider"] = provider

    if not values.get("api_key"):
        env_key = environ.get(API_KEY_ENV_VARS[provider])
        if env_key:
            values["api_key"] = env_key

    if isinstance(values.get("enabled_card_types"), str):
        values["enabled_card_types"] = [
            t.strip() for t in values["enabled_card_types"].split(",") if t.strip()
        ]

    try:
        settings = GenerationSettings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e

    logger.debug("Resolved settings: %s", settings.safe_dump())
    return settings


def parse_card_types(value: str) -> tuple[CardType, ...]:
    """Parse a comma-separated list like 'basic,cloze' into card types."""
    types: list[CardType] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            types.append(CardType(part))
        except ValueError as e:
            available = ", ".join(t.value for t in CardType)
            raise ConfigurationError(f"Unknown card type '{part}'. Available: {available}") from e
    if not types:
        raise ConfigurationError("Select at least one card type")
    return tuple(types)
