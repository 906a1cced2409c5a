"""Category weight configuration for eligibility scoring."""

from __future__ import annotations

import json
import math
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.screening.models import Weights
from src.utils.logging import get_logger

logger = get_logger("screening.config")

DEFAULT_WEIGHTS = Weights()

WEIGHT_KEYS = ("skills", "experience", "education", "certs", "location")

_RADIX_PREFIXES = ("0x", "0o", "0b")


def parse_weight(value: Any, default: float) -> float:
    """Parse a single weight value the way JavaScript's `Number()` would.

    Missing, empty, unparseable or non-finite values yield `default`;
    negative values are clamped to 0. Unsigned `0x`/`0o`/`0b` literals are
    accepted, digit separators (`1_0`) are not, and whitespace-only strings
    count as empty.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return default
    else:
        text = str(value).strip()
        if not text or "_" in text:
            return default
        try:
            if text[:2].lower() in _RADIX_PREFIXES:
                number = float(int(text, 0))
            else:
                number = float(text)
        except (ValueError, OverflowError):
            return default
    if not math.isfinite(number):
        return default
    return max(0.0, number)


class WeightSettings(BaseSettings):
    """Category weights read from `ATS_WEIGHT_*` environment variables.

    The weights need not sum to 100; the composite score divides the
    weighted sum by 100 regardless.
    """

    model_config = SettingsConfigDict(
        env_prefix="ATS_WEIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    skills: float = Field(
        default=DEFAULT_WEIGHTS.skills, ge=0, description="Weight for skills match"
    )
    experience: float = Field(
        default=DEFAULT_WEIGHTS.experience, ge=0, description="Weight for experience"
    )
    education: float = Field(
        default=DEFAULT_WEIGHTS.education, ge=0, description="Weight for education"
    )
    certs: float = Field(
        default=DEFAULT_WEIGHTS.certs, ge=0, description="Weight for certifications"
    )
    location: float = Field(
        default=DEFAULT_WEIGHTS.location, ge=0, description="Weight for location"
    )

    @field_validator(*WEIGHT_KEYS, mode="before")
    @classmethod
    def parse_or_default(cls, v: Any, info: ValidationInfo) -> float:
        """Fall back to the category default instead of failing validation."""
        default = getattr(DEFAULT_WEIGHTS, info.field_name)
        return parse_weight(v, default)

    def to_weights(self) -> Weights:
        return Weights(**{key: getattr(self, key) for key in WEIGHT_KEYS})


def load_weights_file(path: Path) -> dict[str, Any]:
    """Read weight values from a YAML or JSON file.

    The mapping may be top-level or nested under a `weights` key. Returns an
    empty dict (and logs a warning) when the file is missing or unreadable.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Weights file not readable ({path}): {e}")
        return {}

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        logger.warning(f"Invalid weights file ({path}): {e}")
        return {}

    if isinstance(data, Mapping) and isinstance(data.get("weights"), Mapping):
        data = data["weights"]
    if not isinstance(data, Mapping):
        logger.warning(f"Weights file must contain a mapping: {path}")
        return {}
    return {key: data[key] for key in WEIGHT_KEYS if key in data}


class WeightConfig:
    """Owns the active weight set.

    The active set is an immutable `Weights` snapshot. `reload_weights`
    builds a complete new snapshot and swaps the reference, so readers see
    either the old set or the new one, never a mix.

    Source precedence (highest first): `overrides`, `weights_file`,
    `ATS_WEIGHT_*` environment variables, `.env`, defaults.
    """

    def __init__(
        self,
        *,
        weights_file: Path | str | None = None,
        overrides: Mapping[str, Any] | None = None,
        env_file: Path | str | None = ".env",
    ) -> None:
        self.weights_file = Path(weights_file) if weights_file else None
        self.overrides = dict(overrides or {})
        self.env_file = env_file
        self._reload_lock = threading.Lock()
        self._weights = self._load()

    def _load(self) -> Weights:
        values: dict[str, Any] = {}
        if self.weights_file is not None:
            values.update(load_weights_file(self.weights_file))
        values.update(
            {key: value for key, value in self.overrides.items() if key in WEIGHT_KEYS}
        )
        settings = WeightSettings(_env_file=self.env_file, **values)  # type: ignore[call-arg]
        return settings.to_weights()

    def get_weights(self) -> Weights:
        """Return the active weight snapshot."""
        return self._weights

    def reload_weights(self) -> Weights:
        """Re-read every source and atomically replace the active set."""
        with self._reload_lock:
            weights = self._load()
            self._weights = weights
        logger.info(f"Reloaded ATS weights: {weights.model_dump()}")
        return weights


_weight_config: WeightConfig | None = None


def get_weight_config() -> WeightConfig:
    """Get the default weight configuration singleton."""
    global _weight_config
    if _weight_config is None:
        from src.config.settings import get_settings

        _weight_config = WeightConfig(weights_file=get_settings().weights_file)
    return _weight_config


def reset_weight_config() -> None:
    """Reset the weight configuration singleton (useful for testing)."""
    global _weight_config
    _weight_config = None
