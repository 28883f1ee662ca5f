"""Runtime configuration for the remediation recovery engine.

Every heuristic constant used by the recovery and confidence layers lives
here so it can be tuned without touching control flow. Defaults reproduce
the fixed policy; a YAML file, environment variables (``A11YFIXER_*``)
and keyword overrides adjust it per deployment or per test.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

ENV_PREFIX = "A11YFIXER_"

_ENV_LOADED = False


@dataclass(frozen=True)
class RecoveryConfig:
    """Tunable constants for fuzzy matching, confidence tiers and snapshots."""

    # Selector fuzzy matching
    selector_match_threshold: float = 0.5
    tag_weight: float = 0.35
    id_weight: float = 0.35
    class_weight: float = 0.15
    attribute_weight: float = 0.10
    text_weight: float = 0.05

    # Confidence lookup values (0-100)
    css_only_confidence: int = 85
    aria_attribute_confidence: int = 80
    generated_text_confidence: int = 70
    behavioral_confidence: int = 30

    # Tier boundaries
    high_tier_min: int = 95
    medium_tier_min: int = 80

    # Housekeeping
    max_snapshots_per_session: int = 50
    max_events: int = 1000

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{f.name} must be a number, got {value!r}")
        if not 0.0 <= self.selector_match_threshold <= 1.0:
            raise ValueError(
                "selector_match_threshold must be within [0, 1], "
                f"got {self.selector_match_threshold}"
            )
        for name in ("tag_weight", "id_weight", "class_weight", "attribute_weight", "text_weight"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        for name in (
            "css_only_confidence",
            "aria_attribute_confidence",
            "generated_text_confidence",
            "behavioral_confidence",
            "high_tier_min",
            "medium_tier_min",
        ):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be within [0, 100], got {value}")
        if self.medium_tier_min > self.high_tier_min:
            raise ValueError("medium_tier_min cannot exceed high_tier_min")
        if self.max_snapshots_per_session < 1:
            raise ValueError("max_snapshots_per_session must be at least 1")
        if self.max_events < 1:
            raise ValueError("max_events must be at least 1")

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "RecoveryConfig":
        """Create configuration from a dictionary, ignoring unknown keys.

        Values are converted to each field's numeric type, so quoted YAML
        numbers are accepted; anything else raises ``ValueError``.
        """
        return cls(**{
            f.name: _coerce(config[f.name], f.default, f.name)
            for f in fields(cls)
            if f.name in config
        })

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "RecoveryConfig":
        """Load configuration from a YAML file.

        Settings may sit at the top level or under a ``recovery`` key.
        """
        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, Mapping):
            raise ValueError(f"Expected a mapping in {yaml_path}")
        section = data.get("recovery", data)
        if not isinstance(section, Mapping):
            raise ValueError(f"Expected a mapping under 'recovery' in {yaml_path}")
        return cls.from_dict(section)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def with_overrides(self, **overrides: Any) -> "RecoveryConfig":
        """Return a copy with the non-None overrides applied."""
        applicable = {key: value for key, value in overrides.items() if value is not None}
        if not applicable:
            return self
        unknown = set(applicable) - {f.name for f in fields(self)}
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return replace(self, **applicable)


DEFAULT_CONFIG = RecoveryConfig()


def load_recovery_config(yaml_path: Optional[str] = None, **overrides: Any) -> RecoveryConfig:
    """Load configuration from a YAML file, ``A11YFIXER_*`` variables and overrides.

    Precedence, lowest first: defaults, the YAML file (``yaml_path`` or
    ``A11YFIXER_CONFIG_FILE``), environment variables, keyword overrides.
    Environment values are coerced to the type of the field default.
    """
    _ensure_env_loaded()
    yaml_path = yaml_path or os.getenv(f"{ENV_PREFIX}CONFIG_FILE")
    base = RecoveryConfig.from_yaml(yaml_path).to_dict() if yaml_path else {}
    env_values: Dict[str, Any] = {}
    for f in fields(RecoveryConfig):
        raw = os.getenv(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is None or not raw.strip():
            continue
        env_values[f.name] = _coerce(raw, f.default, f"{ENV_PREFIX}{f.name.upper()}")
    return RecoveryConfig.from_dict({**base, **env_values}).with_overrides(**overrides)


def _coerce(value: Any, default: Any, label: str) -> Any:
    """Convert ``value`` to the numeric type of ``default``."""
    if isinstance(value, str):
        try:
            return type(default)(value.strip())
        except ValueError as exc:
            raise ValueError(f"Invalid value for {label}: {value!r}") from exc
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Invalid value for {label}: {value!r}")
    if isinstance(default, int) and not float(value).is_integer():
        raise ValueError(f"Invalid value for {label}: {value!r}")
    return type(default)(value)


def _ensure_env_loaded(dotenv_path: Optional[Path] = None) -> None:
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True
    path = dotenv_path or Path.cwd() / ".env"
    if path.exists():
        load_dotenv(dotenv_path=path)
