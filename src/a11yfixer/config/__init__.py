"""Configuration for a11yfixer."""

from .settings import DEFAULT_CONFIG, ENV_PREFIX, RecoveryConfig, load_recovery_config

__all__ = ["DEFAULT_CONFIG", "ENV_PREFIX", "RecoveryConfig", "load_recovery_config"]
