"""Engine configuration loading.

Thread pacing and promise expiry thresholds are fixed when a story is
created and then threaded through each page build explicitly. Nothing in the
engine reads configuration implicitly.

Resolution order for the SCENE promise expiry threshold:
1. Environment variable STORYTREE_SCENE_PROMISE_EXPIRY ("none" disables)
2. Config file (thread_pacing.scene_promise_expiry)
3. Built-in default
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

from storytree.observability.logging import get_logger

log = get_logger(__name__)

DEFAULT_CONFIG_FILE = "storytree.yaml"
SCENE_EXPIRY_ENV_VAR = "STORYTREE_SCENE_PROMISE_EXPIRY"

# Default pacing values
DEFAULT_HIGH_URGENCY_OVERDUE_PAGES = 4
DEFAULT_MEDIUM_URGENCY_OVERDUE_PAGES = 7
DEFAULT_LOW_URGENCY_OVERDUE_PAGES = 10
DEFAULT_SCENE_PROMISE_EXPIRY = 4


class ConfigError(ValueError):
    """Raised when configuration values are present but invalid."""


@dataclass(frozen=True)
class ThreadPacingConfig:
    """Page-count thresholds for thread pressure and promise expiry.

    Attributes:
        high_urgency_overdue_pages: Age at which a HIGH urgency thread is overdue.
        medium_urgency_overdue_pages: Age at which a MEDIUM urgency thread is overdue.
        low_urgency_overdue_pages: Age at which a LOW urgency thread is overdue.
        scene_promise_expiry: SCENE-scoped promises older than this are dropped.
            None disables expiry.
    """

    high_urgency_overdue_pages: int = DEFAULT_HIGH_URGENCY_OVERDUE_PAGES
    medium_urgency_overdue_pages: int = DEFAULT_MEDIUM_URGENCY_OVERDUE_PAGES
    low_urgency_overdue_pages: int = DEFAULT_LOW_URGENCY_OVERDUE_PAGES
    scene_promise_expiry: int | None = DEFAULT_SCENE_PROMISE_EXPIRY

    def __post_init__(self) -> None:
        for name in (
            "high_urgency_overdue_pages",
            "medium_urgency_overdue_pages",
            "low_urgency_overdue_pages",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")
        expiry = self.scene_promise_expiry
        if expiry is not None and (not isinstance(expiry, int) or expiry < 0):
            raise ConfigError(
                f"scene_promise_expiry must be a non-negative integer or None, got {expiry!r}"
            )

    def overdue_threshold(self, urgency: str) -> int:
        """Return the overdue threshold for an urgency level.

        Unknown urgencies fall back to the LOW threshold.
        """
        return {
            "HIGH": self.high_urgency_overdue_pages,
            "MEDIUM": self.medium_urgency_overdue_pages,
            "LOW": self.low_urgency_overdue_pages,
        }.get(str(urgency), self.low_urgency_overdue_pages)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ThreadPacingConfig:
        """Create config from dictionary.

        Args:
            data: Mapping with any of the dataclass field names. Missing keys
                keep their defaults; an explicit null for
                scene_promise_expiry disables expiry.

        Returns:
            ThreadPacingConfig instance.
        """
        return cls(
            high_urgency_overdue_pages=data.get(
                "high_urgency_overdue_pages", DEFAULT_HIGH_URGENCY_OVERDUE_PAGES
            ),
            medium_urgency_overdue_pages=data.get(
                "medium_urgency_overdue_pages", DEFAULT_MEDIUM_URGENCY_OVERDUE_PAGES
            ),
            low_urgency_overdue_pages=data.get(
                "low_urgency_overdue_pages", DEFAULT_LOW_URGENCY_OVERDUE_PAGES
            ),
            scene_promise_expiry=data.get("scene_promise_expiry", DEFAULT_SCENE_PROMISE_EXPIRY),
        )


@dataclass(frozen=True)
class EngineConfig:
    """Top-level engine configuration."""

    thread_pacing: ThreadPacingConfig = field(default_factory=ThreadPacingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        """Create config from dictionary.

        Args:
            data: Mapping with an optional ``thread_pacing`` section.

        Returns:
            EngineConfig instance.
        """
        pacing_data = data.get("thread_pacing") or {}
        if not isinstance(pacing_data, dict):
            raise ConfigError("thread_pacing must be a mapping")
        return cls(thread_pacing=ThreadPacingConfig.from_dict(dict(pacing_data)))


def _parse_expiry_override(raw: str) -> int | None:
    value = raw.strip().lower()
    if value in ("", "none", "null", "off"):
        return None
    try:
        parsed = int(value)
    except ValueError as e:
        raise ConfigError(
            f"{SCENE_EXPIRY_ENV_VAR} must be an integer or 'none', got {raw!r}"
        ) from e
    if parsed < 0:
        raise ConfigError(f"{SCENE_EXPIRY_ENV_VAR} must be non-negative, got {parsed}")
    return parsed


def _apply_env_overrides(config: EngineConfig) -> EngineConfig:
    raw = os.getenv(SCENE_EXPIRY_ENV_VAR)
    if raw is None:
        return config
    pacing = config.thread_pacing
    return EngineConfig(
        thread_pacing=ThreadPacingConfig(
            high_urgency_overdue_pages=pacing.high_urgency_overdue_pages,
            medium_urgency_overdue_pages=pacing.medium_urgency_overdue_pages,
            low_urgency_overdue_pages=pacing.low_urgency_overdue_pages,
            scene_promise_expiry=_parse_expiry_override(raw),
        )
    )


def load_engine_config(config_path: Path | None = None) -> EngineConfig:
    """Load engine configuration.

    Args:
        config_path: YAML file to read. When None or missing, defaults are used.

    Returns:
        EngineConfig with environment overrides applied.

    Raises:
        ConfigError: If a value in the file or environment is invalid.
    """
    if config_path is None or not config_path.exists():
        log.debug("engine_config_defaults", path=str(config_path) if config_path else None)
        return _apply_env_overrides(EngineConfig())

    from ruamel.yaml import YAML
    from ruamel.yaml.error import YAMLError

    yaml = YAML(typ="safe")
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except OSError as e:
        log.warning("engine_config_load_failed", path=str(config_path), error=str(e))
        return _apply_env_overrides(EngineConfig())
    except YAMLError as e:
        log.warning("engine_config_parse_failed", path=str(config_path), error=str(e))
        return _apply_env_overrides(EngineConfig())

    if data is None:
        return _apply_env_overrides(EngineConfig())
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")

    config = EngineConfig.from_dict(dict(data))
    log.debug("engine_config_loaded", path=str(config_path))
    return _apply_env_overrides(config)
