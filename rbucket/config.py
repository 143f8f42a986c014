"""
Configuration Loader - Bucket limits from YAML and environment variables

config.yaml layout:

    bucket:
      items_limit: 100
      history_limit: 100

Environment overrides (applied by BucketConfig.with_env_overrides()):
    RBUCKET_ITEMS_LIMIT
    RBUCKET_HISTORY_LIMIT
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

import yaml

from rbucket.bucket import DEFAULT_HISTORY_LIMIT, DEFAULT_ITEMS_LIMIT

logger = logging.getLogger(__name__)

_ENV_OVERRIDES = {
    'items_limit': 'RBUCKET_ITEMS_LIMIT',
    'history_limit': 'RBUCKET_HISTORY_LIMIT',
}


def _as_limit(field: str, value: Any) -> int:
    # bool is an int subclass; "true" is never a meaningful limit
    if isinstance(value, bool):
        raise ValueError(f"bucket.{field} must be an integer, got {value!r}")
    # YAML reads "2.5" as a float; int() would silently truncate it
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"bucket.{field} must be an integer, got {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"bucket.{field} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class BucketConfig:
    """Limits used to build a Bucket. Zero or negative values are allowed."""

    items_limit: int = DEFAULT_ITEMS_LIMIT
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "BucketConfig":
        """
        Build from a parsed config mapping

        Accepts either the full document (with a 'bucket' section) or the
        section itself. Missing keys fall back to the defaults.
        """
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        section = data.get('bucket', data)
        if section is None:
            return cls()
        if not isinstance(section, Mapping):
            raise ValueError("Configuration section 'bucket' must be a mapping")

        values = {}
        for field in ('items_limit', 'history_limit'):
            if field in section:
                values[field] = _as_limit(field, section[field])
        return cls(**values)

    def with_env_overrides(self, environ: Optional[Mapping[str, str]] = None) -> "BucketConfig":
        """Return a copy with RBUCKET_* environment variables applied."""
        env = os.environ if environ is None else environ
        overrides = {}
        for field, var in _ENV_OVERRIDES.items():
            raw = env.get(var)
            if raw is None or raw == '':
                continue
            overrides[field] = _as_limit(field, raw.strip())
            logger.debug(f"{var} overrides bucket.{field}: {overrides[field]}")
        if not overrides:
            return self
        return replace(self, **overrides)


def load_config(config_path: str = "config.yaml", apply_env: bool = True) -> BucketConfig:
    """
    Load bucket limits from a YAML file

    Args:
        config_path: Path to the YAML file
        apply_env: Apply RBUCKET_* environment overrides on top of the file

    Raises:
        FileNotFoundError: If config_path does not exist
        ValueError: If the bucket section or a limit is malformed
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    config = BucketConfig.from_dict(data)
    if apply_env:
        config = config.with_env_overrides()

    logger.debug(
        f"Loaded bucket config from {config_path}: "
        f"items_limit={config.items_limit}, history_limit={config.history_limit}"
    )
    return config
