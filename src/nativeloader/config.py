"""Configuration for native library extraction.

Settings are merged with the following priority (highest to lowest):
1. Runtime Parameters (passed directly to functions)
2. Environment Variables (prefixed with NATIVELOADER_)
3. Project Config ([tool.nativeloader] in pyproject.toml)
4. Defaults (hardcoded fallbacks)
"""

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_TEMP_PREFIX = "nativeResource"


class LoaderConfig(BaseModel):
    """Settings controlling where and how resources are materialized."""

    temp_prefix: str = Field(
        default=DEFAULT_TEMP_PREFIX,
        description="Name prefix of the per-extraction scratch directory",
    )

    temp_root: Optional[Path] = Field(
        default=None,
        description="Parent directory for scratch directories (system temp if unset)",
    )

    verbose: bool = Field(
        default=False,
        description="Log every extraction and load step",
    )

    model_config = {
        "extra": "forbid",
    }

    @field_validator("temp_prefix")
    @classmethod
    def _prefix_is_a_plain_name(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError("temp_prefix must be a non-empty name without separators")
        return value


def _load_from_pyproject_toml() -> dict[str, Any]:
    """Load configuration from [tool.nativeloader] in the nearest pyproject.toml.

    Returns:
        Dictionary with config values, or empty dict if not found.
    """
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        try:
            import tomli as tomllib  # noqa: F401
        except ImportError:
            return {}

    current_dir = Path.cwd()
    for path in [current_dir] + list(current_dir.parents):
        pyproject_path = path / "pyproject.toml"
        if pyproject_path.exists():
            try:
                with open(pyproject_path, "rb") as f:
                    data = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError):
                continue
            section = data.get("tool", {}).get("nativeloader")
            if section is not None:
                return dict(section)

    return {}


def _load_from_env() -> dict[str, Any]:
    """Load configuration from NATIVELOADER_* environment variables."""
    config: dict[str, Any] = {}

    env_mapping = {
        "NATIVELOADER_TEMP_PREFIX": "temp_prefix",
        "NATIVELOADER_TEMP_ROOT": "temp_root",
        "NATIVELOADER_VERBOSE": "verbose",
    }

    for env_var, config_key in env_mapping.items():
        value = os.getenv(env_var)
        if value is None:
            continue
        if config_key == "verbose":
            config[config_key] = value.lower() in ("true", "1", "yes", "on")
        else:
            config[config_key] = value

    return config


def load_config(
    temp_prefix: Optional[str] = None,
    temp_root: Optional[Path] = None,
    verbose: Optional[bool] = None,
) -> LoaderConfig:
    """Build a LoaderConfig with hierarchical priority.

    Args:
        temp_prefix: Scratch directory name prefix.
        temp_root: Parent directory for scratch directories.
        verbose: Enable step-by-step logging.

    Returns:
        LoaderConfig instance with merged configuration.
    """
    runtime_config: dict[str, Any] = {}
    if temp_prefix is not None:
        runtime_config["temp_prefix"] = temp_prefix
    if temp_root is not None:
        runtime_config["temp_root"] = temp_root
    if verbose is not None:
        runtime_config["verbose"] = verbose

    merged_config = LoaderConfig().model_dump()
    merged_config.update(_load_from_pyproject_toml())
    merged_config.update(_load_from_env())
    merged_config.update(runtime_config)

    return LoaderConfig(**merged_config)
