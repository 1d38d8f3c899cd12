"""TOML config loader: packaged defaults + optional user file merge."""

import tomllib
from pathlib import Path

import numpy as np
import tomli_w

from ..trajectory.dataset import PoseConvention

DEFAULTS_PATH = Path(__file__).parent / "defaults.toml"


def load_defaults() -> dict:
    """Load the packaged defaults.toml."""
    with open(DEFAULTS_PATH, "rb") as f:
        return tomllib.load(f)


def load_config(config_toml: Path | None = None) -> dict:
    """Load a user config file, merged over defaults."""
    config = load_defaults()
    if config_toml is not None and Path(config_toml).exists():
        with open(config_toml, "rb") as f:
            overrides = tomllib.load(f)
        _deep_merge(config, overrides)
    return config


def save_config(config_toml: Path, config: dict) -> None:
    """Write a config file."""
    with open(config_toml, "wb") as f:
        tomli_w.dump(config, f)


def get_convention(config: dict) -> PoseConvention:
    """Pose convention from [parser].convention, raising on unknown names."""
    name = config.get("parser", {}).get("convention", PoseConvention.WORLD_TO_CAMERA.value)
    try:
        return PoseConvention(name)
    except ValueError:
        valid = ", ".join(c.value for c in PoseConvention)
        raise ValueError(f"Unknown pose convention: {name!r}. Valid: {valid}") from None


def get_fallback_k(config: dict) -> np.ndarray:
    """The [camera].fallback_k matrix as a 3x3 array."""
    k = np.array(config.get("camera", {}).get("fallback_k", np.identity(3).tolist()),
                 dtype=np.float64)
    if k.shape != (3, 3):
        raise ValueError(f"camera.fallback_k must be 3x3, got shape {k.shape}")
    return k


def get_color(config: dict, key: str) -> tuple[float, float, float]:
    """An RGB triple from the [viewer] section."""
    value = config.get("viewer", {}).get(key)
    if value is None or len(value) != 3:
        raise ValueError(f"viewer.{key} must be a list of 3 numbers")
    return (float(value[0]), float(value[1]), float(value[2]))


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place, recursing into dicts."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
