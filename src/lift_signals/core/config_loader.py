"""
YAML → typed threshold loader.

Loads plateau and deload thresholds from thresholds.yaml (bundled with the
package) and optionally merges user overrides from
~/.lift-signals/thresholds.yaml.

Usage:
    from lift_signals.core.config_loader import load_thresholds
    plateau, deload = load_thresholds()
    check_deload(history, thresholds=deload)

The engine functions never call this module themselves; only the CLI does,
so library callers keep full control over which numbers are in effect.
If a YAML file cannot be read or parsed, a warning is issued and the file is
ignored, which leaves the defaults from config.py in place.
"""

import dataclasses
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from .config import DeloadThresholds, PlateauThresholds

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} (with a warning) if it is unusable."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"lift-signals: ignoring {path} ({exc})", stacklevel=2)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        warnings.warn(f"lift-signals: ignoring {path} (top level is not a mapping)", stacklevel=2)
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _build(cls: type, section: Any, name: str) -> Any:
    """Instantiate a thresholds dataclass from one YAML section."""
    if not isinstance(section, dict):
        return cls()
    defaults = cls()
    known = {f.name for f in dataclasses.fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in section.items():
        if key not in known:
            warnings.warn(f"lift-signals: unknown {name} threshold '{key}' ignored", stacklevel=3)
            continue
        default = getattr(defaults, key)
        kwargs[key] = int(value) if isinstance(default, int) else float(value)
    return cls(**kwargs)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path:
    """Return the path to the bundled thresholds.yaml."""
    # config_loader.py lives at src/lift_signals/core/config_loader.py
    return Path(__file__).parent.parent / "thresholds.yaml"


def get_user_yaml_path() -> Path | None:
    """Return ~/.lift-signals/thresholds.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift-signals" / "thresholds.yaml"
    return p if p.exists() else None


def load_model_config(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge threshold configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/lift_signals/thresholds.yaml
    2. ``user_path``, or ~/.lift-signals/thresholds.yaml when not given

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled.exists():
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = user_path if user_path is not None else get_user_yaml_path()
    if user is not None and user.exists():
        config = _deep_merge(config, _load_yaml_file(user))

    return config


def load_thresholds(
    config: dict[str, Any] | None = None,
) -> tuple[PlateauThresholds, DeloadThresholds]:
    """
    Build threshold objects from the ``plateau`` and ``deload`` sections.

    Args:
        config: Already-merged config; loaded with load_model_config() if None

    Returns:
        (PlateauThresholds, DeloadThresholds).  Missing keys keep defaults.
    """
    if config is None:
        config = load_model_config()
    return (
        _build(PlateauThresholds, config.get("plateau"), "plateau"),
        _build(DeloadThresholds, config.get("deload"), "deload"),
    )
