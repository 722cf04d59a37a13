# seo_auditor/config.py
"""
Centralized configuration management.

Handles loading defaults, merging in settings from pyproject.toml,
and applying runtime overrides.
"""
from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, MutableMapping

import tomli

log = logging.getLogger(__name__)

RENDERERS = ("playwright", "httpx")

# This is the baseline configuration dictionary.
DEFAULT_CONFIG: dict[str, Any] = {
    # "playwright" renders JavaScript and measures Web Vitals; "httpx" only fetches HTML.
    "renderer": "playwright",
    "navigation_timeout": 30.0,  # seconds
    "wait_until": "networkidle",
    "headless": True,
    "user_agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    # --- Web Vitals ---
    "collect_performance": True,
    # Extra wait after network idle so buffered observers flush.
    "vitals_settle_ms": 500,
    # --- Well-known path probes ---
    "probe_timeout": 5.0,
    "probe_verify_tls": False,
    # --- Link classification ---
    # If True, subdomains of the same registrable domain count as internal links.
    "use_registrable_domain": False,
    "cache": {
        "enabled": True,
        "directory": ".seo_auditor_cache",
        "expire_seconds": 6 * 3600,
    },
}


def _deep_merge_dict(
    base: MutableMapping[str, Any], overrides: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Recursively merge dicts."""
    for key, value in overrides.items():
        if isinstance(value, MutableMapping) and isinstance(
            base.get(key), MutableMapping
        ):
            base[key] = _deep_merge_dict(base[key], value)
        else:
            base[key] = value
    return base


def load_config(pyproject_path: Path | None = None) -> dict[str, Any]:
    """
    Loads configuration from defaults and merges settings from pyproject.toml.

    1. Starts with DEFAULT_CONFIG.
    2. Looks for `pyproject.toml` (current directory by default).
    3. If `pyproject.toml` is found, it merges settings from
       `[tool.seo_auditor]` over the defaults.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if pyproject_path is None:
        pyproject_path = Path.cwd() / "pyproject.toml"

    if not pyproject_path.exists():
        log.debug(
            "No pyproject.toml found at %s. Using default config.", pyproject_path
        )
        return config

    try:
        with pyproject_path.open("rb") as f:
            toml_data = tomli.load(f)
    except (OSError, tomli.TOMLDecodeError) as e:
        log.warning(
            "Failed to load or parse %s: %s. Using default config.",
            pyproject_path,
            e,
        )
        return config

    project_config = toml_data.get("tool", {}).get("seo_auditor", {})
    if project_config:
        log.info("Loading config from %s", pyproject_path)
        config = _deep_merge_dict(config, project_config)  # type: ignore
    else:
        log.debug("No [tool.seo_auditor] section in %s.", pyproject_path)

    if config["renderer"] not in RENDERERS:
        raise ValueError(
            f"Unknown renderer {config['renderer']!r}; expected one of {RENDERERS}"
        )
    return config
