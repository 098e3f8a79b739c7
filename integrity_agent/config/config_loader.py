"""Load runtime configuration for the integrity agent."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .settings import AgentConfig

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).with_name("agent.yaml")

# Pattern to match env("VAR_NAME") placeholders
ENV_PATTERN = re.compile(r'env\("([^"]+)"\)')


def _resolve_env_placeholders(value: Any) -> Any:
    """Recursively resolve env("VAR") placeholders in YAML values.

    Unset variables resolve to None so optional settings (project id,
    credentials) can simply be left out of the environment.
    """
    if isinstance(value, str):
        match = ENV_PATTERN.search(value)
        if match:
            var_name = match.group(1)
            env_value = os.getenv(var_name)
            if env_value is None:
                logger.warning(f"Environment variable {var_name} not set; leaving setting empty")
            return env_value
        return value
    elif isinstance(value, dict):
        return {k: _resolve_env_placeholders(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_env_placeholders(item) for item in value]
    else:
        return value


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge override dict into base dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _compute_config_version(yaml_content: str, override_content: Dict[str, Any]) -> str:
    """Compute SHA256 hash of YAML content + overrides for version tracking."""
    combined = {
        "yaml": yaml_content,
        "override": json.dumps(override_content, sort_keys=True),
    }
    combined_str = json.dumps(combined, sort_keys=True)
    return hashlib.sha256(combined_str.encode("utf-8")).hexdigest()[:16]


def load_agent_config(
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> AgentConfig:
    """Load agent configuration from YAML file with optional overrides.

    Args:
        path: Optional path to agent.yaml. Defaults to CONFIG_PATH.
        overrides: Optional dict deep-merged over the file contents.

    Returns:
        AgentConfig instance with resolved env placeholders and merged overrides.
    """
    target = path or CONFIG_PATH

    with target.open("r", encoding="utf-8") as handle:
        yaml_content = handle.read()
        data = yaml.safe_load(yaml_content) or {}

    data = _resolve_env_placeholders(data)

    if overrides:
        data = _deep_merge(data, overrides)

    if "metadata" not in data or data["metadata"] is None:
        data["metadata"] = {}
    data["metadata"]["config_version"] = _compute_config_version(yaml_content, overrides or {})

    return AgentConfig.model_validate(data)
