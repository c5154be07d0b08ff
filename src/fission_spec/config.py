"""Deployment config (de)serialization.

The config lives in ``fission-deployment-config.yaml`` at the root of a spec
directory. It is written once by ``fission spec init`` behind a comment banner
and read back by anything that needs the deployment UID.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from fission_spec.models import DEPLOYMENT_CONFIG_KIND, DeploymentConfig

__all__ = [
    "CONFIG_BANNER",
    "DEPLOYMENT_CONFIG_FILENAME",
    "DeploymentConfigError",
    "dump_deployment_config",
    "load_deployment_config",
    "parse_deployment_config",
]

DEPLOYMENT_CONFIG_FILENAME = "fission-deployment-config.yaml"

CONFIG_BANNER = (
    "# This file is generated by the 'fission spec init' command.\n"
    "# See the README in this directory for background and usage information.\n"
    "# Do not edit the UID below: that will break 'fission spec apply'\n"
)

_REQUIRED_KEYS = ("apiVersion", "kind", "name", "uid")
_MISSING: object = object()


class DeploymentConfigError(ValueError):
    """Raised when a deployment config file cannot be parsed or validated."""

    def __init__(self, path: Path, errors: Iterable[str]) -> None:
        self.path = path
        self.errors = [error for error in errors if error]
        details = "\n".join(f"- {error}" for error in self.errors)
        message = f"Invalid deployment config: {path}"
        if details:
            message = f"{message}\n{details}"
        super().__init__(message)


def dump_deployment_config(config: DeploymentConfig) -> str:
    """Render *config* as YAML, banner first, keys in sorted order."""
    body = yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=True)
    return CONFIG_BANNER + body


def load_deployment_config(path: Path) -> DeploymentConfig:
    """Load and validate a deployment config file."""
    resolved = path.resolve()
    if not resolved.is_file():
        msg = f"Deployment config not found: {resolved}"
        raise FileNotFoundError(msg)
    return parse_deployment_config(resolved.read_text(encoding="utf-8"), resolved)


def parse_deployment_config(raw: str, path: Path) -> DeploymentConfig:
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise DeploymentConfigError(path, [f"YAML parse error: {str(exc).strip()}"]) from exc

    if not isinstance(data, dict):
        raise DeploymentConfigError(
            path,
            ["Top-level YAML document must be a mapping with keys: " + ", ".join(_REQUIRED_KEYS)],
        )

    errors: list[str] = []
    values = {key: _require_str(data.get(key, _MISSING), key, errors) for key in _REQUIRED_KEYS}
    kind = values["kind"]
    if kind is not None and kind != DEPLOYMENT_CONFIG_KIND:
        errors.append(f"kind must be '{DEPLOYMENT_CONFIG_KIND}', got '{kind}'")

    if errors:
        raise DeploymentConfigError(path, errors)
    return DeploymentConfig(
        api_version=str(values["apiVersion"]),
        kind=str(values["kind"]),
        name=str(values["name"]),
        uid=str(values["uid"]),
    )


def _require_str(value: Any, key: str, errors: list[str]) -> str | None:
    if value is _MISSING:
        errors.append(f"{key} is required")
        return None
    if not isinstance(value, str):
        errors.append(f"{key} must be a string")
        return None
    if not value.strip():
        errors.append(f"{key} must be a non-empty string")
        return None
    return value
