"""Configuration parsing from ``.covdelta.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from covdelta.owners import CodeOwners, OwnerResolver

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".covdelta.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_MAX_PERCENT = 100.0


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


@dataclass
class DiffConfig:
    """Path handling and ownership configuration for diffs."""

    base_dir: str = ""
    """Prefix stripped from coverage paths (e.g. the CI checkout directory)."""

    codeowners_path: str = ""
    """Explicit CODEOWNERS file; searched for from ``base_dir`` when empty."""


@dataclass
class ThresholdConfig:
    """Tolerances used when flagging regressed files."""

    line_drop_tolerance: float = 0.0
    """Percentage points of line coverage a file may lose."""

    branch_drop_tolerance: float = 0.0
    """Percentage points of branch coverage a file may lose."""


@dataclass
class CovDeltaConfig:
    """Complete covdelta configuration."""

    diff: DiffConfig = field(default_factory=DiffConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    return section if isinstance(section, dict) else {}


def _parse_diff_config(raw: dict[str, Any]) -> DiffConfig:
    """Parse diff configuration from raw YAML."""
    diff_raw = _section(raw, "diff")
    return DiffConfig(
        base_dir=str(diff_raw.get("base_dir", os.environ.get("COVDELTA_BASE_DIR", ""))),
        codeowners_path=str(diff_raw.get("codeowners_path", "")),
    )


def _parse_threshold_config(raw: dict[str, Any]) -> ThresholdConfig:
    """Parse regression tolerances from raw YAML."""
    thresholds_raw = _section(raw, "thresholds")
    return ThresholdConfig(
        line_drop_tolerance=float(thresholds_raw.get("line_drop_tolerance", 0.0)),
        branch_drop_tolerance=float(thresholds_raw.get("branch_drop_tolerance", 0.0)),
    )


def load_config(root: str | Path) -> CovDeltaConfig:
    """Load and parse ``.covdelta.yml`` from *root*.

    Falls back to defaults and environment variables when the YAML file is
    missing or incomplete.
    """
    config_file = Path(root).resolve() / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        else:
            logger.debug("Ignoring %s: top level is not a mapping", config_file)

    return CovDeltaConfig(
        diff=_parse_diff_config(raw),
        thresholds=_parse_threshold_config(raw),
    )


def _validate_threshold_config(thresholds: ThresholdConfig) -> list[str]:
    errors: list[str] = []
    for name in ("line_drop_tolerance", "branch_drop_tolerance"):
        value = getattr(thresholds, name)
        if not 0.0 <= value <= _MAX_PERCENT:
            errors.append(f"thresholds.{name} must be between 0 and 100, got {value}")
    return errors


def validate_config(config: CovDeltaConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []
    if config.diff.codeowners_path and not Path(config.diff.codeowners_path).is_file():
        errors.append(f"diff.codeowners_path does not exist: {config.diff.codeowners_path}")
    errors.extend(_validate_threshold_config(config.thresholds))
    return errors


def resolver_from_config(config: CovDeltaConfig) -> OwnerResolver:
    """Build the owner resolver described by *config*."""
    if config.diff.codeowners_path:
        return CodeOwners.from_file(config.diff.codeowners_path)
    return CodeOwners.from_directory(config.diff.base_dir or None)
