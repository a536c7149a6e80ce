"""Configuration file support for dcgate (.dcgate.yml)."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from dcgate.exceptions import ConfigError
from dcgate.gate import GATED_SEVERITIES, ThresholdGroup, Thresholds

DEFAULT_CONFIG_NAME = ".dcgate.yml"
DEFAULT_PATTERN = "**/dependency-check-report.xml"


@dataclass
class Config:
    """dcgate configuration loaded from .dcgate.yml."""

    pattern: str = DEFAULT_PATTERN
    stop_build: bool = False
    ignore_no_results: bool = False
    thresholds: Thresholds = field(default_factory=Thresholds)


def load_config(config_path: str | None = None, project_root: str | None = None) -> Config:
    """Load configuration from a YAML file.

    Priority: explicit --config path > .dcgate.yml in project root > defaults.
    """
    path = None

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    elif project_root:
        candidate = Path(project_root) / DEFAULT_CONFIG_NAME
        if candidate.exists():
            path = candidate

    if path is None:
        return Config()

    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if raw is None:
        return Config()
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must be a YAML mapping, got {type(raw).__name__}")

    return _parse_config(raw)


def validate_pattern(pattern) -> str:
    """Check a report glob; it is matched relative to the workspace."""
    if not isinstance(pattern, str) or not pattern.strip():
        raise ConfigError("pattern must be a non-empty string")
    pattern = pattern.strip()
    if Path(pattern).is_absolute():
        raise ConfigError(f"pattern must be relative to the workspace, got '{pattern}'")
    return pattern


def _parse_config(raw: dict) -> Config:
    """Parse and validate raw YAML dict into a Config object."""
    config = Config()

    if "pattern" in raw:
        config.pattern = validate_pattern(raw["pattern"])

    for name in ("stop_build", "ignore_no_results"):
        if name in raw:
            if not isinstance(raw[name], bool):
                raise ConfigError(f"{name} must be a boolean")
            setattr(config, name, raw[name])

    if "thresholds" in raw:
        thresholds = raw["thresholds"] or {}
        if not isinstance(thresholds, dict):
            raise ConfigError("thresholds must be a mapping")
        unknown = set(thresholds) - {"total", "new"}
        if unknown:
            raise ConfigError(f"Unknown threshold group(s): {', '.join(sorted(unknown))}")
        config.thresholds = Thresholds(
            total_findings=_parse_group(thresholds.get("total"), "total"),
            new_findings=_parse_group(thresholds.get("new"), "new"),
        )

    return config


def _parse_group(raw, name: str) -> ThresholdGroup:
    if raw is None:
        return ThresholdGroup()
    if not isinstance(raw, dict):
        raise ConfigError(f"thresholds.{name} must be a mapping")

    values: dict = {}
    for state in ("unstable", "failed"):
        limits = raw.get(state) or {}
        if not isinstance(limits, dict):
            raise ConfigError(f"thresholds.{name}.{state} must be a mapping")
        valid = {s.value.lower() for s in GATED_SEVERITIES}
        for severity, limit in limits.items():
            if severity not in valid:
                raise ConfigError(
                    f"thresholds.{name}.{state} keys must be one of {sorted(valid)}, got '{severity}'"
                )
            # bool is an int subclass; reject it explicitly
            if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int)):
                raise ConfigError(f"thresholds.{name}.{state}.{severity} must be an integer")
            values[f"{state}_{severity}"] = limit

    if "limit_to_analysis_exploitable" in raw:
        flag = raw["limit_to_analysis_exploitable"]
        if not isinstance(flag, bool):
            raise ConfigError(f"thresholds.{name}.limit_to_analysis_exploitable must be a boolean")
        values["limit_to_analysis_exploitable"] = flag

    return ThresholdGroup(**values)
