"""Settings for the chart computation engine and logging setup."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from healthcharts.data.models import NormalizationMode

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class ConfigurationError(RuntimeError):
    """Raised when a configuration file or value is invalid."""


@dataclass(slots=True)
class SmoothingConfig:
    max_points_per_bin: int = 10


@dataclass(slots=True)
class DistributionConfig:
    interval_count: int = 25
    target_bin_count: int = 15
    min_bins: int = 5
    max_bins: int = 50


@dataclass(slots=True)
class NormalizationConfig:
    mode: NormalizationMode = NormalizationMode.PERCENTAGE_OF_MAX


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    file: Optional[Path] = None


@dataclass(slots=True)
class Settings:
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    distribution: DistributionConfig = field(default_factory=DistributionConfig)
    normalization: NormalizationConfig = field(default_factory=NormalizationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    timezone: Optional[str] = None


def _load_file(path: Path) -> Dict[str, object]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file {path} does not exist")
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            raw = yaml.safe_load(text)
        elif suffix == ".json":
            raw = json.loads(text)
        else:
            raise ConfigurationError("Unsupported configuration format; use YAML or JSON")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Invalid configuration format: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError("Configuration root must be a mapping")
    return raw


def _section(raw: Dict[str, object], name: str) -> Dict[str, object]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"`{name}` must be a mapping")
    return value


def _check_keys(section: str, values: Dict[str, object], allowed: List[str]) -> None:
    unknown = sorted(set(values) - set(allowed))
    if unknown:
        raise ConfigurationError(f"Unknown key(s) in `{section}`: {', '.join(unknown)}")


def _build(cls, section: str, values: Dict[str, object]):
    _check_keys(section, values, [item.name for item in fields(cls)])
    try:
        return cls(**values)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid `{section}` section: {exc}") from exc


def _positive_int(section: str, name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"`{section}.{name}` must be a positive integer")
    return value


def _parse_mode(value: object) -> NormalizationMode:
    if isinstance(value, NormalizationMode):
        return value
    text = str(value).strip()
    for mode in NormalizationMode:
        if text.lower() in {mode.value, mode.name.lower()} or text == mode.value.title().replace("_", ""):
            return mode
    raise ConfigurationError(f"Unknown normalization mode `{value}`")


def _validate(settings: Settings) -> None:
    _positive_int("smoothing", "max_points_per_bin", settings.smoothing.max_points_per_bin)
    distribution = settings.distribution
    for name in ("interval_count", "target_bin_count", "min_bins", "max_bins"):
        _positive_int("distribution", name, getattr(distribution, name))
    if distribution.min_bins > distribution.max_bins:
        raise ConfigurationError("`distribution.min_bins` must not exceed `distribution.max_bins`")

    level = str(settings.logging.level).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Unknown logging level `{settings.logging.level}`")
    settings.logging.level = level

    if settings.timezone is not None:
        if not isinstance(settings.timezone, str) or not settings.timezone:
            raise ConfigurationError("`timezone` must be an IANA zone name")
        try:
            ZoneInfo(settings.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationError(f"Unknown timezone `{settings.timezone}`") from exc


def load_settings(path: Optional[Path | str] = None) -> Settings:
    """Read settings from a YAML or JSON file; defaults when ``path`` is ``None``."""
    if path is None:
        return Settings()

    raw = _load_file(Path(path))
    _check_keys("settings", raw, [item.name for item in fields(Settings)])

    normalization_raw = dict(_section(raw, "normalization"))
    if "mode" in normalization_raw:
        normalization_raw["mode"] = _parse_mode(normalization_raw["mode"])
    logging_raw = dict(_section(raw, "logging"))
    if logging_raw.get("file"):
        logging_raw["file"] = Path(str(logging_raw["file"]))

    timezone = raw.get("timezone")
    if timezone is not None and not isinstance(timezone, str):
        raise ConfigurationError("`timezone` must be a string")

    settings = Settings(
        smoothing=_build(SmoothingConfig, "smoothing", _section(raw, "smoothing")),
        distribution=_build(DistributionConfig, "distribution", _section(raw, "distribution")),
        normalization=_build(NormalizationConfig, "normalization", normalization_raw),
        logging=_build(LoggingConfig, "logging", logging_raw),
        timezone=timezone or None,
    )
    _validate(settings)
    return settings


def setup_logging(level: int | str = logging.INFO, log_file: Optional[Path | str] = None) -> None:
    """Configure console logging plus an optional rotating log file."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path,
                maxBytes=1_000_000,
                backupCount=3,
                encoding="utf-8",
            )
        )
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


__all__ = [
    "ConfigurationError",
    "DistributionConfig",
    "LoggingConfig",
    "NormalizationConfig",
    "Settings",
    "SmoothingConfig",
    "load_settings",
    "setup_logging",
]
