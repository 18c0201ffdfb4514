"""Configuration parsing from ``.jcc2c.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from jcc2c.errors import ConfigError
from jcc2c.naming import DEFAULT_SOURCE_EXTENSION

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".jcc2c.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")
_EXTENSION_RE = re.compile(r"\.?[A-Za-z0-9_+-]+")


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


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass
class ConversionConfig:
    """How JaCoCo data is mapped onto Cobertura."""

    source_extension: str = DEFAULT_SOURCE_EXTENSION
    """Extension appended to class names to guess source filenames."""

    legacy_branch_percentage: bool = False
    """Reproduce the integer-division branch percentages of older releases."""


@dataclass
class OutputConfig:
    """Terminal output configuration."""

    summary: bool = True
    """Print the coverage summary table after a successful conversion."""


@dataclass
class Jcc2cConfig:
    """Complete jcc2c configuration from ``.jcc2c.yml``."""

    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    """Conversion configuration."""

    output: OutputConfig = field(default_factory=OutputConfig)
    """Terminal output configuration."""

    sources: list[str] = field(default_factory=list)
    """Source roots used when none are given on the command line."""


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        logger.warning("Ignoring '%s' in %s: expected a mapping", name, CONFIG_FILENAME)
        return {}
    return section


def _parse_conversion_config(raw: dict[str, Any]) -> ConversionConfig:
    """Parse the ``conversion`` section from raw YAML."""
    conversion_raw = _section(raw, "conversion")
    return ConversionConfig(
        source_extension=str(
            conversion_raw.get(
                "source_extension",
                os.environ.get("JCC2C_SOURCE_EXTENSION", DEFAULT_SOURCE_EXTENSION),
            )
        ),
        legacy_branch_percentage=_as_bool(conversion_raw.get("legacy_branch_percentage", False)),
    )


def _parse_output_config(raw: dict[str, Any]) -> OutputConfig:
    """Parse the ``output`` section from raw YAML."""
    output_raw = _section(raw, "output")
    return OutputConfig(summary=_as_bool(output_raw.get("summary", True)))


def load_config(path: str | Path | None = None) -> Jcc2cConfig:
    """Load and parse the jcc2c configuration.

    With no *path*, ``.jcc2c.yml`` in the working directory is used if it
    exists; otherwise defaults apply.

    Raises:
        ConfigError: If the file cannot be read or is not valid YAML.
    """
    config_path = Path(path) if path is not None else Path.cwd() / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.is_file():
        try:
            parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration {config_path}: {e}") from e
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        logger.debug("Loaded configuration from %s", config_path)
    elif path is not None:
        raise ConfigError(f"Configuration file not found: {config_path}")

    sources_raw = raw.get("sources", [])
    if isinstance(sources_raw, str):
        sources_raw = [sources_raw]
    elif not isinstance(sources_raw, list):
        sources_raw = []

    return Jcc2cConfig(
        conversion=_parse_conversion_config(raw),
        output=_parse_output_config(raw),
        sources=[str(source) for source in sources_raw if source],
    )


def validate_config(config: Jcc2cConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    extension = config.conversion.source_extension
    if not _EXTENSION_RE.fullmatch(extension):
        errors.append(
            "conversion.source_extension must be a file extension such as 'java' "
            f"(got: {extension!r})"
        )

    return errors
