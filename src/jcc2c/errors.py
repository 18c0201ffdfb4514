"""Exceptions raised while converting a coverage report."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for every failure of a conversion run."""


class MissingElementError(ConversionError):
    """Raised when a mandatory element or attribute is absent from the input."""


class NumericFormatError(ConversionError):
    """Raised when an attribute that must hold an integer does not parse as one."""


class ReportParseError(ConversionError):
    """Raised when the input is not well-formed (or forbidden) XML."""


class ReportIOError(ConversionError):
    """Raised when the input cannot be read or the output cannot be written."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class ConfigError(ConversionError):
    """Raised when ``.jcc2c.yml`` cannot be loaded or fails validation."""
