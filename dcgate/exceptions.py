"""Custom exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dcgate.publisher import PublishOutcome


class DcgateError(Exception):
    """Base exception for dcgate."""

    pass


class ReportParseError(DcgateError):
    """Report is not a readable Dependency-Check XML document."""

    pass


class ConfigError(DcgateError):
    """Configuration error."""

    pass


class ThresholdsExceededError(DcgateError):
    """Risk gate failed the build and stop_build is set."""

    def __init__(self, outcome: PublishOutcome):
        super().__init__("Vulnerability thresholds exceeded, stopping build.")
        self.outcome = outcome
