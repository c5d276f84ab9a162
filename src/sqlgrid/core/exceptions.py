"""Exception hierarchy for sqlgrid.

All exceptions carry an exit_code for CLI return value mapping.
Exit codes are defined in exit_codes.py.
"""

from sqlgrid.core.exit_codes import ExitCode


class SqlGridError(Exception):
    """Base exception for all sqlgrid errors."""

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputError(SqlGridError):
    """Missing result data, empty selection, unreadable input."""

    exit_code: int = ExitCode.INPUT_ERROR


class ExportError(SqlGridError):
    """Open, write or save failures while producing output."""

    exit_code: int = ExitCode.OUTPUT_ERROR


class CapabilityError(SqlGridError):
    """Optional backend (spreadsheet writer) is not installed."""

    exit_code: int = ExitCode.CAPABILITY_ERROR


class ConfigError(SqlGridError):
    """Malformed config, missing profile."""

    exit_code: int = ExitCode.CONFIG_ERROR
