"""Custom exception hierarchy for coop-reports."""


class CoopReportsError(Exception):
    """Base exception for all coop-reports errors."""


class DataUnavailableError(CoopReportsError):
    """Raised when the data source fails or times out."""


class InvalidRecordError(CoopReportsError):
    """Raised when a source record cannot be turned into a model."""


class ReferentialIntegrityError(InvalidRecordError):
    """Raised when an installment references a loan that does not exist."""


class ConfigurationError(CoopReportsError):
    """Raised when configuration is invalid or missing."""


class ExportError(CoopReportsError):
    """Raised when an export destination cannot be written."""
