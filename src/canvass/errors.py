"""Exception hierarchy for canvass.

Low layers (storage, export, serialization, config) raise these.
SurveyApp catches them at its boundary, logs them and records the
outcome as an OperationStatus instead of letting them escape.
"""


class CanvassError(Exception):
    """Base class for all canvass errors."""
    pass


class StorageError(CanvassError):
    """Raised when the key-value store cannot be read or written."""
    pass


class PayloadError(CanvassError, ValueError):
    """Raised when a persisted or imported payload cannot be decoded."""
    pass


class ExportError(CanvassError):
    """Raised when the export file cannot be written or shared."""
    pass


class ConfigError(CanvassError):
    """Raised for unreadable or invalid configuration."""
    pass


class RecordNotFound(CanvassError, LookupError):
    """Raised when a record id no longer exists in the list."""

    def __init__(self, record_id: str):
        super().__init__(f"No survey record with id {record_id!r}")
        self.record_id = record_id


class CorruptStoreError(StorageError):
    """Raised when the store file exists but does not hold a JSON object."""
    pass
