"""Error taxonomy for a backup run.

Every failure is fatal: the CLI catches `HarvestBackupError`, prints the
message and exits with a non-zero code.
"""

from __future__ import annotations


class HarvestBackupError(Exception):
    """Base class for every expected failure of the tool."""


class ConfigurationError(HarvestBackupError):
    """Required configuration (credentials, account) is missing."""


class AuthenticationError(HarvestBackupError):
    """The session status check did not report a success status."""

    def __init__(self, status_code: int | None) -> None:
        self.status_code = status_code
        super().__init__(f"Unable to login to Harvest (status {status_code})")


class HarvestAPIError(HarvestBackupError):
    """A remote call failed at the transport level or returned a non-2xx status."""


class LookupResolutionError(HarvestBackupError):
    """A foreign id referenced by a fetched record has no lookup entry."""

    def __init__(self, kind: str, key: object, *, referenced_by: str | None = None) -> None:
        self.kind = kind
        self.key = key
        self.referenced_by = referenced_by
        message = f"Unknown {kind} id {key!r}"
        if referenced_by:
            message += f" (referenced by {referenced_by})"
        super().__init__(message)


class ExportWriteError(HarvestBackupError):
    """The output file could not be created or written."""
