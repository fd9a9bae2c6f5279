"""Error taxonomy for certificate lifecycle management.

- ConfigError: the declaration document is unreadable or invalid.
  Fatal to the current cycle only; the next cycle retries.
- StorageError: the state store cannot be read or written. Fatal at
  startup, logged and skipped per operation afterwards.
- IssuanceError: the external issuance tool failed. Recorded as a
  ``failed`` status, never fatal to the process or the cycle.
"""

from typing import Any, Optional


class CertKeeperError(Exception):
    """Base exception for all certkeeper errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "type": type(self).__name__,
            "details": self.details,
        }


class ConfigError(CertKeeperError):
    """Malformed or invalid certificate declaration document."""


class StorageError(CertKeeperError):
    """State store unreadable, unwritable or corrupted."""


class IssuanceError(CertKeeperError):
    """The external issuance tool failed for one certificate."""

    def __init__(self, name: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, details)
        self.name = name
