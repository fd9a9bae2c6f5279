"""
Certificate Lifecycle Tracker Module.

Keeps the authoritative state of every managed certificate and decides,
once per cycle, which certificates need issuing or renewing.

Features:
- Durable JSON state store, safe for concurrent writers
- Fixed-validity renewal decisions (90 days, renew at 10 days left)
- Concurrent per-certificate evaluation cycles
- Read-only status reporting
"""

from tracker.certificate import CertificateRecord, CertificateStatus
from tracker.errors import CertKeeperError, ConfigError, IssuanceError, StorageError
from tracker.renewal import RenewalVerdict, decide
from tracker.reports import StatusReporter, StatusRow
from tracker.state_store import CertificateStateStore

__all__ = [
    "CertificateRecord",
    "CertificateStatus",
    "CertKeeperError",
    "ConfigError",
    "IssuanceError",
    "StorageError",
    "RenewalVerdict",
    "decide",
    "StatusReporter",
    "StatusRow",
    "CertificateStateStore",
]
