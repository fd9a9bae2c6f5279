"""Backend service initialization shared by the CLI and the status API."""

from datetime import timedelta
from pathlib import Path
from typing import Optional

from config.settings import (
    ACME_SH_PATH,
    ACME_TIMEOUT_SECONDS,
    CERT_VALIDITY_DAYS,
    CERTS_DIR,
    RENEWAL_THRESHOLD_DAYS,
    STATE_DB_PATH,
)


def validity_period() -> timedelta:
    return timedelta(days=CERT_VALIDITY_DAYS)


def renewal_threshold() -> timedelta:
    return timedelta(days=RENEWAL_THRESHOLD_DAYS)


def get_state_store(path: Optional[str | Path] = None, create: bool = True):
    from tracker.state_store import CertificateStateStore
    return CertificateStateStore(path or STATE_DB_PATH, create=create)


def get_status_reporter(store=None):
    from tracker.reports import StatusReporter
    if store is None:
        store = get_state_store()
    return StatusReporter(store, validity_period=validity_period())


def get_acme_service():
    from sslcert.acme_service import AcmeShService
    return AcmeShService(
        acme_sh_path=ACME_SH_PATH,
        certs_dir=CERTS_DIR,
        timeout=ACME_TIMEOUT_SECONDS,
    )


def get_orchestrator(store=None, issuer=None):
    from tracker.orchestrator import RenewalOrchestrator
    if store is None:
        store = get_state_store()
    if issuer is None:
        issuer = get_acme_service()
    return RenewalOrchestrator(
        store,
        issuer,
        validity_period=validity_period(),
        renewal_threshold=renewal_threshold(),
    )
