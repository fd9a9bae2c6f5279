"""Renewal orchestrator: one concurrent evaluation cycle over all declarations."""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional

from sslcert.declarations import CertificateDeclaration, DeclarationSet, load_declarations
from tracker.certificate import CertificateStatus
from tracker.errors import ConfigError, IssuanceError, StorageError
from tracker.renewal import (
    DEFAULT_RENEWAL_THRESHOLD,
    DEFAULT_VALIDITY_PERIOD,
    RenewalVerdict,
    decide,
    remaining_days,
    utc_now,
)
from tracker.state_store import CertificateStateStore

logger = logging.getLogger(__name__)


@dataclass
class CertificateOutcome:
    """What one unit of work did for one certificate."""

    name: str
    verdict: Optional[RenewalVerdict] = None
    status: Optional[CertificateStatus] = None   # None: nothing written
    error: str = ""


@dataclass
class CycleReport:
    started_at: datetime
    finished_at: Optional[datetime] = None
    outcomes: list[CertificateOutcome] = field(default_factory=list)

    def get(self, name: str) -> Optional[CertificateOutcome]:
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome
        return None

    @property
    def issued(self) -> list[CertificateOutcome]:
        return [o for o in self.outcomes if o.status == CertificateStatus.ISSUED]

    @property
    def failed(self) -> list[CertificateOutcome]:
        return [o for o in self.outcomes if o.status == CertificateStatus.FAILED]

    @property
    def errored(self) -> list[CertificateOutcome]:
        return [o for o in self.outcomes if o.error]

    @property
    def unchanged(self) -> list[CertificateOutcome]:
        return [o for o in self.outcomes if o.verdict == RenewalVerdict.NO_ACTION_NEEDED]


class RenewalOrchestrator:
    """Evaluate every declared certificate concurrently, once per call.

    Each certificate gets its own worker thread that reads its record,
    decides, optionally invokes the issuer, and writes the outcome back.
    Workers share nothing but the store, which serializes its own writes.
    """

    def __init__(
        self,
        store: CertificateStateStore,
        issuer,
        validity_period: timedelta = DEFAULT_VALIDITY_PERIOD,
        renewal_threshold: timedelta = DEFAULT_RENEWAL_THRESHOLD,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.issuer = issuer
        self.validity_period = validity_period
        self.renewal_threshold = renewal_threshold
        self.clock = clock

    def run_cycle_from_file(
        self, config_path: str | Path, first_run: bool = False
    ) -> Optional[CycleReport]:
        """Load declarations and run a cycle; an invalid file skips the cycle."""
        logger.info("Starting certificate check...")
        try:
            declarations = load_declarations(config_path)
        except ConfigError as e:
            logger.error("Invalid configuration in %s: %s", config_path, e)
            return None
        return self.run_cycle(declarations, first_run=first_run)

    def run_cycle(self, declarations: DeclarationSet, first_run: bool = False) -> CycleReport:
        """Run one full cycle. Returns once every certificate has been handled."""
        report = CycleReport(started_at=self.clock())

        if first_run:
            self._register_account(declarations.email)

        certificates = list(declarations.certificates.values())
        if certificates:
            with ThreadPoolExecutor(
                max_workers=len(certificates), thread_name_prefix="cert"
            ) as pool:
                futures = [pool.submit(self._process_safely, decl) for decl in certificates]
                wait(futures)
            report.outcomes = [f.result() for f in futures]
        else:
            logger.warning("No certificates declared")

        report.finished_at = self.clock()
        logger.info(
            "Certificate check finished: %d checked, %d issued, %d failed, %d up to date",
            len(report.outcomes), len(report.issued), len(report.failed), len(report.unchanged),
        )
        return report

    def _register_account(self, email: str) -> None:
        try:
            result = self.issuer.register_account(email)
        except Exception:
            logger.exception("Account registration raised an error")
            return
        if not result.success:
            logger.warning(
                "Account registration finished with an error, which might be okay "
                "if the account already exists: %s", result.error,
            )

    def _process_safely(self, declaration: CertificateDeclaration) -> CertificateOutcome:
        try:
            return self.process(declaration)
        except Exception as e:
            logger.exception("Unexpected error while processing '%s'", declaration.name)
            return CertificateOutcome(name=declaration.name, error=str(e))

    def process(self, declaration: CertificateDeclaration) -> CertificateOutcome:
        """Evaluate and act on a single certificate."""
        name = declaration.name
        outcome = CertificateOutcome(name=name)
        logger.info("--- Checking certificate: %s ---", name)

        try:
            record, found = self.store.get(name)
        except StorageError as e:
            logger.error("Error getting state for '%s', skipping: %s", name, e)
            outcome.error = str(e)
            return outcome

        now = self.clock()
        outcome.verdict = decide(
            record, found, now, self.validity_period, self.renewal_threshold
        )

        if outcome.verdict == RenewalVerdict.ISSUE_NEW:
            logger.info("Certificate '%s' not found in state store. Issuing for the first time.", name)
        elif outcome.verdict == RenewalVerdict.RENEW:
            days = remaining_days(record, now, self.validity_period)
            logger.info("Certificate '%s' has %s days remaining. Renewing.", name,
                        "N/A" if days is None else days)
        else:
            logger.info(
                "Certificate '%s' is up to date (%d days remaining). No action needed.",
                name, remaining_days(record, now, self.validity_period),
            )
            return outcome

        previous_issued = record.last_issued if record else None
        try:
            self._issue(declaration)
        except IssuanceError as e:
            logger.error("Failed to issue certificate for '%s': %s", e.name, e)
            outcome.status = CertificateStatus.FAILED
            outcome.error = str(e)
            timestamp = previous_issued
        else:
            logger.info("Successfully issued/renewed certificate for '%s'", name)
            outcome.status = CertificateStatus.ISSUED
            timestamp = self.clock()

        try:
            self.store.upsert(name, declaration, timestamp, outcome.status)
        except StorageError as e:
            logger.error("Failed to update state store for '%s': %s", name, e)
            outcome.error = outcome.error or str(e)
        return outcome

    def _issue(self, declaration: CertificateDeclaration) -> None:
        """Run the issuer, raising IssuanceError on any failure."""
        try:
            result = self.issuer.issue_certificate(declaration)
        except Exception as e:
            raise IssuanceError(declaration.name, str(e) or type(e).__name__) from e
        if not result.success:
            raise IssuanceError(
                declaration.name,
                result.error or result.message or "issuance failed",
                {"message": result.message},
            )
