"""Renewal decision engine.

Maps a stored record and the current time to the action a cycle should
take. The expiry used here is nominal: ``last_issued + validity_period``.
It is not read from the issued certificate, so a certificate issued with
a shorter real lifetime than ``validity_period`` looks valid for longer
than it is.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from tracker.certificate import CertificateRecord

DEFAULT_VALIDITY_PERIOD = timedelta(days=90)
DEFAULT_RENEWAL_THRESHOLD = timedelta(days=10)


class RenewalVerdict(str, Enum):
    NO_ACTION_NEEDED = "no_action_needed"
    ISSUE_NEW = "issue_new"
    RENEW = "renew"

    @property
    def needs_action(self) -> bool:
        return self is not RenewalVerdict.NO_ACTION_NEEDED


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def remaining_validity(
    record: CertificateRecord,
    now: datetime,
    validity_period: timedelta = DEFAULT_VALIDITY_PERIOD,
) -> Optional[timedelta]:
    """Time left until nominal expiry, or None if never issued."""
    expiry = record.expiry_date(validity_period)
    if expiry is None:
        return None
    return expiry - now


def remaining_days(
    record: CertificateRecord,
    now: datetime,
    validity_period: timedelta = DEFAULT_VALIDITY_PERIOD,
) -> Optional[int]:
    """Whole days left until nominal expiry, truncated toward zero."""
    remaining = remaining_validity(record, now, validity_period)
    if remaining is None:
        return None
    return int(remaining / timedelta(days=1))


def decide(
    record: Optional[CertificateRecord],
    found: bool,
    now: datetime,
    validity_period: timedelta = DEFAULT_VALIDITY_PERIOD,
    renewal_threshold: timedelta = DEFAULT_RENEWAL_THRESHOLD,
) -> RenewalVerdict:
    """Decide whether a certificate needs issuing, renewing, or nothing.

    A record that exists but was never successfully issued (no
    ``last_issued``) has no expiry to wait for and is renewed.
    """
    if not found or record is None:
        return RenewalVerdict.ISSUE_NEW

    remaining = remaining_validity(record, now, validity_period)
    if remaining is None or remaining <= renewal_threshold:
        return RenewalVerdict.RENEW
    return RenewalVerdict.NO_ACTION_NEEDED
