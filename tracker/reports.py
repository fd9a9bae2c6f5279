"""Status reporting, a read-only projection of the state store."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional

from tracker.renewal import DEFAULT_VALIDITY_PERIOD, remaining_days, utc_now
from tracker.state_store import CertificateStateStore

NOT_AVAILABLE = "N/A"
DATE_FORMAT = "%Y-%m-%d"

COLUMNS = ("NAME", "STATUS", "ISSUED", "EXPIRES", "REMAINING", "TLS PROVIDER", "DNS PROVIDER")


@dataclass
class StatusRow:
    """One certificate as shown by ``status``."""

    name: str
    status: str
    issuer: str
    provider: str
    domains: list[str] = field(default_factory=list)
    issued: Optional[datetime] = None
    expires: Optional[datetime] = None
    remaining_days: Optional[int] = None

    @property
    def issued_display(self) -> str:
        return self.issued.strftime(DATE_FORMAT) if self.issued else NOT_AVAILABLE

    @property
    def expires_display(self) -> str:
        return self.expires.strftime(DATE_FORMAT) if self.expires else NOT_AVAILABLE

    @property
    def remaining_display(self) -> str:
        if self.remaining_days is None:
            return NOT_AVAILABLE
        return f"{self.remaining_days} days"

    def cells(self) -> tuple[str, ...]:
        return (
            self.name, self.status, self.issued_display, self.expires_display,
            self.remaining_display, self.issuer, self.provider,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status,
            "issuer": self.issuer,
            "provider": self.provider,
            "domains": list(self.domains),
            "issued": self.issued.isoformat() if self.issued else None,
            "expires": self.expires.isoformat() if self.expires else None,
            "remaining_days": self.remaining_days,
        }


class StatusReporter:
    """Derive display rows from stored records alone."""

    def __init__(
        self,
        store: CertificateStateStore,
        validity_period: timedelta = DEFAULT_VALIDITY_PERIOD,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.validity_period = validity_period
        self.clock = clock

    def report(self, now: Optional[datetime] = None) -> list[StatusRow]:
        """One row per stored record, sorted by name."""
        now = now or self.clock()
        rows = []
        for record in self.store.list_all():
            rows.append(StatusRow(
                name=record.name,
                status=record.status.value,
                issuer=record.issuer,
                provider=record.provider,
                domains=list(record.domains),
                issued=record.last_issued,
                expires=record.expiry_date(self.validity_period),
                remaining_days=remaining_days(record, now, self.validity_period),
            ))
        return rows

    def get(self, name: str, now: Optional[datetime] = None) -> Optional[StatusRow]:
        for row in self.report(now):
            if row.name == name:
                return row
        return None


def format_status_table(rows: list[StatusRow]) -> str:
    """Render rows as an aligned plain-text table."""
    if not rows:
        return "No certificates found in the state store. Run with a config file first."

    table = [COLUMNS, tuple("-" * len(c) for c in COLUMNS)]
    table.extend(row.cells() for row in rows)
    widths = [max(len(line[i]) for line in table) for i in range(len(COLUMNS))]
    lines = [
        "   ".join(cell.ljust(width) for cell, width in zip(line, widths)).rstrip()
        for line in table
    ]
    return "\n".join(lines)
