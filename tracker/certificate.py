"""Certificate lifecycle record persisted by the state store."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional


class CertificateStatus(str, Enum):
    """Outcome of the most recent action taken on a certificate."""

    UNKNOWN = "unknown"
    ISSUED = "issued"
    FAILED = "failed"


@dataclass
class CertificateRecord:
    """Stored lifecycle state of one named certificate."""

    name: str
    provider: str
    issuer: str
    domains: list[str] = field(default_factory=list)
    last_issued: Optional[datetime] = None   # None: never issued
    status: CertificateStatus = CertificateStatus.UNKNOWN

    def expiry_date(self, validity_period: timedelta) -> Optional[datetime]:
        """Nominal expiry, assuming a fixed validity from ``last_issued``."""
        if self.last_issued is None:
            return None
        return self.last_issued + validity_period

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "provider": self.provider,
            "issuer": self.issuer,
            "domains": list(self.domains),
            "last_issued": self.last_issued.isoformat() if self.last_issued else None,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CertificateRecord":
        """Build a record, defaulting any field an older store did not write."""
        domains = data.get("domains", [])
        if isinstance(domains, str):
            domains = [d for d in domains.split(",") if d]
        return cls(
            name=data["name"],
            provider=data.get("provider", ""),
            issuer=data.get("issuer", ""),
            domains=list(domains),
            last_issued=_parse_timestamp(data.get("last_issued")),
            status=CertificateStatus(data.get("status") or CertificateStatus.UNKNOWN.value),
        )


def _parse_timestamp(value) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
