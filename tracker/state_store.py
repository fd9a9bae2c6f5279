"""Certificate state store: durable JSON-file record of lifecycle state."""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from tracker.certificate import CertificateRecord, CertificateStatus
from tracker.errors import StorageError

logger = logging.getLogger(__name__)

STORE_FORMAT_VERSION = 1


class CertificateStateStore:
    """Authoritative record of certificate state, keyed by certificate name.

    One instance is shared by every worker of a process. All access to the
    backing file goes through an internal lock, and every write replaces
    the file atomically, so readers in other processes (``status``, the
    web API) always see a complete snapshot.
    """

    def __init__(self, path: str | Path, create: bool = True):
        """Open the store at ``path``.

        With ``create=False`` nothing is written on open: a missing file
        reads as empty and the directory is left alone.
        """
        self._path = Path(path)
        self._lock = threading.Lock()
        if not create:
            with self._lock:
                if self._path.exists():
                    self._load()
            return

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                f"Cannot create state directory {self._path.parent}: {e}",
                {"path": str(self._path.parent)},
            ) from e

        with self._lock:
            if self._path.exists():
                # Surface corruption at startup rather than on first use.
                count = len(self._load())
                logger.debug("Opened state store %s (%d record(s))", self._path, count)
            else:
                self._save({})
                logger.info("Created state store %s", self._path)

    # ---- Reads ----

    def get(self, name: str) -> tuple[Optional[CertificateRecord], bool]:
        """Return ``(record, found)``. A missing record is not an error."""
        with self._lock:
            data = self._load()
        item = data.get(name)
        if item is None:
            return None, False
        return self._decode(name, item), True

    def list_all(self) -> list[CertificateRecord]:
        """Return every stored record, sorted by name."""
        with self._lock:
            data = self._load()
        return [self._decode(name, data[name]) for name in sorted(data)]

    # ---- Writes ----

    def upsert(
        self,
        name: str,
        declaration,
        timestamp: Optional[datetime],
        status: CertificateStatus,
    ) -> CertificateRecord:
        """Insert or overwrite the record for ``name`` as a single unit.

        Provider, issuer and domains come from ``declaration``; ``timestamp``
        may be None for a certificate that has never been issued.
        """
        record = CertificateRecord(
            name=name,
            provider=declaration.provider,
            issuer=declaration.issuer,
            domains=list(declaration.domains),
            last_issued=timestamp,
            status=CertificateStatus(status),
        )
        with self._lock:
            data = self._load()
            data[name] = record.to_dict()
            self._save(data)
        return record

    # ---- Persistence ----

    def _decode(self, name: str, item: dict) -> CertificateRecord:
        try:
            return CertificateRecord.from_dict(item)
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(
                f"Corrupted record '{name}' in {self._path}: {e}",
                {"name": name, "path": str(self._path)},
            ) from e

    def _load(self) -> dict[str, dict]:
        """Read the certificate map from disk. Caller holds the lock."""
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StorageError(
                f"State store {self._path} is corrupted: {e}", {"path": str(self._path)}
            ) from e
        except OSError as e:
            raise StorageError(
                f"Cannot read state store {self._path}: {e}", {"path": str(self._path)}
            ) from e

        certificates = payload.get("certificates") if isinstance(payload, dict) else None
        if not isinstance(certificates, dict):
            raise StorageError(
                f"State store {self._path} has an unexpected layout",
                {"path": str(self._path)},
            )
        return certificates

    def _save(self, certificates: dict[str, dict]) -> None:
        """Atomically replace the backing file. Caller holds the lock."""
        payload = {"version": STORE_FORMAT_VERSION, "certificates": certificates}
        temp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tf:
                temp_name = tf.name
                tf.write(json.dumps(payload, indent=2, sort_keys=True))
                tf.flush()
                os.fsync(tf.fileno())
            os.replace(temp_name, self._path)
        except OSError as e:
            if temp_name and os.path.exists(temp_name):
                os.unlink(temp_name)
            raise StorageError(
                f"Cannot write state store {self._path}: {e}", {"path": str(self._path)}
            ) from e
