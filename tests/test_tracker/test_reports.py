"""Tests for status reporting."""

import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from sslcert.declarations import CertificateDeclaration
from tracker.certificate import CertificateStatus
from tracker.reports import StatusReporter, format_status_table
from tracker.state_store import CertificateStateStore

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def _decl(name):
    return CertificateDeclaration(
        name=name, provider="dns_aws", issuer="zerossl", domains=("example.com",),
    )


class TestStatusReporter(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = CertificateStateStore(Path(self._tmp.name) / "state.json")
        self.reporter = StatusReporter(self.store)

    def tearDown(self):
        self._tmp.cleanup()

    def test_empty_store(self):
        self.assertEqual(self.reporter.report(T0), [])

    def test_issued_row(self):
        self.store.upsert("test", _decl("test"), T0, CertificateStatus.ISSUED)
        row = self.reporter.report(T0 + timedelta(days=89))[0]
        self.assertEqual(row.name, "test")
        self.assertEqual(row.status, "issued")
        self.assertEqual(row.issued_display, "2025-01-01")
        self.assertEqual(row.expires_display, "2025-04-01")
        self.assertEqual(row.remaining_days, 1)
        self.assertEqual(row.remaining_display, "1 days")

    def test_expiry_day_shows_zero(self):
        self.store.upsert("test", _decl("test"), T0, CertificateStatus.ISSUED)
        self.assertEqual(self.reporter.report(T0 + timedelta(days=90))[0].remaining_days, 0)

    def test_never_issued_row_is_not_available(self):
        self.store.upsert("test", _decl("test"), None, CertificateStatus.FAILED)
        row = self.reporter.report(T0)[0]
        self.assertEqual(row.status, "failed")
        self.assertIsNone(row.remaining_days)
        self.assertEqual(row.issued_display, "N/A")
        self.assertEqual(row.expires_display, "N/A")
        self.assertEqual(row.remaining_display, "N/A")
        self.assertIsNone(row.to_dict()["issued"])

    def test_rows_sorted_by_name(self):
        for name in ("zeta", "alpha"):
            self.store.upsert(name, _decl(name), T0, CertificateStatus.ISSUED)
        self.assertEqual([r.name for r in self.reporter.report(T0)], ["alpha", "zeta"])

    def test_get(self):
        self.store.upsert("test", _decl("test"), T0, CertificateStatus.ISSUED)
        self.assertEqual(self.reporter.get("test", T0).name, "test")
        self.assertIsNone(self.reporter.get("missing", T0))

    def test_uses_clock_by_default(self):
        self.store.upsert("test", _decl("test"), T0, CertificateStatus.ISSUED)
        reporter = StatusReporter(self.store, clock=lambda: T0 + timedelta(days=45))
        self.assertEqual(reporter.report()[0].remaining_days, 45)


class TestFormatStatusTable(unittest.TestCase):

    def test_empty(self):
        self.assertIn("No certificates found", format_status_table([]))

    def test_columns(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = CertificateStateStore(Path(tmp) / "state.json")
            store.upsert("test", _decl("test"), T0, CertificateStatus.ISSUED)
            store.upsert("pending", _decl("pending"), None, CertificateStatus.FAILED)
            rows = StatusReporter(store).report(T0 + timedelta(days=10))

        lines = format_status_table(rows).splitlines()
        self.assertTrue(lines[0].startswith("NAME"))
        self.assertIn("DNS PROVIDER", lines[0])
        self.assertTrue(lines[1].startswith("----"))
        self.assertTrue(lines[2].startswith("pending"))
        self.assertIn("N/A", lines[2])
        self.assertIn("80 days", lines[3])
        self.assertIn("zerossl", lines[3])
        self.assertIn("dns_aws", lines[3])


if __name__ == "__main__":
    unittest.main()
