"""Tests for the acme.sh wrapper."""

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from sslcert.acme_service import AcmeShService
from sslcert.declarations import CertificateDeclaration


def _decl():
    return CertificateDeclaration(
        name="test", provider="dns_aws", issuer="zerossl",
        domains=("example.com", "*.example.com"),
    )


class TestAcmeShService(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.certs_dir = Path(self._tmp.name) / "certs"
        self.service = AcmeShService("/opt/acme.sh", self.certs_dir)

    def tearDown(self):
        self._tmp.cleanup()

    def test_artifact_paths(self):
        cert, key, fullchain = self.service.artifact_paths("test")
        self.assertEqual(cert, self.certs_dir / "test" / "cert.pem")
        self.assertEqual(key, self.certs_dir / "test" / "key.pem")
        self.assertEqual(fullchain, self.certs_dir / "test" / "fullchain.pem")

    def test_build_issue_command(self):
        cmd = self.service.build_issue_command(_decl())
        self.assertEqual(cmd[0], "/opt/acme.sh")
        self.assertIn("--issue", cmd)
        self.assertEqual(cmd[cmd.index("--dns") + 1], "dns_aws")
        self.assertEqual(cmd[cmd.index("--server") + 1], "zerossl")
        self.assertIn("--force", cmd)
        self.assertEqual(
            cmd[cmd.index("--fullchain-file") + 1],
            str(self.certs_dir / "test" / "fullchain.pem"),
        )
        self.assertEqual(cmd[-4:], ["-d", "example.com", "-d", "*.example.com"])

    @patch("sslcert.acme_service.subprocess.run")
    def test_issue_success(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="ok", stderr="")
        result = self.service.issue_certificate(_decl())
        self.assertTrue(result.success)
        self.assertEqual(result.cert_path, str(self.certs_dir / "test" / "cert.pem"))
        self.assertTrue((self.certs_dir / "test").is_dir())
        self.assertIsNone(mock_run.call_args.kwargs["timeout"])

    @patch("sslcert.acme_service.subprocess.run")
    def test_issue_failure(self, mock_run):
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="Verify error")
        result = self.service.issue_certificate(_decl())
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Verify error")
        self.assertEqual(result.cert_path, "")

    @patch("sslcert.acme_service.subprocess.run", side_effect=FileNotFoundError)
    def test_issue_tool_missing(self, _mock_run):
        result = self.service.issue_certificate(_decl())
        self.assertFalse(result.success)
        self.assertIn("not found", result.error)

    @patch("sslcert.acme_service.subprocess.run")
    def test_issue_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="acme.sh", timeout=5)
        service = AcmeShService("/opt/acme.sh", self.certs_dir, timeout=5)
        result = service.issue_certificate(_decl())
        self.assertFalse(result.success)
        self.assertIn("timed out", result.error)

    @patch("sslcert.acme_service.subprocess.run")
    def test_register_account(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        result = self.service.register_account("admin@example.com")
        self.assertTrue(result.success)
        self.assertEqual(
            mock_run.call_args.args[0],
            ["/opt/acme.sh", "--register-account", "-m", "admin@example.com"],
        )

    @patch("sslcert.acme_service.subprocess.run")
    def test_register_without_email_is_skipped(self, mock_run):
        result = self.service.register_account("")
        self.assertTrue(result.success)
        mock_run.assert_not_called()


if __name__ == "__main__":
    unittest.main()
