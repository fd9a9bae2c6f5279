"""Tests for loading certificate declarations."""

import tempfile
import unittest
from pathlib import Path

from sslcert.declarations import (
    CertificateDeclaration,
    load_declarations,
    parse_declarations,
)
from tracker.errors import ConfigError

VALID = """
configs:
  email: admin@example.com

test:
  type: dns_aws
  issuer: zerossl
  domains:
    - example.com
    - "*.example.com"

other:
  type: dns_cf
  issuer: letsencrypt
  domains: [other.example.org]
"""


class TestParseDeclarations(unittest.TestCase):

    def test_valid_document(self):
        declarations = parse_declarations(VALID)
        self.assertEqual(declarations.email, "admin@example.com")
        self.assertEqual(len(declarations), 2)
        self.assertEqual(
            declarations.certificates["test"],
            CertificateDeclaration(
                name="test", provider="dns_aws", issuer="zerossl",
                domains=("example.com", "*.example.com"),
            ),
        )
        self.assertNotIn("configs", declarations.certificates)

    def test_configs_section_is_optional(self):
        declarations = parse_declarations(
            "test:\n  type: dns_aws\n  issuer: zerossl\n  domains: [example.com]\n"
        )
        self.assertEqual(declarations.email, "")
        self.assertEqual(list(declarations.certificates), ["test"])

    def test_missing_required_field(self):
        with self.assertRaises(ConfigError) as ctx:
            parse_declarations("test:\n  type: dns_aws\n  domains: [example.com]\n")
        self.assertIn("issuer", str(ctx.exception))

    def test_empty_domain_list(self):
        with self.assertRaises(ConfigError):
            parse_declarations("test:\n  type: dns_aws\n  issuer: zerossl\n  domains: []\n")

    def test_unknown_certificate_field(self):
        with self.assertRaises(ConfigError):
            parse_declarations(
                "test:\n  type: dns_aws\n  issuer: zerossl\n"
                "  domains: [example.com]\n  keylength: 4096\n"
            )

    def test_wrong_email_type(self):
        with self.assertRaises(ConfigError):
            parse_declarations("configs:\n  email: [a, b]\n")

    def test_all_errors_reported(self):
        with self.assertRaises(ConfigError) as ctx:
            parse_declarations(
                "one:\n  type: dns_aws\n  domains: [a.com]\n"
                "two:\n  issuer: zerossl\n  domains: [b.com]\n"
            )
        self.assertEqual(len(ctx.exception.details["errors"]), 2)

    def test_not_a_mapping(self):
        with self.assertRaises(ConfigError):
            parse_declarations("- just\n- a list\n")

    def test_empty_document(self):
        with self.assertRaises(ConfigError):
            parse_declarations("")

    def test_invalid_yaml(self):
        with self.assertRaises(ConfigError):
            parse_declarations("test: [unclosed\n")


class TestLoadDeclarations(unittest.TestCase):

    def test_load_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "certs.yaml"
            path.write_text(VALID)
            declarations = load_declarations(path)
        self.assertEqual(sorted(declarations.certificates), ["other", "test"])

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_declarations("/nonexistent/certs.yaml")


if __name__ == "__main__":
    unittest.main()
