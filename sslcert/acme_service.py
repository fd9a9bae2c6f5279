"""Certificate issuance via the acme.sh CLI."""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from sslcert.declarations import CertificateDeclaration

logger = logging.getLogger(__name__)

CERT_FILE = "cert.pem"
KEY_FILE = "key.pem"
FULLCHAIN_FILE = "fullchain.pem"


@dataclass
class AcmeResult:
    """Result of an acme.sh operation."""

    success: bool
    name: str
    cert_path: str = ""
    key_path: str = ""
    fullchain_path: str = ""
    message: str = ""
    error: str = ""


class AcmeShService:
    """Wraps the acme.sh CLI for DNS-01 issuance and account registration.

    Artifacts for a certificate named ``name`` are always written to
    ``<certs_dir>/<name>/{cert,key,fullchain}.pem``.
    """

    def __init__(
        self,
        acme_sh_path: str,
        certs_dir: str | Path,
        timeout: Optional[int] = None,
    ):
        self.acme_sh_path = acme_sh_path
        self.certs_dir = Path(certs_dir)
        self.timeout = timeout
        self.certs_dir.mkdir(parents=True, exist_ok=True)

    def artifact_paths(self, name: str) -> tuple[Path, Path, Path]:
        """Return (cert, key, fullchain) paths for a certificate."""
        cert_dir = self.certs_dir / name
        return cert_dir / CERT_FILE, cert_dir / KEY_FILE, cert_dir / FULLCHAIN_FILE

    def build_issue_command(self, declaration: CertificateDeclaration) -> list[str]:
        cert_file, key_file, fullchain_file = self.artifact_paths(declaration.name)
        cmd = [
            self.acme_sh_path,
            "--issue",
            "--dns", declaration.provider,
            "--cert-file", str(cert_file),
            "--key-file", str(key_file),
            "--fullchain-file", str(fullchain_file),
            "--server", declaration.issuer,
            "--force",
        ]
        for domain in declaration.domains:
            cmd.extend(["-d", domain])
        return cmd

    def issue_certificate(self, declaration: CertificateDeclaration) -> AcmeResult:
        """Issue or renew a certificate. Always forces a fresh issuance."""
        name = declaration.name
        logger.info(
            "Issuing/Renewing certificate for '%s' with type '%s' and issuer '%s'",
            name, declaration.provider, declaration.issuer,
        )
        logger.info("Domains: %s", " ".join(declaration.domains))

        cert_file, key_file, fullchain_file = self.artifact_paths(name)
        try:
            cert_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return AcmeResult(
                success=False, name=name,
                error=str(e),
                message=f"Failed to create certificate directory for '{name}'",
            )

        result = self._run(self.build_issue_command(declaration), name)
        if result.success:
            result.cert_path = str(cert_file)
            result.key_path = str(key_file)
            result.fullchain_path = str(fullchain_file)
            result.message = f"Certificate issued for '{name}'"
        return result

    def register_account(self, email: str) -> AcmeResult:
        """Register (or update) the ACME account for ``email``.

        A failure here often just means the account already exists.
        """
        if not email:
            logger.warning(
                "No email found in the 'configs' section, account registration skipped"
            )
            return AcmeResult(success=True, name="account", message="Registration skipped")

        logger.info("Ensuring acme.sh account is registered with email: %s", email)
        result = self._run([self.acme_sh_path, "--register-account", "-m", email], "account")
        if result.success:
            result.message = "Account registration/update successful"
        return result

    def _run(self, cmd: list[str], name: str) -> AcmeResult:
        try:
            proc = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return AcmeResult(
                success=False, name=name,
                error=f"acme.sh timed out after {self.timeout}s", message="Timeout",
            )
        except FileNotFoundError:
            return AcmeResult(
                success=False, name=name,
                error=f"acme.sh not found at {self.acme_sh_path}",
                message="acme.sh is not installed",
            )

        if proc.returncode == 0:
            if proc.stdout:
                logger.debug("acme.sh output for '%s':\n%s", name, proc.stdout.strip())
            return AcmeResult(success=True, name=name)

        return AcmeResult(
            success=False, name=name,
            error=proc.stderr.strip() or proc.stdout.strip(),
            message=f"acme.sh exited with status {proc.returncode} for '{name}'",
        )
