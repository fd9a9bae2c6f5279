"""
Certificate Issuance Module.

Loads the declared certificate set and delegates issuance to acme.sh.
"""

from sslcert.acme_service import AcmeResult, AcmeShService
from sslcert.declarations import CertificateDeclaration, DeclarationSet, load_declarations

__all__ = [
    "AcmeResult", "AcmeShService",
    "CertificateDeclaration", "DeclarationSet", "load_declarations",
]
