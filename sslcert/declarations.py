"""Certificate declarations: load and validate the YAML configuration.

The document maps each certificate name to its domains, issuer and DNS
provider type. The reserved ``configs`` key holds global settings::

    configs:
      email: admin@example.com

    example:
      type: dns_aws
      issuer: zerossl
      domains:
        - example.com
        - "*.example.com"
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from jsonschema import Draft7Validator

from tracker.errors import ConfigError

logger = logging.getLogger(__name__)

GLOBAL_CONFIG_KEY = "configs"

DECLARATION_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "certkeeper certificate declarations",
    "type": "object",
    "properties": {
        GLOBAL_CONFIG_KEY: {
            "type": "object",
            "properties": {
                "email": {"type": "string"},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": {
        "type": "object",
        "properties": {
            "type": {"type": "string", "minLength": 1},
            "issuer": {"type": "string", "minLength": 1},
            "domains": {
                "type": "array",
                "minItems": 1,
                "items": {"type": "string", "minLength": 1},
            },
        },
        "required": ["type", "issuer", "domains"],
        "additionalProperties": False,
    },
}


@dataclass(frozen=True)
class CertificateDeclaration:
    """A desired certificate as declared in the configuration."""

    name: str
    provider: str          # acme.sh DNS API, e.g. "dns_aws"
    issuer: str            # ACME server, e.g. "zerossl" or a directory URL
    domains: tuple[str, ...]


@dataclass
class DeclarationSet:
    """All declarations of one configuration document."""

    email: str = ""
    certificates: dict[str, CertificateDeclaration] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.certificates)


def validate_document(document) -> None:
    """Raise ConfigError listing every schema violation in ``document``."""
    validator = Draft7Validator(DECLARATION_SCHEMA)
    errors = sorted(validator.iter_errors(document), key=lambda e: list(e.absolute_path))
    if errors:
        messages = []
        for err in errors:
            location = "/".join(str(p) for p in err.absolute_path) or "(root)"
            messages.append(f"- {location}: {err.message}")
        raise ConfigError(
            "configuration validation failed:\n" + "\n".join(messages),
            {"errors": messages},
        )


def parse_declarations(text: str) -> DeclarationSet:
    """Parse and validate a YAML declaration document."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML: {e}") from e

    if document is None:
        raise ConfigError("configuration is empty")

    validate_document(document)

    global_config = document.get(GLOBAL_CONFIG_KEY) or {}
    certificates = {}
    for name, entry in document.items():
        if name == GLOBAL_CONFIG_KEY:
            continue
        name = str(name)
        certificates[name] = CertificateDeclaration(
            name=name,
            provider=entry["type"],
            issuer=entry["issuer"],
            domains=tuple(entry["domains"]),
        )

    return DeclarationSet(email=global_config.get("email", ""), certificates=certificates)


def load_declarations(path: str | Path) -> DeclarationSet:
    """Read, validate and parse the declaration file at ``path``."""
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigError(f"cannot read configuration file {path}: {e}", {"path": str(path)}) from e

    declarations = parse_declarations(text)
    logger.info("Loaded %d certificate declaration(s) from %s", len(declarations), path)
    return declarations
