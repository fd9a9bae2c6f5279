"""Project-wide settings and defaults."""

import os
from pathlib import Path

# State store and certificate artifacts
STATE_DB_PATH = Path(os.environ.get("CERTKEEPER_DB_PATH", "/var/certkeeper/certkeeper.json"))
CERTS_DIR = Path(os.environ.get("CERTKEEPER_CERTS_PATH", "/var/certkeeper/certs"))

# acme.sh
ACME_SH_PATH = os.environ.get("ACME_SH_PATH", "/root/.acme.sh/acme.sh")
_acme_timeout = os.environ.get("ACME_TIMEOUT_SECONDS", "")
ACME_TIMEOUT_SECONDS = int(_acme_timeout) if _acme_timeout else None

# Renewal policy
CERT_VALIDITY_DAYS = int(os.environ.get("CERT_VALIDITY_DAYS", "90"))
RENEWAL_THRESHOLD_DAYS = int(os.environ.get("RENEWAL_THRESHOLD_DAYS", "10"))

# Scheduler
CHECK_INTERVAL_HOURS = float(os.environ.get("CHECK_INTERVAL_HOURS", "1"))

# Status API
WEB_HOST = os.environ.get("CERTKEEPER_WEB_HOST", "127.0.0.1")
WEB_PORT = int(os.environ.get("CERTKEEPER_WEB_PORT", "8080"))

# Build info
VERSION = os.environ.get("CERTKEEPER_VERSION", "0.1.0")
COMMIT = os.environ.get("CERTKEEPER_COMMIT", "none")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
