"""Global constants for the backoffice package."""

from __future__ import annotations

SERVICE_NAME = "backoffice"
ORDER_ID_CTX_KEY = "order_id"
DEFAULT_ENV_FILE = ".env"
SECRETS_DIR = "/run/secrets"
DEFAULT_CURRENCY = "EUR"
