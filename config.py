import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./ledger.db")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", False))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Settlement
    SETTLEMENT_MAX_RETRIES = int(data.get("SETTLEMENT_MAX_RETRIES", 3))
    SETTLEMENT_RETRY_BACKOFF_SECONDS = float(data.get("SETTLEMENT_RETRY_BACKOFF_SECONDS", 0.05))
    ENFORCE_ACCOUNT_STATUS_ON_SETTLE = bool(data.get("ENFORCE_ACCOUNT_STATUS_ON_SETTLE", False))

    # Transaction creation
    BALANCE_PRECHECK_ON_CREATE = bool(data.get("BALANCE_PRECHECK_ON_CREATE", False))
    REJECT_DUPLICATE_REFERENCE_ID = bool(data.get("REJECT_DUPLICATE_REFERENCE_ID", False))

    # Pagination
    DEFAULT_PAGE_LIMIT = data.get("DEFAULT_PAGE_LIMIT", 50)
    MAX_PAGE_LIMIT = data.get("MAX_PAGE_LIMIT", 200)

    # Balance Reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
