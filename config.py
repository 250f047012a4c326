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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./billing.db")
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Invoice numbering (PREFIX-YYYY-NNNNNN)
    INVOICE_NUMBER_PREFIX = data.get("INVOICE_NUMBER_PREFIX", "INV")

    # Idempotency
    IDEMPOTENCY_TTL_HOURS = int(data.get("IDEMPOTENCY_TTL_HOURS", 24))
    IDEMPOTENCY_SWEEP_ENABLED = bool(data.get("IDEMPOTENCY_SWEEP_ENABLED", True))
    IDEMPOTENCY_SWEEP_INTERVAL_SECONDS = data.get("IDEMPOTENCY_SWEEP_INTERVAL_SECONDS", 3600)  # Hourly

    # Domain event delivery
    EVENT_WEBHOOK_URL = data.get("EVENT_WEBHOOK_URL", None)
    EVENT_WEBHOOK_TIMEOUT_SECONDS = float(data.get("EVENT_WEBHOOK_TIMEOUT_SECONDS", 10.0))
