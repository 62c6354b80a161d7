"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
APP_HOME = Path(os.getenv("BANK_CLIENT_HOME", str(Path.home() / ".bank-client"))).expanduser()

# Ensure directories exist
APP_HOME.mkdir(parents=True, exist_ok=True)

# Credential storage
TOKEN_KEY = os.getenv("TOKEN_KEY", "auth_token")
KEYRING_SERVICE = os.getenv("KEYRING_SERVICE", "bank-client")
SECURE_STORE_ENABLED = os.getenv("SECURE_STORE_ENABLED", "true").lower() == "true"
GENERAL_STORE_PATH = Path(
    os.getenv("GENERAL_STORE_PATH", str(APP_HOME / "credentials.json"))
).expanduser()

# Bank API
API_BASE_URL = os.getenv(
    "API_BASE_URL",
    "https://react-bank-project.eapi.joincoded.com/mini-project/api",
).rstrip("/")
API_TIMEOUT_SECONDS = float(os.getenv("API_TIMEOUT_SECONDS", "30"))

# Logging
LOG_DIR = APP_HOME / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)
