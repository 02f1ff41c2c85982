"""Configuration and shared settings for the content sanitizer."""

import os
from dotenv import load_dotenv

load_dotenv()


def _split_csv_env(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _bool_env(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

# Nesting depth past which markup is flattened to text
SANITIZER_MAX_DEPTH = int(os.getenv("SANITIZER_MAX_DEPTH", "256"))

SANITIZER_ALLOW_DATA_ATTRIBUTES = _bool_env("SANITIZER_ALLOW_DATA_ATTRIBUTES")

# Rejects javascript:, vbscript: and similar href/src values; "false" opts out
SANITIZER_URL_SCHEME_CHECK = _bool_env("SANITIZER_URL_SCHEME_CHECK", "true")

SANITIZER_EXTRA_ALLOWED_TAGS = _split_csv_env(
    os.getenv("SANITIZER_EXTRA_ALLOWED_TAGS", "")
)
SANITIZER_EXTRA_FORBIDDEN_TAGS = _split_csv_env(
    os.getenv("SANITIZER_EXTRA_FORBIDDEN_TAGS", "")
)

SERVICE_NAME = os.getenv("K_SERVICE", "content-safety")
