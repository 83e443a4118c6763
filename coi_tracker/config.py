# COMPONENT: RUNTIME CONFIGURATION
# REQUIREMENTS SATISFIED: environment-driven storage, pagination and debounce settings
"""
coi_tracker/config.py

Collects the environment-driven settings of the COI tracker in one place.

Values are read from the process environment after `.env` has been loaded
with python-dotenv, so local development and Lambda deployments are
configured the same way.

Environment Variables:
    COI_STORAGE         "local" (default), "s3" or "memory"
    LOCAL_STORAGE_DIR   directory for the local snapshot slot
    S3_BUCKET           bucket for the S3 snapshot slot (required in s3 mode)
    S3_PREFIX           key prefix inside the bucket
    AWS_REGION          optional region for the S3 client
    COI_STORE_KEY       name of the snapshot slot (default "coi-store")
    ROWS_PER_PAGE       initial page size (default 10)
    SEARCH_DEBOUNCE_MS  quiescence window for search commits (default 300)
    FRONTEND_ORIGIN     CORS allowlist entry for the dashboard
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_STORE_KEY = "coi-store"
DEFAULT_LOCAL_DIR = "/tmp/coi-tracker"


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass
class Settings:
    storage_backend: str = "local"
    local_storage_dir: str = DEFAULT_LOCAL_DIR
    s3_bucket: Optional[str] = None
    s3_prefix: str = ""
    aws_region: Optional[str] = None
    store_key: str = DEFAULT_STORE_KEY
    rows_per_page: int = 10
    search_debounce_ms: int = 300
    allowed_origins: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "Settings":
        origin = os.getenv("FRONTEND_ORIGIN")
        return cls(
            storage_backend=os.getenv("COI_STORAGE", "local").strip().lower(),
            local_storage_dir=os.getenv("LOCAL_STORAGE_DIR", DEFAULT_LOCAL_DIR),
            s3_bucket=os.getenv("S3_BUCKET") or None,
            s3_prefix=os.getenv("S3_PREFIX", ""),
            aws_region=os.getenv("AWS_REGION") or None,
            store_key=os.getenv("COI_STORE_KEY", DEFAULT_STORE_KEY),
            rows_per_page=_int_env("ROWS_PER_PAGE", 10),
            search_debounce_ms=_int_env("SEARCH_DEBOUNCE_MS", 300),
            allowed_origins=[origin] if origin else [],
        )
