"""
Application settings.

All configuration comes from the process environment. A `.env` file in the
project root is loaded first so local runs do not need exported variables.

Environment variables:
- SALES_TRACKER_STORAGE: storage backend, one of "file" (default), "memory", "supabase"
- SALES_TRACKER_DATA_FILE: JSON file used by the "file" backend
- SUPABASE_URL / SUPABASE_KEY: required only for the "supabase" backend
- SUPABASE_KV_TABLE: key-value table used by the "supabase" backend
- OPENAI_API_KEY: credential for AI reports (absence disables them, not the app)
- ANALYSIS_MODEL: chat model used for AI reports
- LOG_LEVEL: root logging level for the API and CLI
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent.parent

STORAGE_BACKENDS = ("file", "memory", "supabase")

DEFAULT_DATA_FILE = PROJECT_ROOT / "data" / "sales_tracker.json"
DEFAULT_KV_TABLE = "kv_store"
DEFAULT_ANALYSIS_MODEL = "gpt-4o-mini"


@dataclass(frozen=True, slots=True)
class Settings:
    storage_backend: str = "file"
    data_file: Path = DEFAULT_DATA_FILE
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_table: str = DEFAULT_KV_TABLE
    openai_api_key: Optional[str] = None
    analysis_model: str = DEFAULT_ANALYSIS_MODEL
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unsupported storage backend {self.storage_backend!r}; "
                f"expected one of {', '.join(STORAGE_BACKENDS)}"
            )

    @property
    def analysis_enabled(self) -> bool:
        """True when a credential for the analysis service is configured."""
        return bool(self.openai_api_key)


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env_file: Optional .env path (default: `.env` in the project root).
            Values already present in the environment win over the file.
    """

    load_dotenv(dotenv_path=env_file or PROJECT_ROOT / ".env")

    data_file = os.getenv("SALES_TRACKER_DATA_FILE")

    return Settings(
        storage_backend=os.getenv("SALES_TRACKER_STORAGE", "file").strip().lower(),
        data_file=Path(data_file) if data_file else DEFAULT_DATA_FILE,
        supabase_url=os.getenv("SUPABASE_URL") or None,
        supabase_key=os.getenv("SUPABASE_KEY") or None,
        supabase_table=os.getenv("SUPABASE_KV_TABLE", DEFAULT_KV_TABLE),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        analysis_model=os.getenv("ANALYSIS_MODEL", DEFAULT_ANALYSIS_MODEL),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for an entry point (API or CLI)."""

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = ["Settings", "load_settings", "configure_logging", "PROJECT_ROOT"]
