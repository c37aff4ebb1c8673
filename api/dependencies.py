"""
FastAPI dependencies.

The application works against one record store, one analysis requester and
one in-flight guard per process. They are created lazily on first use and
can be replaced in tests through `app.dependency_overrides`.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from config.settings import Settings, load_settings
from repositories.storage import build_storage
from services.analysis_service import AnalysisRequester, SingleFlightGuard
from services.record_store import RecordStore

logger = logging.getLogger(__name__)

_settings: Optional[Settings] = None
_store: Optional[RecordStore] = None
_requester: Optional[AnalysisRequester] = None
_analysis_guard = SingleFlightGuard()
_init_lock = threading.Lock()


def get_settings() -> Settings:
    """Get the process settings (loaded from the environment once)."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def get_store() -> RecordStore:
    """Get the record store, opening its storage on first use."""
    global _store
    with _init_lock:
        if _store is None:
            settings = get_settings()
            logger.info("Opening record store (backend=%s)", settings.storage_backend)
            _store = RecordStore.open(build_storage(settings))
    return _store


def get_requester() -> AnalysisRequester:
    global _requester
    if _requester is None:
        _requester = AnalysisRequester.from_settings(get_settings())
    return _requester


def get_analysis_guard() -> SingleFlightGuard:
    return _analysis_guard


def reset_dependencies() -> None:
    """Drop cached instances so the next request re-reads settings and storage."""
    global _settings, _store, _requester
    _settings = None
    _store = None
    _requester = None
