"""
FastAPI dependency providers. Tests swap the settings (and with them the data
directory) through ``app.dependency_overrides[get_settings]``.
"""

from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from reportguard.cascade.controller import CascadeController
from reportguard.config import Settings, get_settings
from reportguard.storage.documents import JsonDocumentStore


@lru_cache
def _store_for(data_dir: Path) -> JsonDocumentStore:
    # one instance (and one lock) per data directory
    return JsonDocumentStore(data_dir)


def get_store(settings: Settings = Depends(get_settings)) -> JsonDocumentStore:
    return _store_for(Path(settings.data_dir).resolve())


def get_controller(
    settings: Settings = Depends(get_settings),
    store: JsonDocumentStore = Depends(get_store),
) -> CascadeController:
    return CascadeController.from_settings(settings, store)
