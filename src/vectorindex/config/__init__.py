from .config import AppSettings, EmbeddingSettings, LoggingSettings
from .runtime import get_settings
from .storage import IndexSettings, PersistenceSettings

__all__ = [
    "AppSettings", "EmbeddingSettings", "LoggingSettings",
    "IndexSettings", "PersistenceSettings", "get_settings",
]
