from typing import Literal, Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .storage import IndexSettings, PersistenceSettings


class EmbeddingSettings(BaseModel):
    provider: Literal["openai", "openrouter", "lmstudio", "ollama", "hash"] = "hash"
    model: str = "text-embedding-3-small"
    base_url: Optional[str] = None
    api_key: Optional[SecretStr] = None
    timeout: float = 60.0

    # expected output length; also the vector length of the "hash" provider
    dimensions: int = Field(default=384, gt=0)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_logs: bool = False
    log_dir: str = "logs"  # relative to AppSettings.root


class AppSettings(BaseSettings):
    """
    Top-level settings. Every field can be overridden from the environment:

      VECTORINDEX_ROOT=./data
      VECTORINDEX_STORAGE__BACKEND=memory
      VECTORINDEX_INDEX__DIMENSIONS=768
      VECTORINDEX_EMBEDDING__PROVIDER=openai
    """

    model_config = SettingsConfigDict(
        env_prefix="VECTORINDEX_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    root: str = "./.vectorindex"

    index: IndexSettings = IndexSettings()
    storage: PersistenceSettings = PersistenceSettings()
    embedding: EmbeddingSettings = EmbeddingSettings()
    logging: LoggingSettings = LoggingSettings()
