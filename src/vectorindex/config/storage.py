from typing import Literal

from pydantic import BaseModel, Field


class SQLiteIndexStoreSettings(BaseModel):
    # Interpreted relative to AppSettings.root in the factory
    dir: str = "db"  # => <root>/db/<db_name>.sqlite


class PersistenceSettings(BaseModel):
    # which backend holds saved indices
    backend: Literal["sqlite", "memory"] = "sqlite"

    # one database, one container; each index is one record keyed by name
    db_name: str = "VectorIndexDB"
    container: str = Field(
        default="indices",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Table / object container holding index records.",
    )

    sqlite: SQLiteIndexStoreSettings = SQLiteIndexStoreSettings()


class IndexSettings(BaseModel):
    dimensions: int = Field(default=384, gt=0)  # all-MiniLM-L6-v2
    default_k: int = Field(default=5, ge=0)
