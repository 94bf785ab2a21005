from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol, Optional, Mapping, Any
import logging


@dataclass(frozen=True)
class LogContext:
    index_name: Optional[str] = None
    store: Optional[str] = None

    def as_extra(self) -> Mapping[str, Any]:
        # Only include non-None fields; logging.Formatter will lookup keys by name.
        return {k: v for k, v in self.__dict__.items() if v is not None}


class LoggerService(Protocol):
    """Contract used by services that want namespaced / contextual loggers."""

    def base(self) -> logging.Logger: ...
    def for_namespace(self, ns: str) -> logging.Logger: ...
    def with_context(self, logger: logging.Logger, ctx: LogContext) -> logging.Logger: ...
    def for_index(self, index_name: str) -> logging.Logger: ...
