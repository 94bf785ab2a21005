from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
import logging, queue
import logging.handlers

from typing import Optional, Mapping

from vectorindex.config.config import AppSettings

from .base import LoggerService, LogContext
from .formatters import SafeFormatter, JsonFormatter


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _level(name: str) -> int:
    return getattr(logging, str(name).upper(), logging.INFO)


@dataclass(frozen=True)
class LoggingConfig:
    """
    Configure sinks & formats.

    Attributes:
      root_ns: base logger name to use (`vectorindex`).
      level: default level for root logger.
      log_dir: directory for file logs (rotated); None => console only.
      use_json: True => JSON logs for files; console stays text.
      enable_queue: True => offload file IO via QueueHandler/Listener (non-blocking).
      per_namespace_levels: optional map (e.g. {"vectorindex.storage": "DEBUG"}).
      console_pattern: text format string for console.
      file_pattern: text format string for file when use_json=False.
      max_bytes / backup_count: rotation for file handlers.
    """
    root_ns: str = "vectorindex"
    level: str = "INFO"
    log_dir: Optional[str] = "./logs"
    use_json: bool = False
    enable_queue: bool = False
    per_namespace_levels: Optional[Mapping[str, str]] = None
    console_pattern: str = "%(asctime)s %(levelname)s \t%(name)s    index=%(index_name)s - %(message)s"
    file_pattern: str = "%(asctime)s %(levelname)s %(name)s %(index_name)s %(store)s %(message)s"
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5

    @staticmethod
    def from_env() -> "LoggingConfig":
        return LoggingConfig(
            root_ns=os.getenv("VECTORINDEX_LOG_ROOT", "vectorindex"),
            level=os.getenv("VECTORINDEX_LOG_LEVEL", "INFO"),
            log_dir=os.getenv("VECTORINDEX_LOG_DIR", "./logs"),
            use_json=os.getenv("VECTORINDEX_LOG_JSON", "0") == "1",
            enable_queue=os.getenv("VECTORINDEX_LOG_ASYNC", "0") == "1",
        )

    @staticmethod
    def from_cfg(cfg: AppSettings, log_dir: Optional[str] = None) -> "LoggingConfig":
        return LoggingConfig(
            root_ns="vectorindex",
            level=cfg.logging.level,
            log_dir=log_dir or os.path.join(cfg.root, cfg.logging.log_dir),
            use_json=cfg.logging.json_logs,
            enable_queue=True,
        )


class _ContextAdapter(logging.LoggerAdapter):
    """
    Injects contextual fields into LogRecord via `extra`.
    Preserves original logger API (info, debug, etc.).
    """
    def process(self, msg, kwargs):
        extra = kwargs.get("extra") or {}
        merged = {**self.extra, **extra}
        kwargs["extra"] = merged
        return msg, kwargs


class StdLoggerService(LoggerService):
    """
      • text/JSON formatters
      • per-namespace levels
      • optional async file IO via QueueHandler
      • context helpers (with_context / for_index)
    """
    def __init__(self, base: logging.Logger, *, cfg: LoggingConfig,
                 listener: Optional[logging.handlers.QueueListener] = None):
        self._base = base
        self._cfg = cfg
        self._listener = listener

    # --- LoggerService interface ---

    def base(self) -> logging.Logger:
        return self._base

    def for_namespace(self, ns: str) -> logging.Logger:
        return self._base.getChild(ns)

    def with_context(self, logger: logging.Logger, ctx: LogContext) -> logging.Logger:
        return _ContextAdapter(logger, ctx.as_extra())

    def for_index(self, index_name: str) -> logging.Logger:
        return self.with_context(self.for_namespace("index"), LogContext(index_name=index_name))

    def shutdown(self) -> None:
        if self._listener is not None:
            self._listener.stop()
            self._listener = None

    # --- builder ---

    @staticmethod
    def build(cfg: Optional[LoggingConfig] = None) -> "StdLoggerService":
        cfg = cfg or LoggingConfig.from_env()

        root = logging.getLogger(cfg.root_ns)
        # Reset handlers if rebuilding
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        root.setLevel(_level(cfg.level))
        root.propagate = False

        # Per-namespace levels
        if cfg.per_namespace_levels:
            for ns, lvl in cfg.per_namespace_levels.items():
                logging.getLogger(ns).setLevel(_level(lvl))

        # Console handler (text)
        console = logging.StreamHandler()
        console.setLevel(_level(cfg.level))
        console.setFormatter(SafeFormatter(cfg.console_pattern))
        root.addHandler(console)

        if cfg.log_dir is None:
            return StdLoggerService(root, cfg=cfg)

        # File handler (rotating)
        _ensure_dir(Path(cfg.log_dir))
        file_path = Path(cfg.log_dir) / "vectorindex.log"

        fh = logging.handlers.RotatingFileHandler(
            file_path, maxBytes=cfg.max_bytes, backupCount=cfg.backup_count, encoding="utf-8"
        )
        if cfg.use_json:
            fh.setFormatter(JsonFormatter())
        else:
            fh.setFormatter(SafeFormatter(cfg.file_pattern))
        fh.setLevel(_level(cfg.level))

        if cfg.enable_queue:
            # Non-blocking file IO
            q = queue.Queue(-1)
            root.addHandler(logging.handlers.QueueHandler(q))
            listener = logging.handlers.QueueListener(q, fh, respect_handler_level=True)
            listener.start()
            return StdLoggerService(root, cfg=cfg, listener=listener)

        root.addHandler(fh)
        return StdLoggerService(root, cfg=cfg)
