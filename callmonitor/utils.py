## callmonitor/utils.py

from __future__ import annotations
import os, time, logging
from functools import wraps
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError
from .schemas import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("callmonitor")

ENV_OVERRIDES = {
    "CALLMONITOR_INPUT_DIR": "input_dir",
    "CALLMONITOR_MONITORING_INTERVAL": "monitoring_interval",
    "CALLMONITOR_CHARSET": "charset",
    "CALLMONITOR_CSV_HEADER": "csv_header",
}


class CallMonitorError(Exception):
    pass

class StartupConfigError(CallMonitorError):
    """Bad or missing configuration; the process must not start."""

class DecodeError(CallMonitorError):
    def __init__(self, path: str, charset: str, reason: str):
        super().__init__(f"{path}: not valid {charset} ({reason})")
        self.path = path
        self.charset = charset

class FileReadError(CallMonitorError):
    """File vanished or became unreadable between discovery and read."""
    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path

class Retryable(CallMonitorError):
    pass

class PublishError(Retryable):
    pass


def retry(times: int = 3, delay: float = 1.0):
    def deco(fn: Callable[..., Any]):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            last = None
            for i in range(times):
                try:
                    return fn(*args, **kwargs)
                except Retryable as e:
                    last = e
                    if i + 1 < times:
                        logger.warning(f"Retry {i+1}/{times} for {fn.__name__}: {e}")
                        time.sleep(delay * (2 ** i))
            raise last if last else CallMonitorError("Retry failed")
        return wrapper
    return deco


def setup_logging(path: str | None = "logs/callmonitor.log", level: str = "INFO") -> logging.Logger:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if path:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=handlers, force=True)
    return logger


def load_yaml(path: str) -> dict:
    import yaml
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: str = "config.yaml") -> Settings:
    """Read the YAML config, apply CALLMONITOR_* env overrides and validate.

    Raises StartupConfigError for a missing file or invalid values.
    """
    if not os.path.exists(path):
        raise StartupConfigError(f"Config file not found: {path}")
    raw = load_yaml(path)
    monitor = dict(raw.get("callmonitor") or {})
    for env, key in ENV_OVERRIDES.items():
        value = os.getenv(env)
        if value not in (None, ""):
            monitor[key] = value
    raw["callmonitor"] = monitor
    try:
        return Settings.model_validate(raw)
    except ValidationError as e:
        raise StartupConfigError(f"Invalid configuration in {path}: {e}") from e


def check_input_dir(path: str) -> Path:
    p = Path(path)
    if not p.exists():
        raise StartupConfigError(f"Input directory does not exist: {p}")
    if not p.is_dir():
        raise StartupConfigError(f"Input path is not a directory: {p}")
    if not os.access(p, os.R_OK | os.X_OK):
        raise StartupConfigError(f"Input directory is not readable: {p}")
    return p.resolve()
