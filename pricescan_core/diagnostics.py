from typing import Any, Dict, Optional
import logging

from .config import config


_LOGGER_CACHE: Dict[str, logging.Logger] = {}
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _default_level() -> int:
    return logging.DEBUG if config.enable_debug else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Logger with a single stream handler, cached per name.

    The starting level follows config.enable_debug (PRICESCAN_DEBUG);
    set_log_level() changes it afterwards for every cached logger.
    """
    if name in _LOGGER_CACHE:
        return _LOGGER_CACHE[name]
    lg = logging.getLogger(name)
    if not lg.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        lg.addHandler(handler)
        lg.propagate = False
        _apply_level(lg, _default_level())
    _LOGGER_CACHE[name] = lg
    return lg


def _apply_level(lg: logging.Logger, level: int) -> None:
    lg.setLevel(level)
    for handler in lg.handlers:
        handler.setLevel(level)


def set_log_level(level: str) -> None:
    """Change the level of every logger handed out by get_logger."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    for lg in _LOGGER_CACHE.values():
        _apply_level(lg, numeric)


def sample(value: Any, limit: Optional[int] = None) -> str:
    """Truncated, single-line rendering of offending input for log lines."""
    if limit is None:
        limit = config.log_sample_chars
    text = value if isinstance(value, str) else repr(value)
    text = " ".join(text.split())
    if len(text) > limit:
        return text[:limit] + "..."
    return text
