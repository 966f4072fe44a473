"""Logging setup for the ``curve-sample`` CLI and other applications.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached to the root logger by ``setup_logging``, which can be called
again to reconfigure without stacking handlers.

Context fields pushed with ``push_context`` are appended to every record:

    Human: 2026-10-18T13:45:12.345Z | INFO     | app=curve-sample curve=outline | Sampled 64 point(s)
    JSON:  {"t": "2026-10-18T13:45:12.345000+00:00", "lvl": "INFO", "name": "curve_engine.cli", "msg": "...", "app": "curve-sample"}
"""

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


_context_var = contextvars.ContextVar('curve_engine_log_context', default={})

# Handlers owned by setup_logging
_handlers: List[logging.Handler] = []


class ContextFormatter(logging.Formatter):
    """Render records as a human line or a JSON object, plus context fields."""

    def __init__(self, fmt_mode: str = "human"):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown format mode: {fmt_mode}. Use 'human' or 'json'.")
        self.fmt_mode = fmt_mode

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        context = _context_var.get()

        if self.fmt_mode == "json":
            payload = {
                't': ts.isoformat(),
                'lvl': record.levelname,
                'name': record.name,
                'msg': record.getMessage(),
                **context,
            }
            if record.exc_info:
                payload['exc'] = self.formatException(record.exc_info)
            return json.dumps(payload, default=str)

        fields = [ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z', f"{record.levelname:8s}"]
        if context:
            fields.append(' '.join(f"{k}={v}" for k, v in context.items()))
        fields.append(record.getMessage())
        line = ' | '.join(fields)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    to_stderr: bool = True,
    context: Optional[Dict[str, Any]] = None,
) -> List[logging.Handler]:
    """Configure the root logger, replacing handlers from earlier calls.

    Parameters
    ----------
    log_level : str
        "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL"
    log_file : str, optional
        Also write records here (parent directories are created)
    json : bool
        JSON lines in the log file instead of human lines
    to_stderr : bool
        Attach a human-readable stderr handler, default True
    context : dict, optional
        Fields pushed with ``push_context`` before returning

    Returns
    -------
    list of logging.Handler
        Handlers now installed on the root logger.

    Raises
    ------
    ValueError
        Unknown ``log_level``.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    root = logging.getLogger()
    while _handlers:
        handler = _handlers.pop()
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)

    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter("human"))
        _handlers.append(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(ContextFormatter("json" if json else "human"))
        _handlers.append(file_handler)

    for handler in _handlers:
        root.addHandler(handler)

    if context:
        push_context(**context)
    return list(_handlers)


def push_context(**kwargs) -> None:
    """Add fields to every subsequent record in this context."""
    _context_var.set({**_context_var.get(), **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove the given context fields, or all of them."""
    if keys is None:
        _context_var.set({})
        return
    remaining = {k: v for k, v in _context_var.get().items() if k not in keys}
    _context_var.set(remaining)


def get_context() -> Dict[str, Any]:
    return dict(_context_var.get())
