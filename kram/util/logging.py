"""Structured records on stderr, kept apart from the table on stdout."""
from __future__ import annotations
import json, sys, time
from typing import Any

_LEVELS = {'DEBUG': 0, 'INFO': 1, 'WARN': 2, 'ERROR': 3}
_ALIASES = {'WARNING': 'WARN'}
_LOG_LEVEL = 'WARN'
_LOG_FORMAT = 'text'

def _normalize_level(level: str) -> str:
    lvl = level.upper()
    return _ALIASES.get(lvl, lvl)

def configure_logging(level: str = 'WARN', format: str = 'text'):
    global _LOG_LEVEL, _LOG_FORMAT
    lvl = _normalize_level(level)
    if lvl not in _LEVELS:
        raise ValueError(f'Unknown log level: {level}')
    _LOG_LEVEL = lvl
    _LOG_FORMAT = format.lower()

def enabled(level: str) -> bool:
    return _LEVELS.get(_normalize_level(level), 1) >= _LEVELS[_LOG_LEVEL]

def log(level: str, message: str, **fields: Any):
    if not enabled(level):
        return
    ts = time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime())
    lvl = _normalize_level(level)
    if _LOG_FORMAT == 'json':
        rec = {'ts': ts, 'level': lvl, 'msg': message}
        rec.update(fields)
        line = json.dumps(rec, sort_keys=True, default=str)
    else:
        extra = ' '.join(f'{k}={v}' for k, v in fields.items())
        line = f"{ts} [{lvl}] {message}" + (f" {extra}" if extra else '')
    # Resolved per call so redirected or captured stderr is honoured.
    print(line, file=sys.stderr)

def debug(message: str, **fields: Any): log('debug', message, **fields)

def info(message: str, **fields: Any): log('info', message, **fields)

def warn(message: str, **fields: Any): log('warn', message, **fields)

def error(message: str, **fields: Any): log('error', message, **fields)
