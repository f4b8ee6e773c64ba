from __future__ import annotations

import json
import os
import sys
import time
from typing import Any, Dict, Optional, TextIO


_REDACTED_KEYS = {"access_key"}

_stream: Optional[TextIO] = None


def set_stream(stream: Optional[TextIO]) -> None:
    """Send records to ``stream``; ``None`` restores the process stderr."""
    global _stream
    _stream = stream


def _now_ms() -> int:
    return int(time.time() * 1000)


def _level_name(level: int) -> str:
    return {10: "DEBUG", 20: "INFO", 30: "WARN", 40: "ERROR"}.get(level, str(level))


def _parse_context(**ctx: Any) -> Dict[str, Any]:
    safe: Dict[str, Any] = {}
    for k, v in ctx.items():
        if k in _REDACTED_KEYS:
            safe[k] = "***"
            continue
        try:
            json.dumps(v)
            safe[k] = v
        except (TypeError, ValueError):
            safe[k] = str(v)
    return safe


def logger(module: str) -> Any:
    """Return ``debug``/``info``/``warn``/``error`` callables writing JSON lines.

    Records go to the stream given to ``set_stream``, else stderr; stdout is
    reserved for lookup results.
    """

    def _log(level: int, message: str, **ctx: Any) -> None:
        min_level = int(os.getenv("IP2LOC_LOG_LEVEL", "20"))
        if level < min_level:
            return
        record = {
            "ts": _now_ms(),
            "level": _level_name(level),
            "module": module,
            "message": message,
            **_parse_context(**ctx),
        }
        out = _stream if _stream is not None else sys.stderr
        out.write(json.dumps(record) + "\n")
        out.flush()

    return {
        "debug": lambda msg, **c: _log(10, msg, **c),
        "info": lambda msg, **c: _log(20, msg, **c),
        "warn": lambda msg, **c: _log(30, msg, **c),
        "error": lambda msg, **c: _log(40, msg, **c),
    }
