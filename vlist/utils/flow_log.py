"""Timestamped, optionally throttled flow logging for windowing diagnostics."""

import time

from vlist.utils.settings import settings

_flow_log_last: dict[str, float] = {}

_ALWAYS_SHOWN = ('WARNING', 'ERROR')


def log_flow(component: str, message: str, *, level: str = "DEBUG",
             throttle_key: str | None = None, every_s: float | None = None):
    """Print one trace line; DEBUG/INFO lines need `flow_trace_logs` enabled."""
    if level not in _ALWAYS_SHOWN:
        try:
            enabled = bool(settings.value("flow_trace_logs", False, type=bool))
        except Exception:
            enabled = False
        if not enabled:
            return

    now = time.time()
    if throttle_key and every_s is not None:
        last = _flow_log_last.get(throttle_key, 0.0)
        if (now - last) < every_s:
            return
        _flow_log_last[throttle_key] = now
    ts = time.strftime("%H:%M:%S", time.localtime(now)) + f".{int((now % 1) * 1000):03d}"
    print(f"[{ts}][TRACE][{component}][{level}] {message}")


def reset_throttle():
    """Forget throttle timestamps (used when a view is rebuilt)."""
    _flow_log_last.clear()
