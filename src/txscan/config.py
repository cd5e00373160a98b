"""
Runtime settings.

Values are resolved from, lowest precedence first: the built-in defaults
below, a `.env` file in the working directory, the process environment, and
finally explicit overrides (CLI options).
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

from dotenv import dotenv_values

DEFAULTS: dict[str, str] = {
    "TXSCAN_RPC_URL":   "https://cloudflare-eth.com",
    "TXSCAN_HOST":      "0.0.0.0",
    "TXSCAN_PORT":      "8080",
    "TXSCAN_TIMEOUT_S": "20",
    "TXSCAN_PACING_S":  "5",
    "TXSCAN_HTTP2":     "True",
    "TXSCAN_SINK":      "console",   # console | log
    "LOG_LEVEL":        "INFO",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _as_bool(key: str, raw: str) -> bool:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{key}: expected a boolean, got {raw!r}")


def _as_number(key: str, raw: str, kind: type, minimum: float) -> Any:
    try:
        v = kind(raw)
    except ValueError:
        raise ValueError(f"{key}: expected {kind.__name__}, got {raw!r}") from None
    if v < minimum:
        raise ValueError(f"{key}: must be >= {minimum}, got {v}")
    return v


@dataclass(slots=True, frozen=True)
class Settings:
    rpc_url: str
    host: str
    port: int
    timeout_s: float
    pacing_s: float
    http2: bool
    sink: str
    log_level: str

    @classmethod
    def from_mapping(cls, env: Mapping[str, str | None]) -> "Settings":
        merged = {k: (env.get(k) if env.get(k) not in (None, "") else d) for k, d in DEFAULTS.items()}
        sink = merged["TXSCAN_SINK"].strip().lower()
        if sink not in ("console", "log"):
            raise ValueError(f"TXSCAN_SINK: expected 'console' or 'log', got {sink!r}")
        return cls(
            rpc_url=merged["TXSCAN_RPC_URL"],
            host=merged["TXSCAN_HOST"],
            port=_as_number("TXSCAN_PORT", merged["TXSCAN_PORT"], int, 1),
            timeout_s=_as_number("TXSCAN_TIMEOUT_S", merged["TXSCAN_TIMEOUT_S"], float, 0.001),
            pacing_s=_as_number("TXSCAN_PACING_S", merged["TXSCAN_PACING_S"], float, 0),
            http2=_as_bool("TXSCAN_HTTP2", merged["TXSCAN_HTTP2"]),
            sink=sink,
            log_level=merged["LOG_LEVEL"].upper(),
        )

    @classmethod
    def load(cls, env_file: str | None = ".env", **overrides: Any) -> "Settings":
        env: dict[str, str | None] = {}
        if env_file and os.path.isfile(env_file):
            env.update(dotenv_values(env_file))
        env.update({k: v for k, v in os.environ.items() if k in DEFAULTS})
        settings = cls.from_mapping(env)
        return settings.with_overrides(**overrides)

    def with_overrides(self, **overrides: Any) -> "Settings":
        given = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **given) if given else self
