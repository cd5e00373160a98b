from datetime import datetime, timezone


def _scan_id(address: str, start_block: int, end_block: int, started_at: str) -> str:
    import hashlib as h
    base = f"{address}:{start_block}:{end_block}:{started_at}"
    return h.sha1(base.encode()).hexdigest()[:8]


def _now_ts_str() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
