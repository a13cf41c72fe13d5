"""General helper functions shared by the stores and the CLI."""
import time
import uuid
from typing import Optional

from utils.timestamps import now_ms


def generate_id(prefix: str = "") -> str:
    """Generate an id of the form ``<prefix>_<epoch-ms>_<random>``."""
    random_part = uuid.uuid4().hex[:9]
    stamp = now_ms()
    return f"{prefix}_{stamp}_{random_part}" if prefix else f"{stamp}_{random_part}"


def format_time_ago(timestamp_ms: int, now: Optional[int] = None) -> str:
    now = now if now is not None else now_ms()
    diff = now - timestamp_ms

    minutes = diff // (1000 * 60)
    hours = diff // (1000 * 60 * 60)
    days = diff // (1000 * 60 * 60 * 24)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 30:
        return f"{days}d ago"
    return time.strftime("%Y-%m-%d", time.localtime(timestamp_ms / 1000))


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


def format_duration(ms: int) -> str:
    if ms < 1000:
        return f"{ms}ms"
    if ms < 60000:
        return f"{ms / 1000:.1f}s"
    return f"{ms / 60000:.1f}m"
