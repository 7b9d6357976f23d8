"""URL helpers."""

from typing import Optional
from urllib.parse import urlsplit


def origin(url: str) -> Optional[str]:
    """scheme://host[:port] или None для URL без схемы/хоста."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None

    default_ports = {"http": 80, "https": 443}
    netloc = parts.hostname
    if port is not None and default_ports.get(parts.scheme) != port:
        netloc = f"{netloc}:{port}"
    return f"{parts.scheme}://{netloc}"


def display_name(url: str, max_length: int = 80) -> str:
    """Короткое имя ресурса для таблиц: host + path, без query."""
    parts = urlsplit(url)
    if parts.scheme == "data":
        return url[:max_length]

    name = f"{parts.netloc}{parts.path}" if parts.netloc else url
    if parts.query:
        name += "?…"
    if len(name) > max_length:
        name = name[: max_length - 1] + "…"
    return name
