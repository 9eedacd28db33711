"""Embed URL resolution for third-party video platforms.

Notion stores the page URL a user pasted (e.g. a YouTube watch link).
Browsers need the platform's embeddable player URL inside an iframe.
"""

import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

_YOUTUBE_HOSTS = {"youtube.com", "www.youtube.com", "m.youtube.com"}
_VIMEO_ID_RE = re.compile(r"^/(\d+)")
_BILIBILI_BV_RE = re.compile(r"/video/(BV[0-9A-Za-z]+)")


def embed_src(url: str) -> Optional[str]:
    """Return the embeddable player URL for a known platform.

    Args:
        url: Page URL of the video

    Returns:
        Player URL, or None if the URL is not from a known platform

    Examples:
        >>> embed_src("https://www.youtube.com/watch?v=abc123")
        'https://www.youtube.com/embed/abc123'
        >>> embed_src("https://youtu.be/abc123")
        'https://www.youtube.com/embed/abc123'
        >>> embed_src("https://vimeo.com/76979871")
        'https://player.vimeo.com/video/76979871'
        >>> embed_src("https://example.com/video.mp4") is None
        True
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return None

    host = (parsed.hostname or "").lower()

    if host in _YOUTUBE_HOSTS:
        if parsed.path.startswith("/embed/"):
            return url
        video_id = parse_qs(parsed.query).get("v", [None])[0]
        if not video_id and parsed.path.startswith("/shorts/"):
            video_id = parsed.path.split("/")[2] or None
        return f"https://www.youtube.com/embed/{video_id}" if video_id else None

    if host == "youtu.be":
        video_id = parsed.path.lstrip("/")
        return f"https://www.youtube.com/embed/{video_id}" if video_id else None

    if host in ("vimeo.com", "www.vimeo.com"):
        match = _VIMEO_ID_RE.match(parsed.path)
        return f"https://player.vimeo.com/video/{match.group(1)}" if match else None

    if host in ("bilibili.com", "www.bilibili.com"):
        match = _BILIBILI_BV_RE.search(parsed.path)
        if match:
            return f"https://player.bilibili.com/player.html?bvid={match.group(1)}"
        return None

    return None
