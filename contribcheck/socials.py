"""Contact entry validation and normalization.

A contact entry in a record is either a bare URL or a mapping with a ``url``
and optional ``platform``, ``username`` and ``icon``. Both forms are
normalized to a :class:`ContactLink`.
"""

from __future__ import annotations

from typing import Optional, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, HttpUrl

# Host (without www./m. prefix) -> platform identifier
_PLATFORM_HOSTS: dict[str, str] = {
    "github.com": "github",
    "gitlab.com": "gitlab",
    "twitter.com": "twitter",
    "x.com": "twitter",
    "bsky.app": "bluesky",
    "tumblr.com": "tumblr",
    "instagram.com": "instagram",
    "youtube.com": "youtube",
    "twitch.tv": "twitch",
    "linkedin.com": "linkedin",
    "ko-fi.com": "kofi",
    "patreon.com": "patreon",
    "discord.gg": "discord",
    "discord.com": "discord",
    "itch.io": "itch",
    "bsky.social": "bluesky",
}

# Platforms whose profile handle is the subdomain (e.g. alice.tumblr.com)
_SUBDOMAIN_HANDLES = {"tumblr.com": "tumblr", "itch.io": "itch", "bsky.social": "bluesky"}

# Path prefixes that precede the handle
_HANDLE_PREFIXES = {"bluesky": "profile", "linkedin": "in"}

_NO_USERNAME = {"discord"}


class ContactEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")
    url: HttpUrl
    platform: Optional[str] = None
    username: Optional[str] = None
    icon: Optional[str] = None


class ContactLink(BaseModel):
    """Canonical contact shape stored on a validated contributor."""

    model_config = ConfigDict(frozen=True)
    url: str
    platform: Optional[str] = None
    username: Optional[str] = None
    icon: Optional[str] = None


def _strip_host(host: str) -> str:
    for prefix in ("www.", "m."):
        if host.startswith(prefix):
            return host[len(prefix) :]
    return host


def detect_platform(url: str) -> tuple[str, Optional[str]]:
    """Return (platform, username) guessed from a profile URL."""
    parts = urlsplit(url)
    host = _strip_host((parts.hostname or "").lower())
    segments = [s for s in parts.path.split("/") if s]

    for domain, platform in _SUBDOMAIN_HANDLES.items():
        if host.endswith("." + domain):
            return platform, host[: -len(domain) - 1]

    platform = _PLATFORM_HOSTS.get(host)
    if platform is None:
        # Mastodon-style profiles live on arbitrary instances under /@user
        if segments and segments[0].startswith("@") and len(segments[0]) > 1:
            return "mastodon", f"{segments[0][1:]}@{host}"
        return "website", None

    if platform in _NO_USERNAME:
        return platform, None
    prefix = _HANDLE_PREFIXES.get(platform)
    if prefix and segments and segments[0] == prefix:
        segments = segments[1:]
    if not segments:
        return platform, None
    return platform, segments[0].lstrip("@") or None


def transform_social(entry: Union[HttpUrl, ContactEntry, str]) -> ContactLink:
    """Normalize a validated contact entry to a ContactLink.

    Explicit platform/username/icon values on a mapping entry take precedence
    over what is detected from the URL.
    """
    if isinstance(entry, ContactEntry):
        url = str(entry.url)
        platform, username = detect_platform(url)
        platform = entry.platform.lower() if entry.platform else platform
        username = entry.username or username
        icon = entry.icon or platform
    else:
        url = str(entry)
        platform, username = detect_platform(url)
        icon = platform
    return ContactLink(url=url, platform=platform, username=username, icon=icon)
