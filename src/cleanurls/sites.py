"""Site-specific canonicalization for platforms with a known URL shape."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import unquote

from cleanurls.parsing import ParsedUrl, QueryParam


class Platform(StrEnum):
    YOUTUBE = "youtube"
    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    TIKTOK = "tiktok"
    REDDIT = "reddit"
    SPOTIFY = "spotify"
    AMAZON = "amazon"
    FACEBOOK = "facebook"
    LINKEDIN = "linkedin"


@dataclass(frozen=True)
class SiteRule:
    """Host pattern routed to a platform handler."""

    platform: Platform
    pattern: re.Pattern[str]

    def matches(self, hostname: str) -> bool:
        return self.pattern.fullmatch(hostname) is not None


def _rule(platform: Platform, pattern: str) -> SiteRule:
    return SiteRule(platform, re.compile(pattern, re.IGNORECASE))


# Checked in order, first match wins. Patterns must not overlap.
SITE_RULES: tuple[SiteRule, ...] = (
    _rule(Platform.YOUTUBE, r"(?:www\.|m\.)?youtube\.com|(?:www\.)?youtu\.be"),
    _rule(Platform.TWITTER, r"(?:www\.|mobile\.)?(?:twitter\.com|x\.com)"),
    _rule(Platform.INSTAGRAM, r"(?:www\.)?instagram\.com"),
    _rule(Platform.TIKTOK, r"(?:www\.|m\.)?tiktok\.com"),
    _rule(Platform.REDDIT, r"(?:www\.|old\.)?reddit\.com"),
    _rule(Platform.SPOTIFY, r"open\.spotify\.com"),
    _rule(Platform.AMAZON, r"(?:www\.)?amazon\.(?:com|co\.uk|de|fr|it|es|ca|com\.au|co\.jp|in|com\.mx|com\.br|nl)"),
    _rule(Platform.FACEBOOK, r"(?:www\.|m\.)?facebook\.com"),
    _rule(Platform.LINKEDIN, r"(?:www\.)?linkedin\.com"),
)


def match_site(hostname: str) -> SiteRule | None:
    """Return the first rule whose host pattern matches, or None for generic cleaning."""
    for rule in SITE_RULES:
        if rule.matches(hostname):
            return rule
    return None


# -- Handlers ------------------------------------------------------------------

YOUTUBE_HOST = "www.youtube.com"
YOUTUBE_SHORT_HOSTS = frozenset({"youtu.be", "www.youtu.be"})
YOUTUBE_KEEP_PARAMS = ("t", "list")

AMAZON_PRODUCT_PATTERNS = (
    re.compile(r"/dp/([A-Z0-9]{10})", re.IGNORECASE),
    re.compile(r"/gp/product/([A-Z0-9]{10})", re.IGNORECASE),
)


def strip_all(url: ParsedUrl) -> ParsedUrl:
    """Path-addressed platforms: drop every query parameter and the fragment."""
    return url.stripped()


def handle_youtube(url: ParsedUrl) -> ParsedUrl:
    """Rewrite to ``/watch?v=<id>``, keeping only timestamp and playlist.

    youtu.be short links carry the id as the first path segment. Without a
    recognizable id the URL is returned unchanged.
    """
    if url.hostname in YOUTUBE_SHORT_HOSTS:
        video_id = unquote(url.path.lstrip("/").split("/", 1)[0])
    else:
        video_id = url.get("v")
    if not video_id:
        return url

    params = [QueryParam.build("v", video_id)]
    for name in YOUTUBE_KEEP_PARAMS:
        value = url.get(name)
        if value:
            params.append(QueryParam.build(name, value))
    return ParsedUrl(scheme="https", netloc=YOUTUBE_HOST, hostname=YOUTUBE_HOST, path="/watch", params=tuple(params))


def extract_asin(path: str) -> str | None:
    """Amazon product id from ``/dp/<id>`` or ``/gp/product/<id>``."""
    for pattern in AMAZON_PRODUCT_PATTERNS:
        m = pattern.search(path)
        if m:
            return m.group(1)
    return None


def handle_amazon(url: ParsedUrl) -> ParsedUrl:
    asin = extract_asin(url.path)
    if asin is None:
        return strip_all(url)
    return ParsedUrl(scheme="https", netloc=url.hostname, hostname=url.hostname, path=f"/dp/{asin}")


SITE_HANDLERS: dict[Platform, Callable[[ParsedUrl], ParsedUrl]] = {
    Platform.YOUTUBE: handle_youtube,
    Platform.TWITTER: strip_all,
    Platform.INSTAGRAM: strip_all,
    Platform.TIKTOK: strip_all,
    Platform.REDDIT: strip_all,
    Platform.SPOTIFY: strip_all,
    Platform.AMAZON: handle_amazon,
    Platform.FACEBOOK: strip_all,
    Platform.LINKEDIN: strip_all,
}


def apply_site_handler(platform: Platform, url: ParsedUrl) -> ParsedUrl:
    return SITE_HANDLERS[platform](url)
