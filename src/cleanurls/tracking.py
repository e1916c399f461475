"""Generic tracking-parameter detection for sites without a dedicated handler."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import NamedTuple

from cleanurls.parsing import ParsedUrl
from cleanurls.statuses import ParamRule

# Removed on exact (case-insensitive) name match
TRACKING_PARAMS_EXACT = frozenset(
    {
        # Click IDs
        "fbclid",
        "gclid",
        "gclsrc",
        "dclid",
        "msclkid",
        "twclid",
        "ttclid",
        "li_fat_id",
        "yclid",
        "wbraid",
        "gbraid",
        "rdt_cid",
        "sc_cid",
        "spm",
        "_kx",
        "tblci",
        "oborigurl",
        "outbrainclickid",
        # Referrer/source
        "ref",
        "referrer",
        "source",
        "campaign",
        "trk",
        "mkt_tok",
        # Analytics IDs
        "_ga",
        "_gl",
        "_ke",
        "cid",
        "igshid",
        "si",
        "feature",
        # HubSpot
        "__hsfp",
        "__hssc",
        "__hstc",
        "hsctatracking",
        # Email/CRM
        "mktoid",
        "__s",
        # General
        "xtor",
        "share_source_id",
        "share_source_type",
        # Misc
        "_branch_match_id",
        "adjust_tracker",
        "adjust_campaign",
        "adjust_adgroup",
        "pi_campaign_id",
        "pi_contact_id",
    }
)

# Removed when the name starts with any of these
TRACKING_PREFIXES = (
    "utm_",  # Google Analytics
    "fbclid",
    "gclid",
    "msclkid",
    "__hs",  # HubSpot
    "_hs",
    "mc_",  # Mailchimp
    "fb_",
    "tt_",  # TikTok
    "at_",  # AT Internet
    "mtm_",  # Matomo
    "pk_",  # Piwik
    "ns_",
    "stm_",
    "aff_",  # affiliate networks
    "ref_",
    "oly_",  # Omeda
    "vero_",
    "ml_",  # MailerLite
    "nr_",
    "hsa_",  # HubSpot Ads
    "dm_",  # Dotmailer
    "wickedid",
)

# Never removed unless an exact or prefix rule already matched
PRESERVE_PARAMS = frozenset(
    {
        # Search
        "q",
        "query",
        "search",
        "s",
        "keyword",
        "keywords",
        # Pagination
        "page",
        "p",
        "offset",
        "limit",
        "per_page",
        "start",
        # Sorting/filtering
        "sort",
        "order",
        "filter",
        "category",
        "type",
        "tag",
        "tags",
        # Auth/session
        "token",
        "code",
        "state",
        # Content identifiers
        "id",
        "v",
        "t",
        "item",
        "product",
        "sku",
        "slug",
        # Locale
        "lang",
        "language",
        "locale",
        "hl",
        "gl",
        # UI state
        "view",
        "mode",
        "tab",
        "section",
    }
)

# Values that look like opaque tracking identifiers
TRACKING_VALUE_PATTERNS = (
    re.compile(r"[A-Za-z0-9\-_]{20,}"),
    re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE),
)

TRACKING_FRAGMENT_PREFIXES = ("xtor", "utm", "pk_", "mtm_")

# Names at most this long are subject to the value-shape heuristic
SHORT_NAME_MAX = 3


@dataclass(frozen=True)
class TrackingRules:
    """Read-only rule tables driving the generic classifier."""

    exact: frozenset[str] = TRACKING_PARAMS_EXACT
    prefixes: tuple[str, ...] = TRACKING_PREFIXES
    preserve: frozenset[str] = PRESERVE_PARAMS
    value_patterns: tuple[re.Pattern[str], ...] = TRACKING_VALUE_PATTERNS
    fragment_prefixes: tuple[str, ...] = TRACKING_FRAGMENT_PREFIXES

    def extend(
        self,
        *,
        exact: Iterable[str] = (),
        prefixes: Iterable[str] = (),
        preserve: Iterable[str] = (),
        fragment_prefixes: Iterable[str] = (),
    ) -> TrackingRules:
        """Return a copy with extra names added to each table (lower-cased)."""
        return replace(
            self,
            exact=self.exact | {name.lower() for name in exact},
            prefixes=_merge(self.prefixes, prefixes),
            preserve=self.preserve | {name.lower() for name in preserve},
            fragment_prefixes=_merge(self.fragment_prefixes, fragment_prefixes),
        )


def _merge(current: tuple[str, ...], extra: Iterable[str]) -> tuple[str, ...]:
    merged = list(current)
    for item in extra:
        item = item.lower()
        if item not in merged:
            merged.append(item)
    return tuple(merged)


DEFAULT_RULES = TrackingRules()


class Decision(NamedTuple):
    rule: ParamRule
    remove: bool


def classify_param(name: str, value: str, rules: TrackingRules = DEFAULT_RULES) -> Decision:
    """Decide whether one query parameter is tracking.

    Tiers run in a fixed order and the first match wins: exact blocklist,
    prefix blocklist, allowlist, then the short-name/opaque-value heuristic.
    Anything left over is kept.
    """
    key = name.lower()
    if key in rules.exact:
        return Decision(ParamRule.EXACT, True)
    if key.startswith(rules.prefixes):
        return Decision(ParamRule.PREFIX, True)
    if key in rules.preserve:
        return Decision(ParamRule.PRESERVE, False)
    # Heuristic: may also catch legitimate short opaque ids (hash slugs etc.)
    if len(name) <= SHORT_NAME_MAX and any(pattern.fullmatch(value) for pattern in rules.value_patterns):
        return Decision(ParamRule.SHAPE, True)
    return Decision(ParamRule.DEFAULT, False)


def is_tracking_fragment(fragment: str | None, rules: TrackingRules = DEFAULT_RULES) -> bool:
    return bool(fragment) and fragment.lower().startswith(rules.fragment_prefixes)


def generic_clean(url: ParsedUrl, rules: TrackingRules = DEFAULT_RULES) -> ParsedUrl:
    """Drop tracking parameters pair by pair, keeping survivors in their original order."""
    params = tuple(param for param in url.params if not classify_param(param.name, param.value, rules).remove)
    fragment = None if is_tracking_fragment(url.fragment, rules) else url.fragment
    return url.replace(params=params, fragment=fragment)
