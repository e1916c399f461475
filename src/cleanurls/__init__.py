"""Strip tracking parameters from URLs while keeping site-specific canonical forms."""

from cleanurls.cleaner import CleanResult, Explanation, clean_url, explain_url, is_valid_url
from cleanurls.extract import extract_url
from cleanurls.parsing import InvalidUrlError, ParsedUrl, QueryParam
from cleanurls.sites import SITE_RULES, Platform, SiteRule, match_site
from cleanurls.tracking import DEFAULT_RULES, Decision, TrackingRules, classify_param, generic_clean

__all__ = [
    "DEFAULT_RULES",
    "SITE_RULES",
    "CleanResult",
    "Decision",
    "Explanation",
    "InvalidUrlError",
    "ParsedUrl",
    "Platform",
    "QueryParam",
    "SiteRule",
    "TrackingRules",
    "classify_param",
    "clean_url",
    "explain_url",
    "extract_url",
    "generic_clean",
    "is_valid_url",
    "match_site",
]
