"""URL cleaning entry points: validate, dispatch to a site handler or the generic classifier, reassemble."""

from __future__ import annotations

from typing import NamedTuple

import structlog

from cleanurls.parsing import InvalidUrlError, ParsedUrl, QueryParam
from cleanurls.sites import Platform, apply_site_handler, match_site
from cleanurls.tracking import DEFAULT_RULES, Decision, TrackingRules, classify_param, generic_clean


class CleanResult(NamedTuple):
    url: str
    removed: int


class Explanation(NamedTuple):
    valid: bool
    platform: Platform | None
    decisions: tuple[tuple[QueryParam, Decision], ...]
    result: CleanResult


def is_valid_url(text: str) -> bool:
    """True if *text* (trimmed) is an absolute http or https URL."""
    try:
        ParsedUrl.parse(text)
    except InvalidUrlError:
        return False
    return True


def clean_url(
    text: str,
    rules: TrackingRules = DEFAULT_RULES,
    log: structlog.stdlib.BoundLogger | None = None,
) -> CleanResult:
    """Strip tracking parameters from *text*.

    Invalid input is returned trimmed with ``removed == 0``; this function
    never raises for string input. ``removed`` is the net drop in parameter
    count, so parameters a site handler adds back (e.g. YouTube's ``v``)
    offset the ones it dropped.
    """
    trimmed = text.strip()
    try:
        original = ParsedUrl.parse(trimmed)
    except InvalidUrlError as exc:
        if log is not None:
            log.debug("clean.invalid", reason=str(exc))
        return CleanResult(trimmed, 0)

    rule = match_site(original.hostname)
    if rule is not None:
        cleaned = apply_site_handler(rule.platform, original)
    else:
        cleaned = generic_clean(original, rules)

    removed = max(0, len(original.params) - len(cleaned.params))
    if log is not None:
        log.debug(
            "clean.site_handler" if rule else "clean.generic",
            host=original.hostname,
            platform=rule.platform if rule else None,
            removed=removed,
        )
    return CleanResult(cleaned.to_string(), removed)


def explain_url(text: str, rules: TrackingRules = DEFAULT_RULES) -> Explanation:
    """Report which handler a URL goes through and how each parameter is classified.

    Decisions are only listed for the generic path; site handlers rewrite the
    URL as a whole.
    """
    result = clean_url(text, rules)
    try:
        parsed = ParsedUrl.parse(text)
    except InvalidUrlError:
        return Explanation(valid=False, platform=None, decisions=(), result=result)

    rule = match_site(parsed.hostname)
    if rule is not None:
        return Explanation(valid=True, platform=rule.platform, decisions=(), result=result)

    decisions = tuple((param, classify_param(param.name, param.value, rules)) for param in parsed.params)
    return Explanation(valid=True, platform=None, decisions=decisions, result=result)
