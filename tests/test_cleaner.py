"""Tests for the public cleaning entry points."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from cleanurls import CleanResult, Platform, clean_url, explain_url, is_valid_url
from cleanurls.statuses import ParamRule
from cleanurls.tracking import DEFAULT_RULES

OPAQUE = "AbCdEfGhIjKlMnOpQrStUvWxY"

SAMPLES = [
    "https://example.com/?utm_source=x&id=5",
    "https://example.com/page?id=5",
    "https://youtu.be/abc123?t=30",
    "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PL1&si=abc",
    "https://www.youtube.com/@channel?si=abc",
    "https://www.amazon.com/Some-Title/dp/B000123456/ref=xyz?pf_rd=1",
    "https://www.amazon.de/s?k=usb&ref=nb",
    "https://twitter.com/user/status/123?s=20",
    "https://example.com/list?a=1&utm_medium=x&a=2&fbclid=z",
    "https://example.com/a b?q=hello world#utm_x",
    "HTTP://Example.COM:80?gclid=1",
    f"https://example.com/?zq={OPAQUE}&id={OPAQUE}",
    " not a url ",
    "mailto:user@example.com",
    "",
]


class TestIsValidUrl:
    @pytest.mark.parametrize("text", ["https://example.com", "http://example.com/a?b=c", "  https://x.com/y  "])
    def test_valid(self, text):
        assert is_valid_url(text) is True

    @pytest.mark.parametrize("text", ["", "not a url", "ftp://example.com", "mailto:a@b.c", "/path", "https://"])
    def test_invalid(self, text):
        assert is_valid_url(text) is False


class TestCleanUrl:
    def test_removes_exact_match(self):
        assert clean_url("https://example.com/?utm_source=x&id=5") == CleanResult("https://example.com/?id=5", 1)

    def test_invalid_input_passthrough(self):
        assert clean_url(" not a url ") == CleanResult("not a url", 0)

    def test_unsupported_scheme_passthrough(self):
        assert clean_url("ftp://example.com/?utm_source=x") == CleanResult("ftp://example.com/?utm_source=x", 0)

    def test_allowlist_beats_heuristic(self):
        url = f"https://example.com/?id={OPAQUE}"
        assert clean_url(url) == CleanResult(url, 0)

    def test_heuristic_removes_short_opaque_param(self):
        assert clean_url(f"https://example.com/?zq={OPAQUE}&q=shoes") == CleanResult("https://example.com/?q=shoes", 1)

    def test_youtube_short_link(self):
        assert clean_url("https://youtu.be/abc123?t=30") == CleanResult("https://www.youtube.com/watch?v=abc123&t=30", 0)

    def test_youtube_watch(self):
        result = clean_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PL1&index=3&si=abc")
        assert result == CleanResult("https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PL1", 2)

    def test_amazon_product(self):
        result = clean_url("https://www.amazon.com/Some-Title/dp/B000123456/ref=xyz?pf_rd=1")
        assert result.url == "https://www.amazon.com/dp/B000123456"
        assert result.removed >= 1

    def test_strip_all_platform(self):
        assert clean_url("https://twitter.com/user/status/123?s=20") == CleanResult("https://twitter.com/user/status/123", 1)

    def test_site_handler_preempts_generic_rules(self):
        # "q" would be preserved by the generic classifier
        assert clean_url("https://x.com/search?q=python&src=typed_query") == CleanResult("https://x.com/search", 2)

    def test_order_and_duplicates_preserved(self):
        result = clean_url("https://example.com/list?a=1&utm_medium=x&a=2&b=3&fbclid=z&a=1")
        assert result == CleanResult("https://example.com/list?a=1&a=2&b=3&a=1", 2)

    def test_no_site_match_nothing_to_remove(self):
        assert clean_url("https://example.com/page?id=5") == CleanResult("https://example.com/page?id=5", 0)

    def test_all_params_removed_leaves_no_question_mark(self):
        assert clean_url("https://example.com/page?utm_source=a&utm_medium=b") == CleanResult("https://example.com/page", 2)

    def test_tracking_fragment_not_counted(self):
        assert clean_url("https://example.com/page#xtor=RSS-1") == CleanResult("https://example.com/page", 0)

    def test_normalizes_scheme_host_and_port(self):
        assert clean_url("HTTPS://Example.COM:443/Page?fbclid=1") == CleanResult("https://example.com/Page", 1)

    def test_custom_rules(self):
        rules = DEFAULT_RULES.extend(exact=["zz"])
        assert clean_url("https://example.com/?zz=1&id=2", rules) == CleanResult("https://example.com/?id=2", 1)

    def test_logs_dispatch_when_logger_given(self):
        log = MagicMock()
        clean_url("https://twitter.com/a?s=1", log=log)
        log.debug.assert_called_once_with("clean.site_handler", host="twitter.com", platform=Platform.TWITTER, removed=1)

    def test_logs_invalid_input(self):
        log = MagicMock()
        clean_url("nope", log=log)
        assert log.debug.call_args.args == ("clean.invalid",)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_idempotent(self, text):
        once = clean_url(text)
        assert clean_url(once.url).url == once.url

    @pytest.mark.parametrize("text", SAMPLES)
    def test_removed_never_exceeds_param_count(self, text):
        result = clean_url(text)
        assert 0 <= result.removed <= text.count("=")

    @pytest.mark.parametrize("text", ["", "   ", "http://[::1", "https://example.com:99999/", "\x00", "https://\udcff.com/"])
    def test_never_raises(self, text):
        result = clean_url(text)
        assert result.removed == 0


class TestExplainUrl:
    def test_generic_decisions(self):
        explanation = explain_url("https://example.com/?utm_source=x&id=5&color=red")
        assert explanation.valid is True
        assert explanation.platform is None
        assert [(p.name, d.rule, d.remove) for p, d in explanation.decisions] == [
            ("utm_source", ParamRule.PREFIX, True),
            ("id", ParamRule.PRESERVE, False),
            ("color", ParamRule.DEFAULT, False),
        ]
        assert explanation.result == CleanResult("https://example.com/?id=5&color=red", 1)

    def test_site_handler(self):
        explanation = explain_url("https://open.spotify.com/track/1?si=2")
        assert explanation.platform == Platform.SPOTIFY
        assert explanation.decisions == ()
        assert explanation.result == CleanResult("https://open.spotify.com/track/1", 1)

    def test_invalid(self):
        explanation = explain_url("not a url")
        assert explanation.valid is False
        assert explanation.result == CleanResult("not a url", 0)
