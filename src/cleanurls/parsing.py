"""URL parsing and serialization: the structured form every cleaning step works on."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from urllib.parse import quote, unquote_plus, urlencode, urlsplit

ALLOWED_SCHEMES = frozenset({"http", "https"})
DEFAULT_PORTS = {"http": 80, "https": 443}

# Characters left as-is when percent-encoding path, query and fragment.
# "%" stays so existing escapes are never double-encoded.
_URL_SAFE = "!#$%&'()*+,/:;=?@[]~|^"

_FORBIDDEN_HOST_CHARS = re.compile(r"[\s<>^|%\\\"`{}/?#@\[\]]")


class InvalidUrlError(ValueError):
    """Text is not an absolute http(s) URL."""


@dataclass(frozen=True)
class QueryParam:
    """One ``key=value`` pair of a query string, kept in its raw (encoded) form."""

    raw: str

    @classmethod
    def build(cls, name: str, value: str) -> QueryParam:
        return cls(urlencode([(name, value)]))

    @property
    def name(self) -> str:
        return unquote_plus(self.raw.partition("=")[0])

    @property
    def value(self) -> str:
        return unquote_plus(self.raw.partition("=")[2])


@dataclass(frozen=True)
class ParsedUrl:
    """Normalized absolute http(s) URL with an ordered tuple of query pairs.

    Instances are immutable; transformations return new values via
    :meth:`replace`, so the parsed input is never modified.
    """

    scheme: str
    netloc: str
    hostname: str
    path: str = "/"
    params: tuple[QueryParam, ...] = ()
    fragment: str | None = None

    @classmethod
    def parse(cls, text: str) -> ParsedUrl:
        """Parse and normalize *text*. Raises InvalidUrlError if it is not an http(s) URL."""
        text = text.strip()
        try:
            parts = urlsplit(text)
            scheme = parts.scheme.lower()
            if scheme not in ALLOWED_SCHEMES:
                raise InvalidUrlError(f"unsupported scheme: {parts.scheme!r}")

            hostname = parts.hostname
            if not hostname:
                raise InvalidUrlError("missing host")
            if ":" not in hostname and _FORBIDDEN_HOST_CHARS.search(hostname):
                raise InvalidUrlError(f"invalid host: {hostname!r}")

            port = parts.port
            netloc = _build_netloc(parts.netloc, hostname, port, scheme)
            params = tuple(
                QueryParam(quote(piece, safe=_URL_SAFE)) for piece in parts.query.split("&") if piece
            )
            return cls(
                scheme=scheme,
                netloc=netloc,
                hostname=hostname,
                path=quote(parts.path, safe=_URL_SAFE) or "/",
                params=params,
                fragment=quote(parts.fragment, safe=_URL_SAFE) or None,
            )
        except InvalidUrlError:
            raise
        except ValueError as exc:
            # urlsplit/port raise ValueError on bad IPv6 literals and ports
            raise InvalidUrlError(str(exc)) from exc

    @property
    def query(self) -> str:
        return "&".join(param.raw for param in self.params)

    def get(self, name: str) -> str | None:
        """Value of the first parameter called *name*, or None."""
        for param in self.params:
            if param.name == name:
                return param.value
        return None

    def replace(self, **changes) -> ParsedUrl:
        return dataclasses.replace(self, **changes)

    def stripped(self) -> ParsedUrl:
        """Same URL without any query parameters or fragment."""
        return self.replace(params=(), fragment=None)

    def to_string(self) -> str:
        url = f"{self.scheme}://{self.netloc}{self.path}"
        if self.params:
            url += f"?{self.query}"
        if self.fragment:
            url += f"#{self.fragment}"
        return url

    def __str__(self) -> str:
        return self.to_string()


def _build_netloc(netloc: str, hostname: str, port: int | None, scheme: str) -> str:
    """Rebuild the authority with a lower-case host and without the scheme's default port."""
    userinfo, sep, _ = netloc.rpartition("@")
    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None and port != DEFAULT_PORTS[scheme]:
        host = f"{host}:{port}"
    return f"{userinfo}@{host}" if sep else host
