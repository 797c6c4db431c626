"""
Public URL extraction from tunnel client output.

The SSH servers announce the assigned URL somewhere in free-form text
(banners, colored status lines, console links). This is a heuristic over
untrusted text, not a URL parser: it finds the first line that mentions
both a scheme and one of the provider's domains and reduces the URL
to scheme + host.
"""

import logging
import re
from typing import Callable, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

SCHEME_MARKERS = ("http://", "https://")
SCHEME_SEPARATOR = "://"

# Whitespace, list punctuation and control characters (ANSI escapes) end the URL
_URL_TERMINATOR = re.compile(r"[\s,;\x00-\x1f\x7f]")


def _scheme_start(line: str) -> int:
    positions = [line.find(marker) for marker in SCHEME_MARKERS]
    return min(pos for pos in positions if pos >= 0)


def extract_tunnel_url(line: str, url_patterns: Iterable[str]) -> Optional[str]:
    """Return scheme + host of the tunnel URL in ``line``, or None.

    The line must contain a scheme marker and at least one of
    ``url_patterns`` as literal substrings.
    """
    trimmed = line.strip()
    if not trimmed:
        return None
    if not any(marker in trimmed for marker in SCHEME_MARKERS):
        return None
    if not any(pattern in trimmed for pattern in url_patterns):
        return None

    fragment = trimmed[_scheme_start(trimmed):]
    match = _URL_TERMINATOR.search(fragment)
    token = fragment[: match.start()] if match else fragment

    separator = token.find(SCHEME_SEPARATOR)
    host_start = separator + len(SCHEME_SEPARATOR)
    path_start = token.find("/", host_start)
    if path_start != -1:
        token = token[:path_start]

    if len(token) <= host_start:
        # Scheme with no host, e.g. "https://" followed by whitespace
        return None
    return token


class TunnelUrlExtractor:
    """Per-message callback that emits the first tunnel URL it sees.

    Create one extractor per tunnel attempt: once a URL has been emitted,
    later messages are ignored.
    """

    def __init__(
        self,
        url_patterns: Iterable[str],
        on_url: Optional[Callable[[str], None]] = None,
    ):
        self._url_patterns: Tuple[str, ...] = tuple(url_patterns)
        self._on_url = on_url
        self._emitted = False

    @property
    def emitted(self) -> bool:
        return self._emitted

    def __call__(self, message: str) -> Optional[str]:
        """Scan one (possibly multi-line) message; return the URL if emitted now."""
        if self._emitted:
            return None

        for line in message.splitlines():
            url = extract_tunnel_url(line, self._url_patterns)
            if url is None:
                continue
            self._emitted = True
            logger.info(f"Tunnel URL found: {url}")
            if self._on_url is not None:
                self._on_url(url)
            return url
        return None
