"""Grounding citation resolution.

Grounded answers cite their sources through service-issued redirect links
(``https://vertexaisearch.cloud.google.com/grounding-api-redirect/<token>``).
CitationResolver recovers the original source URL:

1. URLs without the redirect host are returned unchanged.
2. The redirect chain is followed live (bounded hops, per-hop timeout).
3. Failing that, the redirect URL itself is decoded: the token after
   ``grounding-api-redirect``, then ``url``/``original_url``/``target`` query
   parameters, then any URL embedded in the query string.
4. If nothing works the input is returned unchanged.

Resolution is best-effort and never raises for network or decoding failures.
Resolved URLs are normalized (``\\uXXXX`` escapes, percent-encoding, spaces).
"""

import asyncio
import base64
import binascii
import re
from collections.abc import Callable
from urllib.parse import parse_qsl, unquote, unquote_plus, urlsplit

import httpx

from genai_chat_core._llm_core import Citation, GenerateContentResponse
from genai_chat_core.logging import get_logger
from genai_chat_core.settings import MAX_REDIRECT_HOPS, settings

logger = get_logger(__name__)

REDIRECT_HOST_MARKER = "vertexaisearch.cloud.google.com"
REDIRECT_PATH_MARKER = "grounding-api-redirect"

_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
_TARGET_PARAMS = ("url", "original_url", "target")
_EMBEDDED_URL_RE = re.compile(r"https?://[^\s&]+")
_UNICODE_ESCAPE_RE = re.compile(r"\\u([0-9a-fA-F]{4})")


# ---------------------------------------------------------------------------
# Token decoders, tried in order
# ---------------------------------------------------------------------------


def _accept(decoded: str) -> str | None:
    return decoded if decoded.startswith("http") else None


def _decode_urlsafe_b64(token: str) -> str | None:
    try:
        return _accept(base64.urlsafe_b64decode(token).decode("utf-8"))
    except (binascii.Error, ValueError):
        return None


def _decode_std_b64(token: str) -> str | None:
    try:
        return _accept(base64.b64decode(token).decode("utf-8"))
    except (binascii.Error, ValueError):
        return None


def _decode_percent(token: str) -> str | None:
    return _accept(unquote(token))


def _decode_padded_b64(token: str) -> str | None:
    padded = token + "=" * (-len(token) % 4)
    try:
        return _accept(base64.urlsafe_b64decode(padded).decode("utf-8"))
    except (binascii.Error, ValueError):
        return None


TOKEN_DECODERS: tuple[tuple[str, Callable[[str], str | None]], ...] = (
    ("urlsafe_base64", _decode_urlsafe_b64),
    ("base64", _decode_std_b64),
    ("percent", _decode_percent),
    ("padded_base64", _decode_padded_b64),
)


def decode_token(token: str) -> str | None:
    """Decode a redirect token into a URL with the first decoder that works."""
    for _, decoder in TOKEN_DECODERS:
        if decoded := decoder(token):
            return decoded
    return None


# ---------------------------------------------------------------------------
# Structural strategies over the whole redirect URL
# ---------------------------------------------------------------------------


def _from_path_token(raw_url: str) -> str | None:
    segments = urlsplit(raw_url).path.split("/")
    if REDIRECT_PATH_MARKER not in segments:
        return None
    return decode_token(segments[-1])


def _from_query_params(raw_url: str) -> str | None:
    for key, value in parse_qsl(urlsplit(raw_url).query):
        if key in _TARGET_PARAMS and value.startswith("http"):
            return value
    return None


def _from_embedded_url(raw_url: str) -> str | None:
    query = urlsplit(raw_url).query
    if "http" not in query:
        return None
    if match := _EMBEDDED_URL_RE.search(query):
        return match.group(0)
    return None


URL_STRATEGIES: tuple[tuple[str, Callable[[str], str | None]], ...] = (
    ("path_token", _from_path_token),
    ("query_param", _from_query_params),
    ("embedded_url", _from_embedded_url),
)


def decode_redirect_url(raw_url: str) -> str | None:
    """Recover the target URL from the redirect URL's own structure, or None."""
    for name, strategy in URL_STRATEGIES:
        try:
            if resolved := strategy(raw_url):
                logger.debug(f"Decoded citation URL via {name}")
                return resolved
        except ValueError as e:
            # urlsplit rejects malformed netlocs
            logger.debug(f"Citation decode strategy {name} failed: {e}")
    return None


def normalize_url(url: str) -> str:
    """Undo double encoding in a resolved URL.

    Literal ``\\uXXXX`` escapes become characters, the URL is form-decoded
    and remaining spaces are re-encoded as ``%20``.
    """
    unescaped = _UNICODE_ESCAPE_RE.sub(lambda m: chr(int(m.group(1), 16)), url)
    return unquote_plus(unescaped).replace(" ", "%20")


def _resolve_location(current_url: str, location: str) -> str:
    """Resolve a Location header against the current URL (RFC 3986 reference resolution)."""
    return str(httpx.URL(current_url).join(location))


class CitationResolver:
    """Resolves grounding redirect URLs to their source URLs.

    Args:
        timeout: Per-hop timeout in seconds; defaults to settings.redirect_timeout.
        max_redirects: Hop cap; defaults to settings.max_redirects and is
            never more than 5.
        transport: Custom httpx transport (tests, proxies).
        debug: Log every unresolved URL with its structure at WARNING level;
            defaults to settings.debug. Never changes results.

    Example:
        >>> resolver = CitationResolver()
        >>> await resolver.resolve("https://example.com/page")
        'https://example.com/page'
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        max_redirects: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        debug: bool | None = None,
    ):
        self.timeout = timeout if timeout is not None else settings.redirect_timeout
        hops = max_redirects if max_redirects is not None else settings.max_redirects
        self.max_redirects = min(hops, MAX_REDIRECT_HOPS)
        self.transport = transport
        self.debug = settings.debug if debug is None else debug

    async def follow_redirects(self, url: str) -> str:
        """Follow the redirect chain starting at ``url``.

        Returns the URL reached when a non-redirect status arrives, a
        redirect has no Location, or the hop cap is hit. Any transport
        error, timeout or invalid URL returns ``url`` itself, never a
        midpoint of the chain.
        """
        current_url = url
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=False,
                headers={"User-Agent": _USER_AGENT},
                transport=self.transport,
            ) as client:
                for _ in range(self.max_redirects):
                    async with client.stream("GET", current_url) as response:
                        location = response.headers.get("location")
                        if not response.is_redirect or not location:
                            return current_url
                    current_url = _resolve_location(current_url, location)
        except (httpx.HTTPError, httpx.InvalidURL, TimeoutError, ValueError) as e:
            if self.debug:
                logger.warning(f"Redirect tracking failed for {url}: {e}")
            else:
                logger.debug(f"Redirect tracking failed for {url}: {e}")
            return url
        return current_url

    async def resolve(self, raw_url: str) -> str:
        """Return the source URL behind ``raw_url``, or ``raw_url`` if unknown."""
        if REDIRECT_HOST_MARKER not in raw_url:
            return raw_url

        followed = await self.follow_redirects(raw_url)
        if followed and followed != raw_url:
            return normalize_url(followed)

        if decoded := decode_redirect_url(raw_url):
            return normalize_url(decoded)

        self._log_failure(raw_url)
        return raw_url

    def _log_failure(self, raw_url: str) -> None:
        if not self.debug:
            logger.debug(f"Could not resolve citation URL {raw_url}")
            return
        try:
            parts = urlsplit(raw_url)
            path, query = parts.path, parts.query
        except ValueError:
            path, query = "", ""
        logger.warning(
            "Citation URL parsing failed - structure:\n"
            f"  url: {raw_url}\n"
            f"  path: {path}\n"
            f"  query: {query}\n"
            f"  token: {path.rsplit('/', 1)[-1]}"
        )


async def resolve_citations(
    response: GenerateContentResponse,
    resolver: CitationResolver | None = None,
) -> tuple[Citation, ...]:
    """Resolve the web grounding chunks of the first candidate.

    Chunks are resolved concurrently; the result keeps chunk order and
    ``Citation.index`` is the 1-based chunk position.
    """
    resolver = resolver or CitationResolver()
    web_chunks = [
        (position, chunk.web)
        for position, chunk in enumerate(response.grounding_chunks, start=1)
        if chunk.web is not None and chunk.web.uri
    ]
    resolved = await asyncio.gather(*(resolver.resolve(web.uri or "") for _, web in web_chunks))
    return tuple(
        Citation(index=position, raw_url=web.uri or "", resolved_url=url, title=web.title or "")
        for (position, web), url in zip(web_chunks, resolved)
    )


async def answer_text(
    response: GenerateContentResponse,
    resolver: CitationResolver | None = None,
    header: str | None = None,
) -> str:
    """Render the answer text followed by numbered source URLs.

    Output shape when grounding chunks are present::

        <answer text>

        <header>
        1. https://source.example/a
        2. https://source.example/b
    """
    text = response.text
    if not response.grounding_chunks:
        return text

    citations = await resolve_citations(response, resolver)
    lines = [f"\n\n{header if header is not None else settings.citation_header}\n"]
    lines.extend(f"{citation.index}. {citation.resolved_url}\n" for citation in citations)
    return text + "".join(lines)
