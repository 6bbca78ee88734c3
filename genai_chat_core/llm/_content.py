"""Caller input -> request turns.

Accepts the loose shapes callers pass to Model.generate_content() (strings,
image URLs, data URIs, turn mappings, Turns) and produces the turn list sent
on the wire. Image URLs are downloaded and inlined as base64.
"""

import base64
import re
from collections.abc import Mapping, Sequence
from io import BytesIO
from typing import Any

import httpx
from PIL import Image
from pydantic import ValidationError

from genai_chat_core._llm_core import Blob, Part, Role, Turn
from genai_chat_core.exceptions import ImageDownloadError, InvalidContentError
from genai_chat_core.logging import get_logger

logger = get_logger(__name__)

ContentItem = str | Turn | Mapping[str, Any]
Contents = ContentItem | Sequence[ContentItem]

_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tiff")
_EXTENSION_TO_MIME = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
}
_FORMAT_TO_MIME = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
    "WEBP": "image/webp",
    "BMP": "image/bmp",
    "TIFF": "image/tiff",
}

_HTTP_URL_RE = re.compile(r"^https?://.+", re.IGNORECASE)
_DATA_URI_RE = re.compile(r"^data:image/([a-zA-Z]+);base64,(.+)$", re.DOTALL)
_URL_IN_TEXT_RE = re.compile(r"https?://[^\s]+")

_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
_DOWNLOAD_TIMEOUT = 10.0


def is_image_url(text: str) -> bool:
    """http(s) URL that mentions a known image extension anywhere."""
    lowered = text.lower()
    return bool(_HTTP_URL_RE.match(text)) and any(ext in lowered for ext in _IMAGE_EXTENSIONS)


def is_base64_image(text: str) -> bool:
    return bool(_DATA_URI_RE.match(text))


def detect_mime_type(text: str) -> str:
    """MIME type implied by an image URL's extension or a data URI's subtype."""
    if is_image_url(text):
        lowered = text.lower()
        for ext, mime in _EXTENSION_TO_MIME.items():
            if lowered.endswith(ext):
                return mime
        return "image/jpeg"
    if match := _DATA_URI_RE.match(text):
        return f"image/{match.group(1)}"
    return "text/plain"


def sniff_image_mime(data: bytes) -> str | None:
    """MIME type from the image bytes themselves, or None if PIL cannot tell."""
    try:
        with Image.open(BytesIO(data)) as img:
            return _FORMAT_TO_MIME.get(img.format or "")
    except (OSError, ValueError, Image.DecompressionBombError):
        return None


def extract_urls(text: str) -> list[str]:
    return _URL_IN_TEXT_RE.findall(text)


def split_urls(text: str) -> list[Turn] | None:
    """Expand a prompt that mentions URLs into the prompt plus one turn per URL.

    Returns None when the text contains no URL.
    """
    urls = extract_urls(text)
    if not urls:
        return None
    return [Turn.user(text), *(Turn.user(url) for url in urls)]


async def download_image(url: str, *, client: httpx.AsyncClient | None = None) -> tuple[bytes, str | None]:
    """Fetch an image and return (bytes, sniffed MIME type or None).

    Raises:
        ImageDownloadError: Non-2xx status or transport failure.
    """
    try:
        if client is not None:
            response = await client.get(url, headers={"User-Agent": _USER_AGENT})
        else:
            async with httpx.AsyncClient(timeout=_DOWNLOAD_TIMEOUT, follow_redirects=True) as own_client:
                response = await own_client.get(url, headers={"User-Agent": _USER_AGENT})
    except httpx.HTTPError as e:
        raise ImageDownloadError(f"Error downloading image: {e}") from e

    if not response.is_success:
        raise ImageDownloadError(f"Failed to download image: {response.status_code}")
    data = response.content
    return data, sniff_image_mime(data)


async def _image_turn(text: str, client: httpx.AsyncClient | None) -> Turn:
    mime_type = detect_mime_type(text)
    if match := _DATA_URI_RE.match(text):
        data = match.group(2)
    else:
        raw, sniffed = await download_image(text, client=client)
        if sniffed and sniffed != mime_type:
            logger.debug(f"Image {text} is {sniffed}, not {mime_type} as its URL suggests")
        mime_type = sniffed or mime_type
        data = base64.b64encode(raw).decode("ascii")
    return Turn(role=Role.USER, parts=(Part(inline_data=Blob(mime_type=mime_type, data=data)),))


def _turn_with_default_role(item: Turn | Mapping[str, Any]) -> Turn:
    if isinstance(item, Turn):
        return item
    try:
        return Turn.model_validate({"role": Role.USER.value, **item})
    except ValidationError as e:
        raise InvalidContentError(f"Invalid content turn: {e}") from e


async def _normalize_item(item: Any, client: httpx.AsyncClient | None) -> Turn:
    if isinstance(item, str):
        if is_image_url(item) or is_base64_image(item):
            return await _image_turn(item, client)
        return Turn.user(item)
    if isinstance(item, (Turn, Mapping)):
        return _turn_with_default_role(item)
    raise InvalidContentError(f"Invalid content format: {type(item).__name__}")


async def normalize_contents(contents: Contents, *, http_client: httpx.AsyncClient | None = None) -> list[Turn]:
    """Normalize caller contents into request turns.

    - a string becomes one user turn: an inline image for image URLs and
      image data URIs, text otherwise; a text prompt mentioning URLs is
      followed by one text turn per URL;
    - a Turn or turn mapping becomes one turn (role defaults to "user");
    - a sequence is normalized item by item.

    Raises:
        InvalidContentError: Unsupported content or item type.
        ImageDownloadError: An image URL could not be fetched.
    """
    if isinstance(contents, str):
        if not (is_image_url(contents) or is_base64_image(contents)):
            if expanded := split_urls(contents):
                return expanded
        return [await _normalize_item(contents, http_client)]
    if isinstance(contents, (Turn, Mapping)):
        return [_turn_with_default_role(contents)]
    if isinstance(contents, Sequence) and not isinstance(contents, (bytes, bytearray)):
        return [await _normalize_item(item, http_client) for item in contents]
    raise InvalidContentError(f"Invalid contents format: {type(contents).__name__}")
