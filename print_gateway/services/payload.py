from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Optional
from urllib.parse import urlsplit

import requests

from ..core.config import settings
from ..errors import FetchFailed, InvalidEncoding
from ..jobs import DocumentSource, InlineEncoded, RemoteReference, ResolvedPayload

LOGGER = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "application/octet-stream"

# [data:]<mime>[;<param>=<value>...];base64,<data>
INLINE_PATTERN = re.compile(r"^\s*(?:data:)?(?P<mime>[^;,]*)(?:;[^;,]*)*?;base64,(?P<data>.*)$", re.DOTALL)


def _b64decode(body: str) -> bytes:
    compact = "".join(body.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidEncoding(f"Invalid base64 payload: {exc}") from exc


def parse_inline(blob: str) -> ResolvedPayload:
    match = INLINE_PATTERN.match(blob or "")
    if match is None:
        raise InvalidEncoding("Invalid fileBase64 payload: expected '<mime>;base64,<data>'")
    media_type = match.group("mime").strip().lower() or DEFAULT_MEDIA_TYPE
    return ResolvedPayload(data=_b64decode(match.group("data")), media_type=media_type)


class PayloadResolver:
    """Turns a job's document source into bytes held in memory.

    Without an injected session every fetch goes through ``requests.get`` and
    so opens its own connection; nothing is shared between concurrent jobs.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None) -> None:
        self.session = session
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT

    def resolve(self, source: DocumentSource) -> ResolvedPayload:
        if isinstance(source, InlineEncoded):
            return parse_inline(source.blob)
        if isinstance(source, RemoteReference):
            return self._fetch(source.url)
        raise TypeError(f"Unknown document source: {type(source)!r}")

    def decode_inline(self, raw: str) -> bytes:
        """Decode an inline blob, or pass anything else through as literal bytes.

        Raw-socket printers take arbitrary command languages (ZPL, PCL, ESC/POS),
        so text that does not look like an inline blob is sent verbatim.
        """
        if INLINE_PATTERN.match(raw) is None:
            return raw.encode("utf-8")
        return parse_inline(raw).data

    def _fetch(self, url: str) -> ResolvedPayload:
        scheme = urlsplit(url).scheme.lower()
        if scheme not in {"http", "https"}:
            raise FetchFailed("unsupported URL scheme", reason=scheme or None)

        LOGGER.info("Fetching document from %s", url)
        try:
            resp = (self.session or requests).get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchFailed(str(exc)) from exc

        if not 200 <= resp.status_code < 300:
            raise FetchFailed(str(resp.status_code), reason=resp.reason or None)

        content_type = resp.headers.get("Content-Type", "")
        media_type = content_type.split(";", 1)[0].strip().lower() or DEFAULT_MEDIA_TYPE
        return ResolvedPayload(data=resp.content, media_type=media_type)
