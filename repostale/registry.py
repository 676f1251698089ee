"""NuGet registration index: latest known version of a package."""

from __future__ import annotations

import gzip
import json
import logging
import zlib
from typing import Iterable, Optional

import requests

from .config import Settings
from .models import VersionRange

logger = logging.getLogger(__name__)

REGISTRATION_HIVE = "registration5-gz-semver2"

# Anything that can go wrong between the request and the sort.
_RESOLVE_ERRORS = (
    requests.exceptions.RequestException,
    OSError,  # gzip.BadGzipFile
    zlib.error,
    ValueError,  # JSON, UTF-8, version numbers
    KeyError,
    TypeError,
    AttributeError,
)


def _inflate(raw: bytes) -> bytes:
    """HTTP deflate is zlib-wrapped by the RFC, but raw deflate is common in the wild."""
    try:
        return zlib.decompress(raw)
    except zlib.error:
        return zlib.decompress(raw, -zlib.MAX_WBITS)


def decode_body(raw: bytes, content_encoding: Optional[str]) -> str:
    """Undo Content-Encoding (gzip, deflate, identity) and decode as UTF-8."""
    codings = [c.strip().lower() for c in (content_encoding or "").split(",") if c.strip()]
    # Applied in listed order, so undo from the last one
    for coding in reversed(codings):
        if coding in ("gzip", "x-gzip"):
            raw = gzip.decompress(raw)
        elif coding == "deflate":
            raw = _inflate(raw)
        elif coding != "identity":
            raise ValueError(f"Unsupported content encoding: {coding}")
    return raw.decode("utf-8-sig")


def parse_numeric_version(version: str) -> tuple[int, ...]:
    """'1.10.0-beta.2' -> (1, 10, 0). Pre-release suffix is dropped, not compared."""
    numeric = version.split("-", 1)[0]
    parts = numeric.split(".")
    if not numeric or not all(p.isdigit() for p in parts):
        raise ValueError(f"Not a dotted numeric version: {version!r}")
    return tuple(int(p) for p in parts)


def pick_latest(uppers: Iterable[str]) -> Optional[str]:
    """
    Highest version by numeric part; the original string is returned.

    The sort is stable and ignores pre-release labels, so '2.0.0-rc' listed
    before '2.0.0' wins the tie. Raises ValueError on an unparsable version.
    """
    ranked = sorted(uppers, key=parse_numeric_version, reverse=True)
    return ranked[0] if ranked else None


def ranges_from_index(data: dict) -> list[VersionRange]:
    """Registration index JSON -> page ranges, in document order. ValueError on a non-string bound."""
    ranges = []
    for item in data["items"]:
        lower, upper = item["lower"], item["upper"]
        if not isinstance(upper, str):
            raise ValueError(f"Range upper bound is not a string: {upper!r}")
        ranges.append(VersionRange(lower=lower, upper=upper))
    return ranges


class NuGetResolver:
    """Looks up the latest version of a package. Nothing is cached between calls."""

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"User-Agent": settings.user_agent})

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "NuGetResolver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def index_url(self, package_name: str) -> str:
        return f"{self.settings.registry_url}/{REGISTRATION_HIVE}/{package_name.lower()}/index.json"

    def _fetch_index(self, url: str) -> dict:
        response = self.session.get(url, stream=True, timeout=self.settings.timeout)
        try:
            response.raise_for_status()
            # Undecoded bytes: decode_body handles Content-Encoding itself
            raw = response.raw.read(decode_content=False)
            body = decode_body(raw, response.headers.get("Content-Encoding"))
        finally:
            response.close()
        return json.loads(body)

    def latest_version(self, package_name: Optional[str]) -> Optional[str]:
        """Latest version string, or None when it cannot be determined."""
        if not package_name:
            return None
        url = self.index_url(package_name)
        try:
            ranges = ranges_from_index(self._fetch_index(url))
            latest = pick_latest(r.upper for r in ranges)
        except _RESOLVE_ERRORS as e:
            logger.debug("No latest version for %s (%s): %s", package_name, url, e)
            return None
        logger.debug("%s -> %s", package_name, latest)
        return latest
