"""Metadata URI pre-check.

Before a collection is deployed, its metadata document is fetched once and checked for the fields
wallets and marketplaces display. The check is advisory: a failing URI is replaced by the configured
default rather than aborting the request.
"""

from __future__ import annotations

import json
import logging
from http.client import HTTPException
from typing import Any, Callable
from urllib.error import HTTPError, URLError
from urllib.parse import urlsplit
from urllib.request import Request, urlopen

from solana_plugin.collection.errors import MetadataCheckFailure

logger = logging.getLogger(__name__)

REQUIRED_METADATA_FIELDS: tuple[str, ...] = ("name", "description", "image")
FETCHABLE_SCHEMES: frozenset[str] = frozenset({"http", "https"})
MAX_METADATA_BYTES = 1_000_000

MetadataChecker = Callable[[str], None]


def fetch_metadata_document(uri: str, *, timeout_s: float = 10.0) -> Any:
    """GET `uri` and decode the body as JSON.

    Only http(s) URIs are fetched, and bodies larger than `MAX_METADATA_BYTES` are rejected.

    Raises:
        MetadataCheckFailure: On unsupported schemes, HTTP, connection, timeout, size or
            decoding errors.
    """

    scheme = urlsplit(uri).scheme.lower()
    if scheme not in FETCHABLE_SCHEMES:
        raise MetadataCheckFailure(f"metadata uri scheme not supported: {scheme or '<none>'}", field="uri")

    req = Request(uri, method="GET", headers={"Accept": "application/json"})
    try:
        with urlopen(req, timeout=timeout_s) as resp:  # noqa: S310 (http(s) only, single advisory fetch)
            body = resp.read(MAX_METADATA_BYTES + 1)
    except HTTPError as exc:
        raise MetadataCheckFailure(f"metadata HTTP error: {exc.code}", field="uri") from exc
    except URLError as exc:
        raise MetadataCheckFailure("metadata connection error", field="uri") from exc
    except (HTTPException, OSError, ValueError) as exc:
        raise MetadataCheckFailure(f"metadata fetch failed: {exc!r}", field="uri") from exc

    if len(body) > MAX_METADATA_BYTES:
        raise MetadataCheckFailure("metadata document is too large", field="uri")

    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MetadataCheckFailure("metadata is not valid JSON", field="uri") from exc


def check_metadata_document(document: Any) -> None:
    """Require a JSON object with non-empty `name`, `description` and `image`."""

    if not isinstance(document, dict):
        raise MetadataCheckFailure("metadata must be a JSON object", field="uri")

    missing = [key for key in REQUIRED_METADATA_FIELDS if not document.get(key)]
    if missing:
        raise MetadataCheckFailure(f"metadata is missing: {', '.join(missing)}", field="uri")


def make_metadata_checker(*, timeout_s: float = 10.0) -> MetadataChecker:
    """Build the default checker: one fetch, then a field check."""

    def _check(uri: str) -> None:
        check_metadata_document(fetch_metadata_document(uri, timeout_s=timeout_s))

    return _check


def resolve_metadata_uri(uri: str | None, *, default_uri: str, checker: MetadataChecker) -> str:
    """Return `uri` if its metadata passes the check, otherwise `default_uri`."""

    if not uri:
        logger.warning("metadata uri missing; using default uri=%s", default_uri)
        return default_uri

    try:
        checker(uri)
    except MetadataCheckFailure as exc:
        # Fallback branch: metadata problems never block a deploy.
        logger.warning("metadata check failed uri=%s reason=%s; using default", uri, exc)
        return default_uri

    return uri
