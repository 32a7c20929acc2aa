"""Async client for the remote services create-ps depends on.

Wraps three HTTP sources with proper timeout handling and structured
results:

* plain-text templates (``.gitignore``, code of conduct),
* the GitHub licenses API (``/licenses`` and ``/licenses/<key>``),
* the npm registry, used to check that a dependency (and version) exists.

Typical usage::

    client = RemoteClient(config.remote)
    licenses = await client.fetch_license_catalog()
    text = await client.fetch_text(config.remote.gitignore_url)
"""

from __future__ import annotations

from urllib.parse import quote

import httpx
from pydantic import BaseModel, Field

from .config import RemoteConfig


class RemoteError(Exception):
    """Raised when a template, license or registry document cannot be fetched."""


class LicenseSummary(BaseModel):
    """One entry of the license catalog."""

    key: str
    name: str
    spdx_id: str | None = None


class LicenseDetail(LicenseSummary):
    """A license with its full text."""

    body: str = Field(default="")


class RemoteClient:
    """Async client over ``httpx.AsyncClient``.

    A fresh client is opened per call; the optional *transport* is handed to
    every client so tests can plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: RemoteConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or RemoteConfig()
        self.transport = transport

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our timeout."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout, connect=10.0),
            follow_redirects=True,
            headers={"User-Agent": "create-ps"},
            transport=self.transport,
        )

    async def _get(self, url: str) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                return response
        except httpx.ConnectError as exc:
            raise RemoteError(f"Cannot connect to {url}: {exc}") from exc
        except httpx.TimeoutException as exc:
            raise RemoteError(
                f"Request to {url} timed out after {self.config.timeout}s."
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise RemoteError(
                f"{url} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteError(f"Request to {url} failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Templates and licenses
    # ------------------------------------------------------------------

    async def fetch_text(self, url: str) -> str:
        """Fetch a plain-text template.

        Raises:
            RemoteError: On connection, timeout or HTTP errors.
        """
        response = await self._get(url)
        return response.text

    async def fetch_license_catalog(self) -> list[LicenseSummary]:
        """Return the available licenses as ``LicenseSummary`` entries."""
        response = await self._get(self.config.licenses_url)
        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteError("License catalog is not valid JSON") from exc
        if not isinstance(data, list):
            raise RemoteError("License catalog has an unexpected shape")
        return [
            LicenseSummary(key=item["key"], name=item.get("name", item["key"]), spdx_id=item.get("spdx_id"))
            for item in data
            if isinstance(item, dict) and item.get("key")
        ]

    async def fetch_license(self, key: str) -> LicenseDetail:
        """Return one license including its full ``body`` text."""
        base = self.config.licenses_url.rstrip("/")
        response = await self._get(f"{base}/{quote(key, safe='')}")
        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteError(f"License '{key}' is not valid JSON") from exc
        if not isinstance(data, dict) or not data.get("body"):
            raise RemoteError(f"License '{key}' has no text")
        return LicenseDetail(
            key=data.get("key", key),
            name=data.get("name", key),
            spdx_id=data.get("spdx_id"),
            body=data["body"],
        )

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    async def validate_dependency(self, name: str, version: str | None = None) -> bool:
        """Return ``True`` if *name* (and *version*, when given) exists on the registry.

        Network failures count as "not found" so the caller can re-prompt.
        *version* may be an exact version or a dist-tag; ranges are accepted
        as long as the package itself exists.
        """
        base = self.config.registry_url.rstrip("/")
        # Scoped names keep their "@" but the slash must be encoded.
        url = f"{base}/{quote(name, safe='@')}"
        try:
            response = await self._get(url)
            data = response.json()
        except (RemoteError, ValueError):
            return False

        if not isinstance(data, dict) or "versions" not in data:
            return False
        if not version:
            return True
        if version in data.get("versions", {}) or version in data.get("dist-tags", {}):
            return True
        return _looks_like_range(version)


def _looks_like_range(version: str) -> bool:
    """Version ranges (``^1.2``, ``~1``, ``>=2 <3``, ``1.x``) cannot be checked exactly."""
    if version.strip() == "*":
        return True
    has_digit = any(ch.isdigit() for ch in version)
    return has_digit and any(ch in version for ch in "^~<>=*xX |")
