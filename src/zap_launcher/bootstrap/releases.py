"""Release index queries.

Fetches metadata for the latest GitHub release of the server and picks the
asset built for the host platform.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
from urllib.error import URLError

from zap_launcher.bootstrap.download import DEFAULT_TIMEOUT, secure_urlopen
from zap_launcher.bootstrap.paths import is_safe_version
from zap_launcher.bootstrap.platform import PlatformInfo, strip_version_marker
from zap_launcher.core.errors import NoMatchingAsset, ReleaseQueryFailed
from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_REPOSITORY = "zap-lsp/zap-language-server"
DEFAULT_ARCHIVE_EXTENSION = "zip"

# Fetches a URL and returns the decoded JSON payload
JsonFetcher = Callable[[str, float], Any]


@dataclass(frozen=True)
class ReleaseDescriptor:
    """A downloadable server release for one platform."""

    version: str
    download_url: str
    asset_name: str


def fetch_json(url: str, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """GET ``url`` and decode the JSON body.

    Raises:
        ReleaseQueryFailed: On transport or decoding errors.
    """
    try:
        with secure_urlopen(
            url,
            timeout=timeout,
            headers={"Accept": "application/vnd.github+json"},
        ) as response:
            return json.load(response)
    except (OSError, URLError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        raise ReleaseQueryFailed(f"Failed to query release index {url}: {e}") from e


class ReleaseLocator:
    """Finds the latest server release for a platform."""

    def __init__(
        self,
        platform_info: PlatformInfo,
        binary_name: str,
        repository: str = DEFAULT_REPOSITORY,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        fetcher: Optional[JsonFetcher] = None,
    ) -> None:
        self._platform = platform_info
        self._binary_name = binary_name
        self._repository = repository
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._fetch = fetcher or fetch_json

    @property
    def latest_url(self) -> str:
        return f"{self._api_url}/repos/{self._repository}/releases/latest"

    def find_latest(self) -> ReleaseDescriptor:
        """Return the platform asset of the latest release.

        Raises:
            ReleaseQueryFailed: If the index cannot be queried or parsed.
            NoMatchingAsset: If no asset is named for this platform.
        """
        LOGGER.debug(f"Querying latest release from {self.latest_url}")
        data = self._fetch(self.latest_url, self._timeout)
        tag, assets = _parse_release(data)

        version = strip_version_marker(tag)
        if not is_safe_version(version):
            raise ReleaseQueryFailed(f"Release tag '{tag}' is not a usable version name")

        expected = self._platform.release_asset_name(
            self._binary_name, version, DEFAULT_ARCHIVE_EXTENSION
        )

        # First exact match wins
        for asset in assets:
            if asset["name"] == expected:
                LOGGER.info(f"Latest release {version} provides asset {expected}")
                return ReleaseDescriptor(
                    version=version,
                    download_url=asset["browser_download_url"],
                    asset_name=expected,
                )

        raise NoMatchingAsset(expected, version, [a["name"] for a in assets])


def _parse_release(data: Any) -> tuple[str, List[Dict[str, str]]]:
    """Validate a release payload and return ``(tag_name, assets)``."""
    if not isinstance(data, dict):
        raise ReleaseQueryFailed(
            f"Release payload must be a JSON object, got {type(data).__name__}"
        )

    tag = data.get("tag_name")
    if not isinstance(tag, str) or not tag.strip():
        raise ReleaseQueryFailed("Release payload is missing 'tag_name'")

    raw_assets = data.get("assets")
    if not isinstance(raw_assets, list):
        raise ReleaseQueryFailed("Release payload is missing 'assets'")

    assets: List[Dict[str, str]] = []
    for entry in raw_assets:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        url = entry.get("browser_download_url")
        if isinstance(name, str) and isinstance(url, str):
            assets.append({"name": name, "browser_download_url": url})
        else:
            LOGGER.debug(f"Skipping malformed release asset: {entry!r}")
    return tag, assets
