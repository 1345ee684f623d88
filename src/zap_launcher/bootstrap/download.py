"""HTTP helpers for release queries and artifact downloads.

Only ``http`` and ``https`` URLs are accepted.
"""

from __future__ import annotations

from typing import Dict, Optional
from urllib.error import URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from zap_launcher import __version__
from zap_launcher.core.errors import DownloadFailed
from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

ALLOWED_SCHEMES = frozenset({"http", "https"})

USER_AGENT = f"zap-launcher/{__version__}"


def secure_urlopen(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    headers: Optional[Dict[str, str]] = None,
):
    """Open ``url`` after checking its scheme.

    Args:
        url: URL to open.
        timeout: Socket timeout in seconds.
        headers: Extra request headers.

    Returns:
        The response object returned by ``urlopen``.

    Raises:
        ValueError: If the URL scheme is not http or https.
        URLError: On transport errors.
    """
    scheme = urlparse(url).scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Refusing to open URL with scheme '{scheme}': {url}")

    request_headers = {"User-Agent": USER_AGENT}
    if headers:
        request_headers.update(headers)
    request = Request(url, headers=request_headers)
    return urlopen(request, timeout=timeout)  # nosec - scheme checked above


def fetch_bytes(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Download ``url`` in full and return the response body.

    Raises:
        DownloadFailed: On any transport or scheme error.
    """
    LOGGER.debug(f"Downloading {url}")
    try:
        with secure_urlopen(url, timeout=timeout) as response:
            data = response.read()
    except (OSError, URLError, ValueError) as e:
        raise DownloadFailed(f"Failed to download {url}: {e}") from e
    LOGGER.debug(f"Downloaded {len(data)} bytes from {url}")
    return data
