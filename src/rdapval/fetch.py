"""HTTP retrieval of RDAP responses."""

import logging
from dataclasses import dataclass

import requests

from .config import FetchConfig
from .constants import RDAP_MEDIA_TYPE
from .models import ResponseMetadata

logger = logging.getLogger(__name__)

ACCEPT_HEADER = f"{RDAP_MEDIA_TYPE}, application/json;q=0.9"


class FetchError(Exception):
    """Raised when no HTTP response could be obtained."""


@dataclass
class FetchedResponse:
    """Body and HTTP metadata of a retrieved response."""
    url: str
    status_code: int
    headers: dict[str, str]
    text: str

    @property
    def metadata(self) -> ResponseMetadata:
        return ResponseMetadata(self.status_code, dict(self.headers), self.url)


def fetch_url(url: str, config: FetchConfig | None = None) -> FetchedResponse:
    """GET ``url`` and return the response, whatever its status code.

    Raises:
        FetchError: On connection failures, timeouts and invalid URLs
    """
    config = config or FetchConfig()
    headers = {"Accept": ACCEPT_HEADER, "User-Agent": config.user_agent}

    logger.debug(f"GET {url}")
    try:
        response = requests.get(
            url,
            headers=headers,
            timeout=config.timeout,
            allow_redirects=config.follow_redirects,
            verify=config.verify_tls,
        )
    except requests.RequestException as e:
        logger.warning(f"Request to {url} failed: {e}")
        raise FetchError(str(e)) from e

    logger.debug(f"{url} returned HTTP {response.status_code}")
    return FetchedResponse(
        url=url,
        status_code=response.status_code,
        headers={name.lower(): value for name, value in response.headers.items()},
        text=response.text,
    )
