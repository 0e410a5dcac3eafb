"""Unit tests for HTTP retrieval."""

from unittest.mock import Mock, patch

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from rdapval.config import FetchConfig
from rdapval.fetch import ACCEPT_HEADER, FetchedResponse, FetchError, fetch_url

URL = "https://rdap.example/domain/example.com"


def fake_response(status_code=200, headers=None, text="{}"):
    response = Mock()
    response.status_code = status_code
    response.headers = CaseInsensitiveDict(
        headers or {"Content-Type": "application/rdap+json"}
    )
    response.text = text
    return response


class TestFetchURL:
    """Test fetch_url."""

    def test_request_parameters(self):
        config = FetchConfig(timeout=5, userAgent="checker/1.0", followRedirects=False, verifyTls=False)

        with patch("rdapval.fetch.requests.get", return_value=fake_response()) as mock_get:
            fetch_url(URL, config)

        mock_get.assert_called_once_with(
            URL,
            headers={"Accept": ACCEPT_HEADER, "User-Agent": "checker/1.0"},
            timeout=5,
            allow_redirects=False,
            verify=False,
        )

    def test_response_headers_lowercased(self):
        with patch("rdapval.fetch.requests.get", return_value=fake_response(404, {"Content-Type": "x"}, "gone")):
            fetched = fetch_url(URL)

        assert fetched == FetchedResponse(URL, 404, {"content-type": "x"}, "gone")

    def test_connection_error(self):
        with patch("rdapval.fetch.requests.get", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(FetchError, match="refused"):
                fetch_url(URL)

    def test_timeout(self):
        with patch("rdapval.fetch.requests.get", side_effect=requests.Timeout("too slow")):
            with pytest.raises(FetchError):
                fetch_url(URL)


class TestFetchedResponse:
    """Test FetchedResponse."""

    def test_metadata(self):
        fetched = FetchedResponse(URL, 200, {"Content-Type": "application/rdap+json"}, "{}")
        metadata = fetched.metadata

        assert metadata.status_code == 200
        assert metadata.headers == {"content-type": "application/rdap+json"}
        assert metadata.requested_url == URL
