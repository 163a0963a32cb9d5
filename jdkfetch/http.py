from collections import namedtuple
from contextlib import contextmanager
from urllib.parse import urlparse

from requests import Session
from requests.exceptions import RequestException, Timeout

from jdkfetch import config
from jdkfetch import log
from jdkfetch.error import NetworkError, NetworkTimeoutError
from jdkfetch.error import raise_error_if
from jdkfetch.version import __version__


USER_AGENT = f"jdkfetch/{__version__}"

FetchResult = namedtuple("FetchResult", ["status_code", "text"])


class HttpClient(object):
    """
    Blocking HTTP transport.

    All requests carry an explicit (connect, read) timeout. Transport
    failures are raised as NetworkError, timeouts as NetworkTimeoutError.
    HTTP status codes are never raised by fetch(), they are returned to
    the caller.
    """

    def __init__(self, session=None, timeout=None):
        self._session = session or Session()
        self._session.headers.setdefault("User-Agent", USER_AGENT)
        self.timeout = timeout or config.get_timeout()

    def _check_url(self, url):
        parsed = urlparse(url)
        raise_error_if(
            not parsed.scheme or not parsed.netloc,
            "Invalid URL: '{}'", url, type=NetworkError)

    def fetch(self, url, headers=None):
        """ Fetches a URL and returns its status code and decoded body. """
        self._check_url(url)
        log.debug("[HTTP] GET {}", url)
        try:
            response = self._session.get(url, headers=headers, timeout=self.timeout)
            return FetchResult(response.status_code, response.text)
        except Timeout as e:
            raise NetworkTimeoutError(f"Request to '{url}' timed out") from e
        except RequestException as e:
            raise NetworkError(f"Request to '{url}' failed: {e}") from e

    @contextmanager
    def stream(self, url, headers=None):
        """
        Opens a streaming GET request.

        The response is yielded to the caller and closed when the
        context exits. A non-200 status raises NetworkError.
        """
        self._check_url(url)
        log.debug("[HTTP] GET (stream) {}", url)
        try:
            response = self._session.get(url, headers=headers, stream=True, timeout=self.timeout)
        except Timeout as e:
            raise NetworkTimeoutError(f"Request to '{url}' timed out") from e
        except RequestException as e:
            raise NetworkError(f"Request to '{url}' failed: {e}") from e

        try:
            if response.status_code != 200:
                raise NetworkError(
                    f"Download from '{url}' failed with status '{response.status_code}'",
                    status_code=response.status_code)
            yield response
        except Timeout as e:
            raise NetworkTimeoutError(f"Download from '{url}' timed out") from e
        except RequestException as e:
            raise NetworkError(f"Download from '{url}' failed: {e}") from e
        finally:
            response.close()

    def close(self):
        self._session.close()
