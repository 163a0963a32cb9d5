import unittest
from unittest import mock

import requests

from jdkfetch.error import NetworkError, NetworkTimeoutError
from jdkfetch.http import USER_AGENT, HttpClient


URL = "https://api.example.com/repos/adoptium/temurin17-binaries/releases"


def _response(status_code=200, text="[]"):
    response = mock.Mock()
    response.status_code = status_code
    response.text = text
    return response


class HttpClientTest(unittest.TestCase):
    def setUp(self):
        self.session = mock.Mock()
        self.session.headers = {}
        self.http = HttpClient(session=self.session, timeout=(1.0, 2.0))

    def test_user_agent(self):
        self.assertEqual(self.session.headers["User-Agent"], USER_AGENT)

    def test_fetch(self):
        self.session.get.return_value = _response(200, '[{"assets": []}]')
        result = self.http.fetch(URL, headers={"Accept": "application/json"})
        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.text, '[{"assets": []}]')
        self.session.get.assert_called_once_with(
            URL, headers={"Accept": "application/json"}, timeout=(1.0, 2.0))

    def test_fetch_returns_error_status(self):
        self.session.get.return_value = _response(403, "rate limited")
        result = self.http.fetch(URL)
        self.assertEqual(result.status_code, 403)

    def test_fetch_timeout(self):
        self.session.get.side_effect = requests.exceptions.ReadTimeout("timed out")
        with self.assertRaises(NetworkTimeoutError):
            self.http.fetch(URL)

    def test_fetch_connection_error(self):
        self.session.get.side_effect = requests.exceptions.ConnectionError("refused")
        with self.assertRaises(NetworkError) as ctx:
            self.http.fetch(URL)
        self.assertNotIsInstance(ctx.exception, NetworkTimeoutError)

    def test_invalid_url(self):
        for url in ["", "not a url", "/relative/path"]:
            with self.assertRaises(NetworkError):
                self.http.fetch(url)
        self.session.get.assert_not_called()

    def test_stream(self):
        response = _response(200)
        self.session.get.return_value = response
        with self.http.stream(URL) as r:
            self.assertIs(r, response)
        response.close.assert_called_once_with()
        self.session.get.assert_called_once_with(URL, headers=None, stream=True, timeout=(1.0, 2.0))

    def test_stream_error_status(self):
        response = _response(404)
        self.session.get.return_value = response
        with self.assertRaises(NetworkError) as ctx:
            with self.http.stream(URL):
                self.fail("body must not run")
        self.assertEqual(ctx.exception.status_code, 404)
        response.close.assert_called_once_with()

    def test_stream_timeout_while_reading(self):
        response = _response(200)
        self.session.get.return_value = response
        with self.assertRaises(NetworkTimeoutError):
            with self.http.stream(URL):
                raise requests.exceptions.Timeout("read timed out")
        response.close.assert_called_once_with()

    def test_stream_connection_error_while_reading(self):
        response = _response(200)
        self.session.get.return_value = response
        with self.assertRaises(NetworkError):
            with self.http.stream(URL):
                raise requests.exceptions.ChunkedEncodingError("connection reset")
        response.close.assert_called_once_with()

    def test_stream_connect_timeout(self):
        self.session.get.side_effect = requests.exceptions.ConnectTimeout("timed out")
        with self.assertRaises(NetworkTimeoutError):
            with self.http.stream(URL):
                pass


if __name__ == "__main__":
    unittest.main()
