import os
import unittest
from unittest import mock

from click.testing import CliRunner

from testsupport import TempDirTestCase

from jdkfetch import cli
from jdkfetch import config
from jdkfetch.cache import JdkCache
from jdkfetch.error import AssetNotFoundError, JdkFetchError, UnsupportedPlatformError
from jdkfetch.platforms import Platform
from jdkfetch.resolver import ReleaseAsset


ASSET = ReleaseAsset(
    "OpenJDK17U-jdk_x64_linux_hotspot_17.0.9_9.tar.gz",
    "https://github.com/adoptium/releases/download/OpenJDK17U-jdk_x64_linux_hotspot_17.0.9_9.tar.gz")


class _Fetcher(object):
    def __init__(self, cache):
        self.cache = cache
        self.calls = []

    def get_jdk_path(self, version):
        self.calls.append(version)
        path = self.cache.entry_path(version)
        os.makedirs(os.path.join(path, "Contents", "Home", "bin"), exist_ok=True)
        return path

    def resolve(self, version):
        if version != "17":
            raise AssetNotFoundError(f"No JDK {version} download found for linux")
        return ASSET


class CliTest(TempDirTestCase):
    def setUp(self):
        super().setUp()
        self.fetcher = _Fetcher(JdkCache(self.path("jdks")))

    def tearDown(self):
        for section in config._cli.sections():
            config._cli.remove_section(section)
        super().tearDown()

    def invoke(self, *args):
        return CliRunner().invoke(
            cli.cli, ["-c", "jdkfetch.logfile=false"] + list(args), obj={"fetcher": self.fetcher})

    def test_fetch(self):
        result = self.invoke("fetch", "17")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), self.fetcher.cache.entry_path("17"))
        self.assertEqual(self.fetcher.calls, ["17"])

    def test_java_home(self):
        result = self.invoke("java-home", "17")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(
            result.output.strip(),
            os.path.join(self.fetcher.cache.entry_path("17"), "Contents", "Home"))

    def test_resolve(self):
        result = self.invoke("resolve", "17")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), ASSET.download_url)

    def test_resolve_not_found(self):
        result = self.invoke("resolve", "8")
        self.assertIsInstance(result.exception, AssetNotFoundError)

    def test_path(self):
        result = self.invoke("path", "17")
        self.assertEqual(result.exit_code, 1)

        os.makedirs(self.fetcher.cache.entry_path("17"))
        result = self.invoke("path", "17")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), self.fetcher.cache.entry_path("17"))

    def test_platform_option(self):
        result = self.invoke("-p", "Windows 11", "fetch", "17")
        self.assertEqual(result.exit_code, 0, result.output)

        result = self.invoke("-p", "solaris", "fetch", "17")
        self.assertIsInstance(result.exception, UnsupportedPlatformError)

    def test_cachedir_option(self):
        runner = CliRunner()
        obj = {}
        result = runner.invoke(
            cli.cli, ["-c", "jdkfetch.logfile=false", "--cachedir", self.path("other"), "-p", "linux", "path", "17"],
            obj=obj)
        self.assertEqual(result.exit_code, 1)
        self.assertEqual(obj["fetcher"].cache.cachedir, self.path("other"))
        self.assertIs(obj["fetcher"].platform, Platform.LINUX)

    def test_config_get(self):
        result = self.invoke("-c", "http.retries=7", "config", "http.retries")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), "7")

    def test_config_get_missing(self):
        result = self.invoke("config", "nosuchsection.key")
        self.assertEqual(result.exit_code, 1)

    def test_config_invalid_key(self):
        result = self.invoke("config", "retries")
        self.assertIsInstance(result.exception, JdkFetchError)

    def test_config_list(self):
        result = self.invoke("-c", "http.retries=7", "config", "-l")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("http.retries = 7", result.output.splitlines())
        self.assertIn("jdkfetch.logfile = false", result.output.splitlines())

    def test_config_set_and_delete(self):
        user = config._config.layers(config.USER)[0]
        with mock.patch.object(user, "location", self.path("conf", "user")):
            try:
                result = self.invoke("config", "jdkfetch.cachedir", "/opt/jdks")
                self.assertEqual(result.exit_code, 0, result.output)
                with open(self.path("conf", "user")) as f:
                    self.assertIn("cachedir = /opt/jdks", f.read())

                result = self.invoke("config", "-d", "jdkfetch.cachedir")
                self.assertEqual(result.exit_code, 0, result.output)
                self.assertIsNone(config.get("jdkfetch", "cachedir", layer=config.USER))

                result = self.invoke("config", "-d", "jdkfetch.cachedir")
                self.assertEqual(result.exit_code, 1)
            finally:
                config.delete("jdkfetch", "cachedir", layer=config.USER)


if __name__ == "__main__":
    unittest.main()
