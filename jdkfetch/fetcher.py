from jdkfetch import config
from jdkfetch import filesystem as fs
from jdkfetch import log
from jdkfetch import utils
from jdkfetch.cache import JdkCache
from jdkfetch.download import Downloader, download_path
from jdkfetch.error import NetworkError
from jdkfetch.extract import ArchiveExtractor
from jdkfetch.http import HttpClient
from jdkfetch.matcher import validate_version
from jdkfetch.platforms import Platform, host_is_x64
from jdkfetch.resolver import ReleaseResolver


class JdkFetcher(object):
    """
    Provisions Temurin JDKs in a local cache directory.

    Example:

        .. code-block:: python

            fetcher = JdkFetcher(platform="linux")
            path = fetcher.get_jdk_path("17")

    """

    def __init__(self, cache=None, http=None, platform=None, keep_archive=None, retries=None, backoff=None,
                 resolver=None, downloader=None, extractor=None):
        self.cache = cache or JdkCache()
        self.platform = Platform.normalize(platform) if platform is not None else Platform.host()
        self.keep_archive = config.keep_archive() if keep_archive is None else keep_archive
        self.retries = config.get_retries() if retries is None else retries
        self.backoff = backoff
        self._http = http or HttpClient()
        self.resolver = resolver or ReleaseResolver(self._http)
        self.downloader = downloader or Downloader(self._http)
        self.extractor = extractor or ArchiveExtractor()

    def _retried(self, func, *args):
        return utils.retried(NetworkError, count=self.retries, backoff=self.backoff)(func)(*args)

    def resolve(self, version):
        """ Returns the ReleaseAsset for a version, raising AssetNotFoundError if there is none. """
        version = validate_version(version)
        return self._retried(self.resolver.resolve, version, self.platform)

    def get_jdk_path(self, version):
        """
        Returns the path of the JDK for a version.

        The JDK is downloaded and extracted if it is not already cached.
        """
        version = validate_version(version)

        path = self.cache.lookup(version)
        if path is not None:
            log.verbose("JDK {} found in cache: {}", version, path)
            return path

        with self.cache.lock(version):
            path = self.cache.lookup(version)
            if path is not None:
                log.verbose("JDK {} installed by another process: {}", version, path)
                return path
            return self._install(version)

    def _install(self, version):
        elapsed = utils.duration()
        if not host_is_x64():
            log.warning("Host is not x64, installing an x64 JDK")

        asset = self.resolve(version)
        archive = download_path(self.cache.cachedir, version, asset.download_url)

        log.info("Downloading JDK {} ({})", version, asset.name)
        self._retried(self.downloader.download, asset.download_url, archive)
        log.info("Download successful")

        with self.cache.staging(version) as staging:
            log.info("Extracting...")
            self.extractor.extract(archive, staging, platform=self.platform)
            path = self.cache.publish(staging, version)
        log.info("Extraction successful")

        if not self.keep_archive:
            utils.call_and_catch(fs.unlink, archive)

        log.info("Installed JDK {} in {} [{}]", version, path, elapsed)
        return path


def get_jdk_path(version, platform=None):
    return JdkFetcher(platform=platform).get_jdk_path(version)
