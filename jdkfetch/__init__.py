from .error import JdkFetchError
from .error import AssetNotFoundError
from .error import ExtractionError
from .error import InvalidArgumentError
from .error import NetworkError
from .error import NetworkTimeoutError
from .error import UnsupportedPlatformError

from .platforms import Platform
from .matcher import AssetMatcher
from .matcher import build_file_name_token
from .resolver import ReleaseAsset
from .resolver import ReleaseResolver
from .resolver import Resolution
from .resolver import ResolutionStatus
from .download import Downloader
from .extract import ArchiveExtractor
from .cache import JdkCache
from .fetcher import JdkFetcher
from .fetcher import get_jdk_path

from .version import __version__

__all__ = (
    "ArchiveExtractor",
    "AssetMatcher",
    "AssetNotFoundError",
    "Downloader",
    "ExtractionError",
    "InvalidArgumentError",
    "JdkCache",
    "JdkFetchError",
    "JdkFetcher",
    "NetworkError",
    "NetworkTimeoutError",
    "Platform",
    "ReleaseAsset",
    "ReleaseResolver",
    "Resolution",
    "ResolutionStatus",
    "UnsupportedPlatformError",
    "build_file_name_token",
    "get_jdk_path",
)
