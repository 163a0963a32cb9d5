from jdkfetch.error import InvalidArgumentError, raise_error_if
from jdkfetch.platforms import ARCH, Platform


SUPPORTED_ARCHIVE_TYPES = [".tar.gz", ".zip"]


def validate_version(version):
    raise_error_if(
        version is None or not str(version).strip(),
        "JDK version must not be empty",
        type=InvalidArgumentError)
    return str(version).strip()


def build_file_name_token(version, platform):
    """
    Builds the filename token that identifies a JDK asset.

    >>> build_file_name_token("17", Platform.MAC)
    'OpenJDK17U-jdk_x64_mac_hotspot_17'

    """
    version = validate_version(version)
    platform = Platform.normalize(platform)
    return f"OpenJDK{version}U-jdk_{ARCH}_{platform.value}_hotspot_{version}"


class AssetMatcher(object):
    """ Decides whether a release asset is the JDK archive for a version and platform. """

    def __init__(self, version, platform):
        self.version = validate_version(version)
        self.platform = Platform.normalize(platform)
        self.token = build_file_name_token(self.version, self.platform)
        self._token_lower = self.token.lower()

    def matches(self, name):
        if not name:
            return False
        name = name.lower()
        return self._token_lower in name and \
            any(name.endswith(ext) for ext in SUPPORTED_ARCHIVE_TYPES)

    def __repr__(self):
        return f"AssetMatcher({self.token!r})"
