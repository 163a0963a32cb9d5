"""
Operating system detection and normalization.

Asset names published by Adoptium embed one of three operating system
tags. Raw names, as reported by the host or given on the command line,
are folded into one of those tags by substring matching.
"""

import enum
import platform as _platform

from jdkfetch.error import InvalidArgumentError, UnsupportedPlatformError
from jdkfetch.error import raise_error_if


ARCH = "x64"

# Host names reported by platform.system() that don't contain a
# recognized substring of their own.
_HOST_ALIASES = {
    "darwin": "Mac OS X",
}


class Platform(enum.Enum):
    WINDOWS = "windows"
    MAC = "mac"
    LINUX = "linux"

    def __str__(self):
        return self.value

    @property
    def archive_format(self):
        """ Archive format Adoptium publishes for this platform. """
        return "zip" if self is Platform.WINDOWS else "tar.gz"

    @property
    def is_windows(self):
        return self is Platform.WINDOWS

    def exe_name(self, name):
        return f"{name}.exe" if self.is_windows else name

    @staticmethod
    def normalize(os_name):
        """
        Normalizes a raw operating system name.

        Args:
            os_name (str|Platform): Name such as "Windows 11", "Mac OS X"
                or "Linux". Platform members are returned unchanged.

        Returns:
            The matching Platform member.

        Raises:
            InvalidArgumentError: if the name is empty.
            UnsupportedPlatformError: if the name matches no family.
        """
        if isinstance(os_name, Platform):
            return os_name

        raise_error_if(
            not os_name or not os_name.strip(),
            "Operating system name must not be empty",
            type=InvalidArgumentError)

        normalized = os_name.lower().strip()
        if "windows" in normalized:
            return Platform.WINDOWS
        if "mac" in normalized or "os x" in normalized or "macos" in normalized:
            return Platform.MAC
        if "linux" in normalized:
            return Platform.LINUX
        raise UnsupportedPlatformError("Unsupported OS: " + os_name)

    @staticmethod
    def host():
        """ Returns the platform of the running host. """
        return Platform.normalize(host_os_name())


def host_os_name():
    system = _platform.system()
    return _HOST_ALIASES.get(system.lower(), system)


def host_is_x64():
    return _platform.machine().lower() in ["x86_64", "amd64", "x64"]
