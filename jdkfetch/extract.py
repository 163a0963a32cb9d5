"""
Archive extraction.

JDK archives wrap their whole tree in a single top-level directory
named after the release (jdk-17.0.9+9/). The extractor drops that
directory, so the tree lands directly in the destination path.

Every entry is validated before anything is written. Entries that
would end up outside the destination, through '..' segments, absolute
paths or symbolic links, are rejected with ExtractionError.
"""

import gzip
import os
import re
import shutil
import stat
import tarfile
import zipfile
import zlib

from jdkfetch import filesystem as fs
from jdkfetch import log
from jdkfetch.error import ExtractionError, InvalidArgumentError
from jdkfetch.error import raise_error, raise_error_if
from jdkfetch.platforms import Platform


ZIP = "zip"
TAR_GZ = "tar.gz"

SUPPORTED_FORMATS = [ZIP, TAR_GZ]

_ZIP_MAGIC = (b"PK\x03\x04", b"PK\x05\x06")
_GZIP_MAGIC = b"\x1f\x8b"

_FORMAT_ERRORS = (
    EOFError,
    gzip.BadGzipFile,
    tarfile.TarError,
    zipfile.BadZipFile,
    zlib.error,
)


def detect_format(filename):
    """
    Determines the format of an archive.

    The leading magic bytes decide. The filename extension is only
    consulted when the content is not recognized.
    """
    with open(filename, "rb") as f:
        head = f.read(4)
    if head.startswith(_ZIP_MAGIC):
        return ZIP
    if head.startswith(_GZIP_MAGIC):
        return TAR_GZ

    name = filename.lower()
    if name.endswith(".zip"):
        return ZIP
    if name.endswith(".tar.gz") or name.endswith(".tgz"):
        return TAR_GZ
    raise_error("Unknown archive type: '{}'", fs.path.basename(filename), type=ExtractionError)


def strip_top_level(name):
    """
    Returns the archive path of an entry without its first segment.

    Raises ExtractionError for absolute paths and for entries that
    have nothing left once the first segment is removed.
    """
    normalized = fs.as_posix(name)
    raise_error_if(
        normalized.startswith("/") or re.match(r"^[A-Za-z]:", normalized),
        "Archive entry has an absolute path: '{}'", name, type=ExtractionError)

    parts = [part for part in normalized.split("/") if part not in ["", "."]]
    raise_error_if(
        len(parts) < 2,
        "Archive entry '{}' is not inside a top-level directory", name, type=ExtractionError)
    raise_error_if(
        parts[0] == "..",
        "Archive entry escapes the archive root: '{}'", name, type=ExtractionError)
    return "/".join(parts[1:])


class ArchiveExtractor(object):
    def __init__(self):
        self._rootdir = None

    def _destination(self, name):
        """ Maps an archive entry name to a validated path below the root directory. """
        relpath = strip_top_level(name)
        pathname = fs.path.normpath(fs.path.join(self._rootdir, *relpath.split("/")))
        raise_error_if(
            not fs.is_relative_to(fs.path.realpath(pathname), self._rootdir)
            or pathname == self._rootdir,
            "Archive entry escapes the extraction directory: '{}'", name, type=ExtractionError)
        return pathname

    def _check_link_target(self, name, pathname, target):
        raise_error_if(
            not target or fs.path.isabs(fs.as_posix(target)) or re.match(r"^[A-Za-z]:", target),
            "Archive link '{}' has an absolute target: '{}'", name, target, type=ExtractionError)
        resolved = fs.path.join(fs.path.realpath(fs.path.dirname(pathname)), target)
        raise_error_if(
            not fs.is_relative_to(fs.path.realpath(resolved), self._rootdir),
            "Archive link '{}' points outside the extraction directory: '{}'",
            name, target, type=ExtractionError)

    def _prepare(self, pathname):
        fs.makedirs(fs.path.dirname(pathname))
        if fs.path.islink(pathname):
            fs.unlink(pathname)

    def _write(self, pathname, stream, mode=None):
        self._prepare(pathname)
        with open(pathname, "wb") as out_file:
            shutil.copyfileobj(stream, out_file)
        if mode is not None and mode & 0o777:
            os.chmod(pathname, mode & 0o777)

    def _symlink(self, name, pathname, target):
        self._check_link_target(name, pathname, target)
        self._prepare(pathname)
        if fs.path.lexists(pathname):
            fs.unlink(pathname)
        os.symlink(target, pathname)

    def _extract_zip(self, filename):
        count = 0
        with zipfile.ZipFile(filename, "r") as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                pathname = self._destination(info.filename)
                mode = info.external_attr >> 16
                if stat.S_ISLNK(mode):
                    target = archive.read(info).decode("utf-8")
                    self._symlink(info.filename, pathname, target)
                else:
                    with archive.open(info) as src:
                        self._write(pathname, src, mode)
                count += 1
        return count

    def _extract_tar(self, filename):
        count = 0
        with tarfile.open(filename, "r:gz") as archive:
            for member in archive:
                if member.isdir():
                    continue
                if not (member.isfile() or member.issym() or member.islnk()):
                    log.warning("Skipping unsupported archive entry: {}", member.name)
                    continue

                pathname = self._destination(member.name)
                if member.issym():
                    self._symlink(member.name, pathname, member.linkname)
                elif member.islnk():
                    source = self._destination(member.linkname)
                    raise_error_if(
                        not fs.path.isfile(source),
                        "Archive hard link '{}' refers to missing entry '{}'",
                        member.name, member.linkname, type=ExtractionError)
                    self._prepare(pathname)
                    shutil.copy2(source, pathname)
                else:
                    with archive.extractfile(member) as src:
                        self._write(pathname, src, member.mode)
                count += 1
        return count

    def extract(self, filename, pathname, fmt=None, platform=None):
        """
        Extracts an archive, dropping its top-level directory.

        Args:
            filename (str): Path of the archive.
            pathname (str): Destination directory. Created if missing.
            fmt (str, optional): Archive format, "zip" or "tar.gz".
                Detected from the archive content when not given.
            platform (Platform, optional): Platform the archive was
                published for. Only used to warn about unexpected formats.

        Returns:
            Number of files written.

        Raises:
            ExtractionError: if the archive is corrupt, contains no files,
                or has entries that would land outside the destination.
        """
        raise_error_if(
            fmt is not None and fmt not in SUPPORTED_FORMATS,
            "Unsupported archive format: '{}'", fmt, type=InvalidArgumentError)

        fmt = fmt or detect_format(filename)
        if platform is not None:
            platform = Platform.normalize(platform)
            if platform.archive_format != fmt:
                log.warning("Archive {} is a {} archive, expected {} for {}",
                            fs.path.basename(filename), fmt, platform.archive_format, platform)

        fs.makedirs(pathname)
        self._rootdir = fs.path.realpath(pathname)
        try:
            log.verbose("Extracting {} ({}) into {}", filename, fmt, pathname)
            if fmt == ZIP:
                count = self._extract_zip(filename)
            else:
                count = self._extract_tar(filename)
        except _FORMAT_ERRORS as e:
            raise ExtractionError(f"Failed to extract archive '{filename}': {e}") from e
        finally:
            self._rootdir = None

        raise_error_if(count == 0, "Archive '{}' contains no files", filename, type=ExtractionError)
        log.verbose("Extracted {} files", count)
        return count


def extract(filename, pathname, fmt=None, platform=None):
    return ArchiveExtractor().extract(filename, pathname, fmt=fmt, platform=platform)
