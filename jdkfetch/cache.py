"""
Local JDK cache.

The cache directory holds one directory per JDK version. A version
directory is only ever created by renaming a fully populated staging
directory into place, so its existence is proof of a complete
installation.

Layout::

    <cachedir>/
        plugin-modernizer-jdk-<version>/            installed JDK tree
        staging/plugin-modernizer-jdk-<version>/    staging directories
        jdk<version>.tar.gz | .zip                  downloaded archive
        locks/plugin-modernizer-jdk-<version>.lock

"""

import os
from contextlib import contextmanager
from threading import Lock, RLock

import fasteners

from jdkfetch import config
from jdkfetch import filesystem as fs
from jdkfetch import log
from jdkfetch import utils
from jdkfetch.error import raise_error_on_exception
from jdkfetch.matcher import validate_version
from jdkfetch.platforms import Platform


ENTRY_PREFIX = "plugin-modernizer-jdk-"


def java_home(pathname):
    """
    Returns JAVA_HOME for an installed JDK tree.

    macOS archives use the bundle layout Contents/Home/bin/java,
    other platforms bin/java.
    """
    macos_home = fs.path.join(pathname, "Contents", "Home")
    if fs.isdir(macos_home):
        return macos_home
    return pathname


def java_executable(pathname, platform):
    platform = Platform.normalize(platform)
    return fs.path.join(java_home(pathname), "bin", platform.exe_name("java"))


class JdkCache(object):
    def __init__(self, cachedir=None):
        self.cachedir = fs.path.abspath(cachedir or config.get_cachedir())
        self._locks_mutex = Lock()
        self._thread_locks = {}

    def entry_name(self, version):
        return ENTRY_PREFIX + validate_version(version)

    def entry_path(self, version):
        return fs.path.join(self.cachedir, self.entry_name(version))

    def lookup(self, version):
        """ Returns the installation path of a version, or None if not cached. """
        path = self.entry_path(version)
        return path if fs.isdir(path) else None

    def _lock_path(self, version):
        return fs.path.join(self.cachedir, "locks", self.entry_name(version) + ".lock")

    def _thread_lock(self, version):
        with self._locks_mutex:
            name = self.entry_name(version)
            if name not in self._thread_locks:
                self._thread_locks[name] = RLock()
            return self._thread_locks[name]

    @contextmanager
    def lock(self, version):
        """
        Serializes work on a version.

        Threads in this process are serialized by an in-memory lock,
        other processes by a lock file in the cache directory.
        """
        lock_path = self._lock_path(version)
        fs.makedirs(fs.path.dirname(lock_path))

        with self._thread_lock(version):
            file_lock = fasteners.InterProcessLock(lock_path)
            if not file_lock.acquire(blocking=False):
                log.info("JDK {} is locked by another process, please wait...", version)
                file_lock.acquire()
            try:
                yield
            finally:
                file_lock.release()

    def _staging_root(self, version):
        return fs.path.join(self.cachedir, "staging", self.entry_name(version))

    def _purge_staging(self, version):
        root = self._staging_root(version)
        if not fs.isdir(root):
            return
        for stale in [fs.path.join(root, name) for name in os.listdir(root)]:
            log.debug("Removing stale staging directory {}", stale)
            fs.rmtree(stale, ignore_errors=True)

    @contextmanager
    def staging(self, version):
        """
        Creates a staging directory for a version.

        Must be called with the version lock held. Leftovers from
        interrupted runs are removed first. The directory is removed
        on exit unless it has been published.
        """
        self._purge_staging(version)
        dirname = fs.mkdtemp(prefix="tmp-", dir=self._staging_root(version))
        try:
            yield dirname
        finally:
            if fs.exists(dirname):
                utils.call_and_catch(fs.rmtree, dirname, ignore_errors=True)

    def publish(self, staging, version):
        """ Atomically moves a populated staging directory into place. """
        path = self.entry_path(version)
        with raise_error_on_exception("Failed to install JDK {} into {}: {reason}", version, path):
            fs.rename(staging, path)
        log.verbose("Published {}", path)
        return path
