import io
import json
import os
import shutil
import tarfile
import tempfile
import unittest
import zipfile
from contextlib import contextmanager

from jdkfetch.error import NetworkError
from jdkfetch.http import FetchResult


def release(*names, base="https://github.com/adoptium/releases/download"):
    return {
        "tag_name": "release",
        "assets": [
            {"name": name, "browser_download_url": f"{base}/{name}"}
            for name in names
        ],
    }


def listing(*releases):
    return json.dumps(list(releases))


class FakeResponse(object):
    def __init__(self, body, headers=None):
        self.body = body
        self.headers = headers if headers is not None else {"content-length": str(len(body))}
        self.closed = False

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i:i + chunk_size]

    def close(self):
        self.closed = True


class FakeHttp(object):
    """ Serves canned responses and records every request made. """

    def __init__(self, pages=None, files=None):
        self.pages = pages or {}
        self.files = files or {}
        self.requests = []

    def fetch(self, url, headers=None):
        self.requests.append(url)
        page = self.pages.get(url, (404, "Not Found"))
        if isinstance(page, Exception):
            raise page
        status, text = page
        return FetchResult(status, text)

    @contextmanager
    def stream(self, url, headers=None):
        self.requests.append(url)
        body = self.files.get(url)
        if isinstance(body, Exception):
            raise body
        if body is None:
            raise NetworkError(f"Download from '{url}' failed with status '404'", status_code=404)
        if isinstance(body, FakeResponse):
            yield body
        else:
            yield FakeResponse(body)


def make_zip(entries, directories=()):
    """ Returns the bytes of a zip archive with the given {name: bytes} entries. """
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        for name in directories:
            archive.writestr(zipfile.ZipInfo(name.rstrip("/") + "/"), b"")
        for name, data in entries.items():
            archive.writestr(name, data)
    return buf.getvalue()


def make_tar_gz(entries, directories=(), symlinks=None, hardlinks=None, modes=None):
    """ Returns the bytes of a gzip compressed tar archive. """
    modes = modes or {}
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as archive:
        for name in directories:
            info = tarfile.TarInfo(name)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            archive.addfile(info)
        for name, data in entries.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = modes.get(name, 0o644)
            archive.addfile(info, io.BytesIO(data))
        for name, target in (symlinks or {}).items():
            info = tarfile.TarInfo(name)
            info.type = tarfile.SYMTYPE
            info.linkname = target
            archive.addfile(info)
        for name, target in (hardlinks or {}).items():
            info = tarfile.TarInfo(name)
            info.type = tarfile.LNKTYPE
            info.linkname = target
            archive.addfile(info)
    return buf.getvalue()


def tree(path):
    """ Lists all files below path, relative and with forward slashes. """
    result = []
    for dirpath, dirs, files in os.walk(path):
        for f in files:
            result.append(os.path.relpath(os.path.join(dirpath, f), path).replace(os.sep, "/"))
    return sorted(result)


class TempDirTestCase(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp(prefix="jdkfetch-test-")

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def path(self, *parts):
        return os.path.join(self.tmpdir, *parts)

    def write(self, name, data):
        pathname = self.path(name)
        os.makedirs(os.path.dirname(pathname), exist_ok=True)
        with open(pathname, "wb") as f:
            f.write(data)
        return pathname
