from jdkfetch import filesystem as fs
from jdkfetch import log
from jdkfetch import utils
from jdkfetch.error import NetworkError


CHUNK_SIZE = 64 * 1024


def archive_extension(url):
    return ".zip" if url.lower().endswith(".zip") else ".tar.gz"


def download_path(cachedir, version, url):
    return fs.path.join(cachedir, f"jdk{version}{archive_extension(url)}")


class Downloader(object):
    """
    Streams URLs to local files.

    Content is written to a temporary file next to the destination and
    moved into place once complete, so an interrupted download never
    leaves a truncated file at the destination path.
    """

    def __init__(self, http):
        self._http = http

    def download(self, url, pathname):
        dirname = fs.path.dirname(pathname)
        if dirname:
            fs.makedirs(dirname)

        partname = pathname + ".part"
        name = fs.path.basename(pathname)
        try:
            with self._http.stream(url) as response:
                size = int(response.headers.get("content-length", 0) or 0)
                log.verbose("{} -> {}", url, pathname)
                with log.progress("Downloading {0}".format(utils.shorten(name)), size, "B") as pbar:
                    with open(partname, "wb") as out_file:
                        for data in response.iter_content(chunk_size=CHUNK_SIZE):
                            out_file.write(data)
                            pbar.update(len(data))

            actual_size = fs.file_size(partname)
            if size != 0 and size != actual_size:
                raise NetworkError(
                    f"Downloaded file was truncated to {actual_size}/{size} bytes: {name}")

            fs.replace(partname, pathname)
        except BaseException:
            utils.call_and_catch(fs.unlink, partname)
            raise

        log.verbose("Downloaded {} ({})", name, utils.as_human_size(fs.file_size(pathname)))
        return pathname
