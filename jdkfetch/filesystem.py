import os
import pathlib
import shutil
import tempfile


path = os.path


def as_posix(pathname):
    """ Returns pathname with forward slashes, the separator used in archives. """
    return pathname.replace("\\", "/")


def is_relative_to(pathname, rootdir):
    """ Returns True if pathname is rootdir or lies below it. """
    try:
        pathlib.PurePath(pathname).relative_to(pathlib.PurePath(rootdir))
    except ValueError:
        return False
    return True


def userhome():
    return os.path.expanduser("~")


def makedirs(pathname):
    os.makedirs(pathname, exist_ok=True)


def mkdtemp(prefix, dir):
    makedirs(dir)
    return tempfile.mkdtemp(prefix=prefix, dir=dir)


def exists(pathname):
    return os.path.exists(pathname)


def isdir(pathname):
    return os.path.isdir(pathname)


def rename(old, new):
    """ Renames old to new. Fails if new is an existing directory. """
    os.rename(old, new)


def replace(old, new):
    """ Renames old to new, atomically replacing new if it is a file. """
    os.replace(old, new)


def rmtree(pathname, ignore_errors=False):
    shutil.rmtree(pathname, ignore_errors=ignore_errors)


def unlink(pathname, ignore_errors=False):
    """ Removes a file, a symlink or a directory tree. """
    try:
        if os.path.isdir(pathname) and not os.path.islink(pathname):
            shutil.rmtree(pathname)
        else:
            os.unlink(pathname)
    except OSError:
        if not ignore_errors:
            raise


def file_size(pathname):
    return os.stat(pathname).st_size
