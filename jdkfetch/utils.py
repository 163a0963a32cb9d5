import os
import time
from functools import wraps


_SIZE_UNITS = [("B", 0), ("KiB", 0), ("MiB", 1), ("GiB", 2), ("TiB", 2)]


def as_human_size(size):
    for unit, precision in _SIZE_UNITS:
        if size <= 1024 or unit == _SIZE_UNITS[-1][0]:
            return "{0} {1}".format(round(size, ndigits=precision), unit)
        size /= 1024


def call_and_catch(f, *args, **kwargs):
    """ Calls f and returns its result, or None if it raises an Exception. """
    try:
        return f(*args, **kwargs)
    except Exception:
        return None


def expand_path(value):
    return os.path.expandvars(os.path.expanduser(value))


def shorten(string, count=30):
    if len(string) <= count:
        return string
    keep = max(1, count // 2 - 1)
    return string[:keep] + "..." + string[-keep + 1:]


class duration(object):
    """ Wall clock time since creation, printable as e.g. '1min 05s'. """

    def __init__(self):
        self._start = time.time()

    @property
    def seconds(self):
        return time.time() - self._start

    def __str__(self):
        elapsed = time.gmtime(self.seconds)
        if self.seconds >= 3600:
            return time.strftime("%Hh %Mmin %Ss", elapsed)
        if self.seconds >= 60:
            return time.strftime("%Mmin %Ss", elapsed)
        return time.strftime("%Ss", elapsed)


BACKOFF = [1, 4, 10, 15, 20, 25, 35, 40]


def retried(exc_type, count=3, backoff=None):
    """
    Decorator that calls a function up to count times.

    The function is called again when it raises exc_type, after
    sleeping for the next number of seconds in the backoff table.
    The last exception is raised once all attempts have failed.

    Example:

        .. code-block:: python

            @retried(NetworkError, count=3)
            def fetch():
                ...

    """
    backoff = backoff or BACKOFF
    count = max(1, count)

    def decorate(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            for attempt in range(1, count + 1):
                try:
                    return f(*args, **kwargs)
                except exc_type as e:
                    if attempt >= count:
                        raise
                    delay = backoff[min(attempt - 1, len(backoff) - 1)]
                    from jdkfetch import log
                    log.warning("{} (attempt {}/{}), retrying in {}s", e, attempt, count, delay)
                    time.sleep(delay)
        return wrapper
    return decorate
