import glob
import logging
import os
import sys
import traceback
from contextlib import contextmanager
from datetime import datetime

import tqdm
if os.name == "nt":
    # tqdm initializes colorama which breaks vt100 sequences in Windows terminals
    import colorama
    colorama.deinit()
    os.system("")

from jdkfetch import colors
from jdkfetch import config
from jdkfetch import filesystem as fs
from jdkfetch.error import JdkFetchError


EXCEPTION = 5
DEBUG = logging.DEBUG
VERBOSE = 15
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR
SILENCE = logging.CRITICAL + 10

LEVELS = [EXCEPTION, DEBUG, VERBOSE, INFO, WARNING, ERROR, SILENCE]

logging.addLevelName(VERBOSE, "VERBOSE")
logging.addLevelName(EXCEPTION, "EXCEPT")
logging.raiseExceptions = False


def _render(record):
    """ Messages use str.format() placeholders, not %-style. """
    try:
        return record.msg.format(*record.args)
    except Exception:
        return str(record.msg)


class Formatter(logging.Formatter):
    """
    Brace-style record formatter.

    The template may reference {asctime}, {levelname} and {message}.
    Console formatters highlight warnings and errors.
    """

    def __init__(self, template, highlight=False):
        super().__init__()
        self.template = template
        self.highlight = highlight

    def format(self, record):
        message = _render(record)
        if self.highlight:
            message = colors.highlight(message, record.levelno)
        return self.template.format(
            asctime=datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f"),
            levelname=record.levelname,
            message=message)


class LevelFilter(logging.Filter):
    def __init__(self, accept):
        super().__init__()
        self.accept = accept

    def filter(self, record):
        return self.accept(record.levelno)


class TqdmStream(object):
    """ Writes around active progress bars instead of through them. """

    def __init__(self, stream):
        self.stream = stream

    def write(self, msg):
        with tqdm.tqdm.external_write_mode(file=self.stream, nolock=False):
            self.stream.write(msg)

    def flush(self):
        getattr(self.stream, "flush", lambda: None)()


def is_interactive():
    return sys.stdout.isatty() and sys.stderr.isatty()


def _console_handler(stream, accept):
    if is_interactive():
        stream = TqdmStream(stream)
    h = logging.StreamHandler(stream)
    h.setFormatter(Formatter("[{levelname:>7}] {message}", highlight=is_interactive()))
    h.addFilter(LevelFilter(accept))
    return h


def _is_error(levelno):
    return levelno >= ERROR or levelno == EXCEPTION


_logger = logging.getLogger("jdkfetch")
_logger.setLevel(EXCEPTION)
_logger.propagate = False

_stdout = _console_handler(sys.stdout, lambda levelno: not _is_error(levelno))
_stderr = _console_handler(sys.stderr, _is_error)
_logger.addHandler(_stdout)
_logger.addHandler(_stderr)


def start_file_log():
    """
    Starts logging everything, including backtraces, to a new file.

    Files are named by timestamp and kept in the configured log
    directory. The oldest are removed so that at most
    jdkfetch.logcount files remain.

    Returns:
        Path of the new log file.
    """
    logpath = config.get_logpath()
    logcount = max(1, config.getint("jdkfetch", "logcount", os.environ.get("JDKFETCH_LOGCOUNT", 25)))
    fs.makedirs(logpath)

    previous = sorted(glob.glob(fs.path.join(logpath, "*T*.log")))
    for stale in previous[:max(0, len(previous) - logcount + 1)]:
        fs.unlink(stale, ignore_errors=True)

    logfile = fs.path.join(logpath, datetime.now().strftime("%Y-%m-%dT%H%M%S.%f") + ".log")
    h = logging.FileHandler(logfile)
    h.setLevel(EXCEPTION)
    h.setFormatter(Formatter("{asctime} [{levelname:>7}] {message}"))
    _logger.addHandler(h)
    return logfile


def info(fmt, *args, **kwargs):
    _logger.log(INFO, fmt, *args, **kwargs)


def warning(fmt, *args, **kwargs):
    _logger.log(WARNING, fmt, *args, **kwargs)


def verbose(fmt, *args, **kwargs):
    _logger.log(VERBOSE, fmt, *args, **kwargs)


def debug(fmt, *args, **kwargs):
    _logger.log(DEBUG, fmt, *args, **kwargs)


def error(fmt, *args, **kwargs):
    _logger.log(ERROR, fmt, *args, **kwargs)


def format_exception_msg(exc):
    """
    Returns a one-line description of an exception.

    Errors raised by jdkfetch itself are described by their message.
    Anything else is a bug, so the innermost frame is included.
    """
    if isinstance(exc, JdkFetchError):
        return str(exc)

    frames = traceback.extract_tb(exc.__traceback__)
    if not frames:
        return "{}: {}".format(type(exc).__name__, exc)

    frame = frames[-1]
    return "{}: {} ({}, line {}, in {})".format(
        type(exc).__name__,
        str(exc) or frame.line,
        fs.path.basename(frame.filename),
        frame.lineno,
        frame.name)


def exception(exc, error=True):
    """ Logs an exception and, at EXCEPTION level, its backtrace. """
    if error:
        _logger.log(ERROR, format_exception_msg(exc))
    for line in "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).splitlines():
        _logger.log(EXCEPTION, line.rstrip().replace("{", "{{").replace("}", "}}"))


class _QuietProgress(object):
    def __init__(self, desc):
        verbose(desc)

    def __enter__(self):
        return self

    def __exit__(self, type, value, tb):
        return False

    def update(self, n=1):
        pass


def progress(desc, count, unit):
    """
    Returns a progress bar context.

    A tqdm bar is shown on interactive terminals. Otherwise, and in
    verbose mode where bars would interleave with log lines, the
    description is logged once.
    """
    if not is_interactive() or is_verbose():
        return _QuietProgress(desc)
    bar_format = None if count else "{desc}{n_fmt}{unit} [{elapsed}]"
    p = tqdm.tqdm(total=count or None, unit=unit, unit_scale=True,
                  bar_format=bar_format, dynamic_ncols=True)
    p.set_description("[   INFO] " + desc)
    return p


def set_level(level):
    """ Sets the level of terminal output. """
    if level not in LEVELS:
        raise ValueError("invalid log level")
    _stdout.setLevel(level)
    _stderr.setLevel(level)


def is_verbose():
    return _stdout.level <= VERBOSE


@contextmanager
def handler(h):
    _logger.addHandler(h)
    try:
        yield
    finally:
        _logger.removeHandler(h)


set_level(INFO)
