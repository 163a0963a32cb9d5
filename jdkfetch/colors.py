import logging
import sys

from colorama import Fore, Style

from jdkfetch import config


_LEVEL_COLORS = [
    (logging.ERROR, Fore.RED),
    (logging.WARNING, Fore.YELLOW),
]


def enabled():
    """ Colors are used on terminals unless jdkfetch.colors is false. """
    return sys.stdout.isatty() and sys.stderr.isatty() and \
        config.getboolean("jdkfetch", "colors", True)


def colorize(s, color):
    return color + Style.BRIGHT + s + Style.RESET_ALL if enabled() else s


def highlight(s, levelno):
    for level, color in _LEVEL_COLORS:
        if levelno >= level:
            return colorize(s, color)
    return s
